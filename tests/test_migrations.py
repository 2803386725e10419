"""
Migration Metadata Tests.

Run with:
    pytest tests/test_migrations.py -v
"""

import importlib.util
from pathlib import Path

import pytest

VERSIONS_DIR = Path(__file__).parent.parent / "shared" / "db" / "migrations" / "versions"


def _load(path: Path):
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


MIGRATIONS = sorted(VERSIONS_DIR.glob("*.py"))


class TestMigrationMetadata:
    """Tests for revision identifiers in migration modules."""

    @pytest.mark.parametrize("path", MIGRATIONS, ids=lambda p: p.stem)
    def test_docstring_matches_revision(self, path):
        module = _load(path)

        assert f"Revision ID: {module.revision}" in module.__doc__
        if module.down_revision:
            assert f"Revises: {module.down_revision}" in module.__doc__

    def test_revisions_form_a_single_chain(self):
        modules = [_load(p) for p in MIGRATIONS]
        revisions = {m.revision for m in modules}
        heads = revisions - {m.down_revision for m in modules}

        assert [m.down_revision for m in modules if m.down_revision is None] == [None]
        assert all(m.down_revision in revisions for m in modules if m.down_revision)
        assert heads == {"002_compliance_rollup"}
