"""
Pytest configuration and shared fixtures for Caliber tests.

This file provides:
- A throwaway SQLite database wired in before any app module is imported
- Record factories for the pure compliance engine
- An ORM-seeded organization for repository and API tests
"""

import os
import tempfile
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Generator

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="caliber-tests-")
os.environ["POSTGRES_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'caliber.db')}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from services.compliance_service.records import (  # noqa: E402
    CertificationRecord,
    EmployeeRecord,
    RequirementRecord,
    RequirementScope,
    RevisionStatus,
    SkillRecord,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Record Fixtures
# ============================================================================

@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def make_employee():
    """Factory for EmployeeRecord."""
    def _make(id="e1", site_id="austin", department_id=None, role_id=None, project_ids=(), **kwargs):
        return EmployeeRecord(
            id=id,
            site_id=site_id,
            department_id=department_id,
            role_id=role_id,
            project_ids=frozenset(project_ids),
            name=kwargs.pop("name", id),
            employee_number=kwargs.pop("employee_number", id.upper()),
            **kwargs,
        )
    return _make


@pytest.fixture
def make_skill():
    """Factory for SkillRecord."""
    def _make(id="s1", name=None, **kwargs):
        return SkillRecord(id=id, name=name or id, **kwargs)
    return _make


@pytest.fixture
def make_requirement():
    """Factory for RequirementRecord. Scope selectors are keyword args."""
    counter = iter(range(1, 10_000))

    def _make(
        skill_id="s1",
        required_level=1,
        site_id=None,
        department_id=None,
        role_id=None,
        project_id=None,
        **names,
    ):
        return RequirementRecord(
            id=f"r{next(counter)}",
            skill_id=skill_id,
            required_level=required_level,
            scope=RequirementScope(
                site_id=site_id,
                department_id=department_id,
                role_id=role_id,
                project_id=project_id,
            ),
            **names,
        )
    return _make


@pytest.fixture
def make_certification():
    """Factory for CertificationRecord on an active revision."""
    counter = iter(range(1, 10_000))

    def _make(
        employee_id="e1",
        skill_id="s1",
        achieved_level=1,
        achieved_at=None,
        expires_at=None,
        revoked_at=None,
        revision_status=RevisionStatus.ACTIVE,
        id=None,
    ):
        return CertificationRecord(
            id=id or f"c{next(counter)}",
            employee_id=employee_id,
            skill_id=skill_id,
            achieved_level=achieved_level,
            achieved_at=achieved_at,
            expires_at=expires_at,
            revoked_at=revoked_at,
            revision_id="rev-1",
            revision_status=revision_status,
        )
    return _make


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db() -> Generator:
    """Fresh schema per test on the SQLite test database."""
    from shared.db.session import SessionLocal, engine
    from shared.models import Base

    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def org(db) -> SimpleNamespace:
    """
    Small seeded organization.

    - Austin and Reno sites, Maintenance department
    - Technician and Operator roles, Line 4 project at Austin
    - alice: Austin Technician on Line 4
    - bob: Austin Operator
    - carol: Reno Technician
    - dave: Austin Technician, terminated
    - Lockout Tagout (12 month validity) with active Rev A
    - Forklift (never expires, max level 3) with active Rev A
    """
    from shared.models import (
        Department,
        Employee,
        EmployeeProject,
        Project,
        Role,
        Site,
        Skill,
        SkillRevision,
    )

    austin = Site(name="Austin Plant", code="ATX-01")
    reno = Site(name="Reno Plant", code="RNO-01")
    maintenance = Department(name="Maintenance")
    technician = Role(name="Technician")
    operator = Role(name="Operator")
    db.add_all([austin, reno, maintenance, technician, operator])
    db.flush()

    line4 = Project(site_id=austin.id, name="Line 4")
    db.add(line4)
    db.flush()

    alice = Employee(
        site_id=austin.id,
        department_id=maintenance.id,
        role_id=technician.id,
        employee_number="E-001",
        name="Alice",
    )
    bob = Employee(site_id=austin.id, role_id=operator.id, employee_number="E-002", name="Bob")
    carol = Employee(site_id=reno.id, role_id=technician.id, employee_number="E-003", name="Carol")
    dave = Employee(
        site_id=austin.id,
        role_id=technician.id,
        employee_number="E-004",
        name="Dave",
        status="terminated",
    )
    db.add_all([alice, bob, carol, dave])
    db.flush()
    db.add(EmployeeProject(employee_id=alice.id, project_id=line4.id))

    loto = Skill(name="Lockout Tagout", code="SAF-001", max_level=1, validity_months=12)
    forklift = Skill(name="Forklift", code="SAF-002", max_level=3, validity_months=None)
    db.add_all([loto, forklift])
    db.flush()

    loto_rev = SkillRevision(
        skill_id=loto.id,
        revision_label="Rev A",
        status="active",
        requires_retraining=False,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    forklift_rev = SkillRevision(
        skill_id=forklift.id,
        revision_label="Rev A",
        status="active",
        requires_retraining=False,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    db.add_all([loto_rev, forklift_rev])
    db.commit()

    return SimpleNamespace(
        austin=austin.id,
        reno=reno.id,
        maintenance=maintenance.id,
        technician=technician.id,
        operator=operator.id,
        line4=line4.id,
        alice=alice.id,
        bob=bob.id,
        carol=carol.id,
        dave=dave.id,
        loto=loto.id,
        forklift=forklift.id,
        loto_rev=loto_rev.id,
        forklift_rev=forklift_rev.id,
    )


# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest.fixture
def client(db) -> Generator:
    """FastAPI test client backed by the fresh test schema."""
    from fastapi.testclient import TestClient
    from apps.api_service.main import app

    with TestClient(app) as test_client:
        yield test_client
