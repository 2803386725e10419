#!/usr/bin/env python3
"""
Seed Catalog Script

Loads seed/catalog_seed.json (sites, departments, roles, skills) with
upsert semantics. Each new skill gets one active revision so it can be
certified against immediately.
Usage: python scripts/seed_catalog.py
"""

import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.db.session import get_db
from shared.models import Department, Role, Site, Skill, SkillRevision
from shared.utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

SEED_FILE = Path(__file__).parent.parent / "seed" / "catalog_seed.json"


def load_catalog_seed(seed_file: Path = SEED_FILE) -> dict:
    """Load the catalog seed file."""
    if not seed_file.exists():
        logger.error("Seed file not found", path=str(seed_file))
        raise FileNotFoundError(f"Seed file not found: {seed_file}")

    with open(seed_file) as f:
        return json.load(f)


def _upsert_named(db: Session, model, rows: list[dict]) -> int:
    """Upsert org entities keyed by name."""
    for row in rows:
        existing = db.execute(
            select(model).where(model.name == row["name"])
        ).scalar_one_or_none()
        if not existing:
            db.add(model(name=row["name"]))
    return len(rows)


def seed_sites(db: Session, rows: list[dict]) -> int:
    for row in rows:
        existing = db.execute(
            select(Site).where(Site.code == row["code"])
        ).scalar_one_or_none()

        if existing:
            existing.name = row["name"]
            existing.timezone = row.get("timezone", "UTC")
        else:
            db.add(Site(code=row["code"], name=row["name"], timezone=row.get("timezone", "UTC")))
    return len(rows)


def seed_skills(db: Session, rows: list[dict]) -> int:
    """
    Upsert skills keyed by code.

    Updating validity_months here does not touch existing certifications;
    their expiry was fixed when they were recorded.
    """
    for row in rows:
        skill = db.execute(
            select(Skill).where(Skill.code == row["code"])
        ).scalar_one_or_none()

        if skill:
            skill.name = row["name"]
            skill.max_level = row.get("max_level", 1)
            skill.validity_months = row.get("validity_months")
            logger.debug("Updated skill", code=row["code"])
            continue

        skill = Skill(
            code=row["code"],
            name=row["name"],
            max_level=row.get("max_level", 1),
            validity_months=row.get("validity_months"),
        )
        db.add(skill)
        db.flush()

        db.add(
            SkillRevision(
                skill_id=skill.id,
                revision_label=row.get("revision", "Rev A"),
                status="active",
                requires_retraining=False,
            )
        )
        logger.debug("Inserted skill", code=row["code"])

    return len(rows)


def seed_catalog(seed: dict) -> dict:
    """Seed every catalog section. Returns counts per section."""
    with get_db() as db:
        counts = {
            "sites": seed_sites(db, seed.get("sites", [])),
            "departments": _upsert_named(db, Department, seed.get("departments", [])),
            "roles": _upsert_named(db, Role, seed.get("roles", [])),
            "skills": seed_skills(db, seed.get("skills", [])),
        }

    logger.info("Catalog seeded successfully", **counts)
    return counts


if __name__ == "__main__":
    try:
        counts = seed_catalog(load_catalog_seed())
        print(f"✓ Seeded catalog: {counts}")
    except Exception as e:
        logger.exception("Failed to seed catalog")
        print(f"✗ Failed to seed catalog: {e}")
        sys.exit(1)
