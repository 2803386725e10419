"""
Employee Gap Analysis

Compares one employee's applicable requirements against their full
certification history (revoked entries included) and reports a status
per required skill.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from services.compliance_service.certifications import latest_by_key
from services.compliance_service.expiration import is_expiring_soon, utcnow
from services.compliance_service.records import (
    CertificationRecord,
    EmployeeRecord,
    RequirementRecord,
    SkillRecord,
)
from services.compliance_service.requirements import applicable_requirements, format_requirement_source
from services.compliance_service.status import is_expired


class GapStatus(str, Enum):
    OK = "ok"
    MISSING = "missing"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    INSUFFICIENT_LEVEL = "insufficient_level"
    REVOKED = "revoked"
    OUTDATED = "outdated"


class SkillGap(BaseModel):
    """Gap report row for one required skill."""
    skill_id: str
    skill_name: str
    skill_code: Optional[str] = None
    required_level: int
    achieved_level: int = 0
    status: GapStatus
    certification_id: Optional[str] = None
    achieved_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    requirement_sources: list[str] = []


def _gap_status(
    required_level: int,
    held: CertificationRecord | None,
    now: datetime,
    expiring_soon_days: int,
) -> GapStatus:
    if held is None:
        return GapStatus.MISSING
    if held.is_revoked:
        return GapStatus.REVOKED
    if held.is_outdated:
        return GapStatus.OUTDATED
    if is_expired(held.expires_at, now):
        return GapStatus.EXPIRED
    if held.achieved_level < required_level:
        return GapStatus.INSUFFICIENT_LEVEL
    if is_expiring_soon(held.expires_at, expiring_soon_days, now):
        return GapStatus.EXPIRING_SOON
    return GapStatus.OK


def analyze_employee_gaps(
    employee: EmployeeRecord,
    requirements: Sequence[RequirementRecord],
    certifications: Sequence[CertificationRecord],
    skills: Mapping[str, SkillRecord],
    now: datetime | None = None,
    expiring_soon_days: int = 30,
) -> list[SkillGap]:
    """
    Build the gap report for one employee.

    Args:
        employee: Employee to analyze
        requirements: All requirement rows (filtered by scope here)
        certifications: Employee's certification history, revoked included
        skills: Skill records by id; requirements for unknown skills are skipped
        now: Evaluation instant
        expiring_soon_days: Window for the expiring_soon status

    Returns:
        One SkillGap per required skill, in order of first matching requirement
    """
    now = now or utcnow()

    # One row per skill at the max level among matching rules
    levels: dict[str, int] = {}
    sources: dict[str, list[str]] = {}
    for req in applicable_requirements(employee, employee.project_ids, requirements):
        if req.skill_id not in skills:
            continue
        levels[req.skill_id] = max(levels.get(req.skill_id, 0), req.effective_level)
        sources.setdefault(req.skill_id, []).append(format_requirement_source(req))

    held_by_key = latest_by_key(c for c in certifications if c.employee_id == employee.id)

    gaps = []
    for skill_id, required_level in levels.items():
        skill = skills[skill_id]
        held = held_by_key.get((employee.id, skill_id))

        gaps.append(
            SkillGap(
                skill_id=skill_id,
                skill_name=skill.name,
                skill_code=skill.code,
                required_level=required_level,
                achieved_level=held.achieved_level if held else 0,
                status=_gap_status(required_level, held, now, expiring_soon_days),
                certification_id=held.id if held else None,
                achieved_at=held.achieved_at if held else None,
                expires_at=held.expires_at if held else None,
                requirement_sources=sources[skill_id],
            )
        )

    return gaps
