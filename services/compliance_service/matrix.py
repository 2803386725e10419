"""
Matrix Builder

Builds the full employee x skill compliance grid from in-memory records.
Pure transformation: callers fetch fresh snapshots and pass them in.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from services.compliance_service.certifications import CertificationIndex
from services.compliance_service.expiration import utcnow
from services.compliance_service.records import (
    CertificationRecord,
    EmployeeRecord,
    RequirementRecord,
    SkillRecord,
)
from services.compliance_service.requirements import index_requirements_by_skill, resolve
from services.compliance_service.status import MatrixStatus, classify
from shared.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Output Models
# =============================================================================

class MatrixCell(BaseModel):
    """One (employee, skill) cell."""
    skill_id: str
    employee_id: str
    required_level: int
    achieved_level: int
    expires_at: Optional[datetime] = None
    status: MatrixStatus
    requirement_sources: list[str] = Field(default_factory=list)


class MatrixEmployee(BaseModel):
    """Employee row header."""
    id: str
    name: str
    employee_number: str
    site_name: str
    role_name: Optional[str] = None


class MatrixSkill(BaseModel):
    """Skill column header."""
    id: str
    name: str
    code: str
    max_level: int


class MatrixData(BaseModel):
    """Complete compliance grid: cells[employee_id][skill_id]."""
    employees: list[MatrixEmployee]
    skills: list[MatrixSkill]
    cells: dict[str, dict[str, MatrixCell]]

    def iter_cells(self):
        for row in self.cells.values():
            yield from row.values()


# =============================================================================
# Builder
# =============================================================================

def build_matrix(
    employees: Sequence[EmployeeRecord],
    skills: Sequence[SkillRecord],
    requirements: Sequence[RequirementRecord],
    certifications: Sequence[CertificationRecord],
    now: datetime | None = None,
) -> MatrixData:
    """
    Build the compliance matrix.

    Args:
        employees: Employees to evaluate (soft-deleted rows already excluded)
        skills: Skills to evaluate
        requirements: All requirement rows; rows for unknown skills are ignored
        certifications: Certifications; revoked rows are dropped here
        now: Evaluation instant, fixed for the whole build

    Returns:
        MatrixData with one cell per employee x skill
    """
    now = now or utcnow()

    requirements_by_skill = index_requirements_by_skill(requirements)
    cert_index = CertificationIndex.from_records(certifications)

    cells: dict[str, dict[str, MatrixCell]] = {}

    for emp in employees:
        row: dict[str, MatrixCell] = {}

        for skill in skills:
            resolved = resolve(
                emp,
                emp.project_ids,
                skill.id,
                requirements_by_skill.get(skill.id, []),
            )
            cert = cert_index.lookup(emp.id, skill.id)

            row[skill.id] = MatrixCell(
                skill_id=skill.id,
                employee_id=emp.id,
                required_level=resolved.level,
                achieved_level=cert.achieved_level if cert else 0,
                expires_at=cert.expires_at if cert else None,
                status=classify(resolved.level, cert, now),
                requirement_sources=resolved.sources,
            )

        cells[emp.id] = row

    logger.debug(
        "Built compliance matrix",
        employees=len(employees),
        skills=len(skills),
        requirements=len(requirements),
        certifications=len(cert_index),
    )

    return MatrixData(
        employees=[
            MatrixEmployee(
                id=emp.id,
                name=emp.name,
                employee_number=emp.employee_number,
                site_name=emp.site_name,
                role_name=emp.role_name,
            )
            for emp in employees
        ],
        skills=[
            MatrixSkill(
                id=skill.id,
                name=skill.name,
                code=skill.code or "",
                max_level=skill.max_level or 1,
            )
            for skill in skills
        ],
        cells=cells,
    )
