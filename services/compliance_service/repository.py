"""
Compliance Repository

Data-access boundary for the compliance engine. Fetches employees, skills,
requirements and certifications and converts them into plain records.

The four queries are not run in one transaction snapshot; a certification
revoked between queries may still appear. That staleness is acceptable for
a reporting view.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from services.compliance_service.expiration import ensure_utc, utcnow
from services.compliance_service.records import (
    CertificationRecord,
    EmployeeRecord,
    RequirementRecord,
    RequirementScope,
    RevisionStatus,
    SkillRecord,
)
from services.compliance_service.revisions import select_current_revision
from shared.models import Employee, EmployeeSkill, Skill, SkillRequirement, SkillRevision
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# Employees with these statuses are left out of the matrix
EXCLUDED_EMPLOYEE_STATUSES = ("terminated",)


@dataclass
class ComplianceSnapshot:
    """Everything the matrix builder needs, fetched in one pass."""
    employees: list[EmployeeRecord] = field(default_factory=list)
    skills: list[SkillRecord] = field(default_factory=list)
    requirements: list[RequirementRecord] = field(default_factory=list)
    certifications: list[CertificationRecord] = field(default_factory=list)


# =============================================================================
# Row -> Record conversion
# =============================================================================

def employee_to_record(employee: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        id=employee.id,
        site_id=employee.site_id,
        department_id=employee.department_id,
        role_id=employee.role_id,
        project_ids=employee.project_ids,
        name=employee.name,
        employee_number=employee.employee_number,
        site_name=employee.site.name if employee.site else "",
        role_name=employee.role.name if employee.role else None,
    )


def skill_to_record(skill: Skill) -> SkillRecord:
    return SkillRecord(
        id=skill.id,
        name=skill.name,
        code=skill.code,
        max_level=skill.max_level or 1,
        validity_months=skill.validity_months,
    )


def requirement_to_record(req: SkillRequirement) -> RequirementRecord:
    return RequirementRecord(
        id=req.id,
        skill_id=req.skill_id,
        required_level=req.required_level,
        scope=RequirementScope(
            site_id=req.site_id,
            department_id=req.department_id,
            role_id=req.role_id,
            project_id=req.project_id,
        ),
        site_name=req.site.name if req.site else None,
        department_name=req.department.name if req.department else None,
        role_name=req.role.name if req.role else None,
        project_name=req.project.name if req.project else None,
    )


def certification_to_record(cert: EmployeeSkill) -> CertificationRecord:
    return CertificationRecord(
        id=cert.id,
        employee_id=cert.employee_id,
        skill_id=cert.skill_id,
        achieved_level=cert.achieved_level,
        achieved_at=ensure_utc(cert.achieved_at),
        expires_at=ensure_utc(cert.expires_at),
        revoked_at=ensure_utc(cert.revoked_at),
        revision_id=cert.skill_revision_id,
        revision_status=RevisionStatus(cert.revision.status) if cert.revision else None,
    )


# =============================================================================
# Repository
# =============================================================================

class ComplianceRepository:
    """Loads compliance records from the database."""

    def __init__(self, db: Session):
        self.db = db

    def _employee_query(self):
        return (
            select(Employee)
            .where(
                Employee.deleted_at.is_(None),
                Employee.status.not_in(EXCLUDED_EMPLOYEE_STATUSES),
            )
            .options(
                selectinload(Employee.site),
                selectinload(Employee.role),
                selectinload(Employee.project_links),
            )
        )

    def load_employees(
        self,
        site_id: str | None = None,
        department_id: str | None = None,
    ) -> list[EmployeeRecord]:
        query = self._employee_query()
        if site_id:
            query = query.where(Employee.site_id == site_id)
        if department_id:
            query = query.where(Employee.department_id == department_id)

        rows = self.db.execute(query.order_by(Employee.name)).scalars().all()
        return [employee_to_record(e) for e in rows]

    def load_employee(self, employee_id: str) -> EmployeeRecord | None:
        row = self.db.execute(
            self._employee_query().where(Employee.id == employee_id)
        ).scalar_one_or_none()
        return employee_to_record(row) if row else None

    def load_skills(self) -> list[SkillRecord]:
        rows = self.db.execute(
            select(Skill).where(Skill.deleted_at.is_(None)).order_by(Skill.name)
        ).scalars().all()
        return [skill_to_record(s) for s in rows]

    def load_requirements(self) -> list[RequirementRecord]:
        rows = self.db.execute(
            select(SkillRequirement)
            .where(SkillRequirement.deleted_at.is_(None))
            .options(
                selectinload(SkillRequirement.site),
                selectinload(SkillRequirement.department),
                selectinload(SkillRequirement.role),
                selectinload(SkillRequirement.project),
            )
            .order_by(SkillRequirement.created_at)
        ).scalars().all()
        return [requirement_to_record(r) for r in rows]

    def load_certifications(
        self,
        employee_ids: list[str] | None = None,
        include_revoked: bool = False,
    ) -> list[CertificationRecord]:
        query = (
            select(EmployeeSkill)
            .where(EmployeeSkill.deleted_at.is_(None))
            .options(selectinload(EmployeeSkill.revision))
            .order_by(EmployeeSkill.achieved_at, EmployeeSkill.created_at)
        )
        if not include_revoked:
            query = query.where(EmployeeSkill.revoked_at.is_(None))
        if employee_ids is not None:
            query = query.where(EmployeeSkill.employee_id.in_(employee_ids))

        rows = self.db.execute(query).scalars().all()
        return [certification_to_record(c) for c in rows]

    def load_snapshot(
        self,
        site_id: str | None = None,
        department_id: str | None = None,
    ) -> ComplianceSnapshot:
        """
        Load a matrix snapshot, optionally filtered by site / department.

        Excludes soft-deleted and terminated employees, soft-deleted skills
        and requirements, and revoked certifications.
        """
        employees = self.load_employees(site_id=site_id, department_id=department_id)
        filtered = bool(site_id or department_id)

        snapshot = ComplianceSnapshot(
            employees=employees,
            skills=self.load_skills(),
            requirements=self.load_requirements(),
            certifications=self.load_certifications(
                employee_ids=[e.id for e in employees] if filtered else None,
            ),
        )

        logger.info(
            "Loaded compliance snapshot",
            site_id=site_id,
            department_id=department_id,
            employees=len(snapshot.employees),
            skills=len(snapshot.skills),
            requirements=len(snapshot.requirements),
            certifications=len(snapshot.certifications),
        )
        return snapshot

    def load_employee_history(
        self,
        employee_id: str,
    ) -> tuple[EmployeeRecord | None, list[CertificationRecord]]:
        """Employee record plus every certification, revoked included."""
        employee = self.load_employee(employee_id)
        if employee is None:
            return None, []
        return employee, self.load_certifications(employee_ids=[employee_id], include_revoked=True)

    def count_employees(self) -> int:
        return self.db.execute(
            select(func.count(Employee.id)).where(
                Employee.deleted_at.is_(None),
                Employee.status.not_in(EXCLUDED_EMPLOYEE_STATUSES),
            )
        ).scalar() or 0

    def count_skills(self) -> int:
        return self.db.execute(
            select(func.count(Skill.id)).where(Skill.deleted_at.is_(None))
        ).scalar() or 0

    def count_expiring_soon(
        self,
        days: int,
        now: datetime | None = None,
        site_id: str | None = None,
    ) -> int:
        """Active certifications whose expiry falls within the next ``days``."""
        now = now or utcnow()
        query = select(func.count(EmployeeSkill.id)).where(
            EmployeeSkill.revoked_at.is_(None),
            EmployeeSkill.deleted_at.is_(None),
            EmployeeSkill.expires_at >= now,
            EmployeeSkill.expires_at <= now + timedelta(days=days),
        )
        if site_id:
            query = query.join(Employee, Employee.id == EmployeeSkill.employee_id).where(
                Employee.site_id == site_id
            )
        return self.db.execute(query).scalar() or 0

    def skill_revisions(self, skill_id: str) -> list[SkillRevision]:
        return list(
            self.db.execute(
                select(SkillRevision).where(
                    SkillRevision.skill_id == skill_id,
                    SkillRevision.deleted_at.is_(None),
                )
            ).scalars().all()
        )

    def current_revision(self, skill_id: str) -> SkillRevision | None:
        """Most recently created active revision of a skill."""
        return select_current_revision(self.skill_revisions(skill_id))
