"""
Certification Models

- EmployeeSkill: Certification ledger entry (append-only except revocation)
- SiteComplianceRollup: Per-site, per-skill compliance counts
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.models.base import Base, SoftDeleteMixin, TimestampMixin, id_column


class EmployeeSkill(TimestampMixin, SoftDeleteMixin, Base):
    """
    Certification of an employee on a specific skill revision.

    expires_at is computed once when the row is inserted. Revocation marks
    the row inactive; re-certification inserts a new row.
    """

    __tablename__ = "employee_skill"

    id: Mapped[str] = id_column()
    employee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employee.id"),
        nullable=False,
    )
    skill_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("skill.id"),
        nullable=False,
    )
    skill_revision_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("skill_revision.id"),
        nullable=False,
    )
    achieved_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    certified_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Revocation
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    revocation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    employee: Mapped["Employee"] = relationship(back_populates="certifications")
    skill: Mapped["Skill"] = relationship()
    revision: Mapped["SkillRevision"] = relationship()

    __table_args__ = (
        Index("ix_employee_skill_emp_skill", "employee_id", "skill_id"),
        Index("ix_employee_skill_expires", "expires_at"),
    )


class SiteComplianceRollup(Base):
    """
    Aggregated compliance counts per site and skill.

    Computed from the compliance matrix by the compliance worker.
    """

    __tablename__ = "site_compliance_rollup"

    id: Mapped[str] = id_column()
    site_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("site.id"),
        nullable=False,
    )
    skill_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("skill.id"),
        nullable=False,
    )
    required_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    compliant_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gap_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    missing_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expired_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    outdated_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    computed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("site_id", "skill_id", name="uq_site_compliance_rollup"),
    )


# Forward references
from shared.models.employee import Employee
from shared.models.skill import Skill, SkillRevision
