"""
Skill Models

- Skill: Catalog entry for a trainable competency
- SkillRevision: Versioned content of a skill (draft -> active -> archived)
- SkillRequirement: Scoped rule "skill X at level >= N for scope S"
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.models.base import Base, SoftDeleteMixin, TimestampMixin, id_column


class Skill(TimestampMixin, SoftDeleteMixin, Base):
    """
    Catalog skill.

    validity_months = NULL means certifications never expire.
    """

    __tablename__ = "skill"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)  # e.g. "SOP-104"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    validity_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    revisions: Mapped[list["SkillRevision"]] = relationship(back_populates="skill")
    requirements: Mapped[list["SkillRequirement"]] = relationship(back_populates="skill")


class SkillRevision(TimestampMixin, SoftDeleteMixin, Base):
    """
    Versioned skill content, e.g. "Rev B" of a procedure.

    Status transitions (forward only):
    - draft: being written
    - active: current for new certifications
    - archived: superseded; certifications against it are outdated
    """

    __tablename__ = "skill_revision"

    id: Mapped[str] = id_column()
    skill_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("skill.id"),
        nullable=False,
    )
    revision_label: Mapped[str] = mapped_column(String(50), nullable=False)  # "Rev A"
    change_log: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
    )  # draft | active | archived
    effective_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    requires_retraining: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    skill: Mapped[Skill] = relationship(back_populates="revisions")

    __table_args__ = (
        Index("ix_skill_revision_skill_status", "skill_id", "status"),
    )


class SkillRequirement(TimestampMixin, SoftDeleteMixin, Base):
    """
    Requirement rule.

    Scope selectors are nullable FKs:
    - all NULL = global requirement for everyone
    - site_id set = everyone at that site
    - several set = employees matching ALL of them
    """

    __tablename__ = "skill_requirement"

    id: Mapped[str] = id_column()
    skill_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("skill.id"),
        nullable=False,
    )
    site_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("site.id"), nullable=True)
    department_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("department.id"), nullable=True)
    role_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("role.id"), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("project.id"), nullable=True)
    required_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    skill: Mapped[Skill] = relationship(back_populates="requirements")
    site: Mapped[Optional["Site"]] = relationship()
    department: Mapped[Optional["Department"]] = relationship()
    role: Mapped[Optional["Role"]] = relationship()
    project: Mapped[Optional["Project"]] = relationship()

    __table_args__ = (
        UniqueConstraint(
            "skill_id", "site_id", "department_id", "role_id", "project_id",
            name="uq_skill_requirement_scope",
        ),
    )


# Forward references
from shared.models.organization import Department, Project, Role, Site
