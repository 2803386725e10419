"""
Organization Models

- Site: Physical location (plant, office)
- Department: Logical org unit
- Role: Job title (not an app permission)
- Project: Line / project that employees are assigned to
- EmployeeProject: Employee <-> Project assignment join
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.models.base import Base, SoftDeleteMixin, TimestampMixin, id_column


class Site(TimestampMixin, SoftDeleteMixin, Base):
    """Physical site, e.g. "Austin Plant"."""

    __tablename__ = "site"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)  # e.g. "ATX-01"
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")

    # Relationships
    employees: Mapped[list["Employee"]] = relationship(back_populates="site")
    projects: Mapped[list["Project"]] = relationship(back_populates="site")


class Department(TimestampMixin, SoftDeleteMixin, Base):
    """Department entity."""

    __tablename__ = "department"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Role(TimestampMixin, SoftDeleteMixin, Base):
    """Job role / title used for requirement scoping."""

    __tablename__ = "role"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Project(TimestampMixin, SoftDeleteMixin, Base):
    """Project or production line, e.g. "Line 4"."""

    __tablename__ = "project"

    id: Mapped[str] = id_column()
    site_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("site.id"),
        nullable=False,
    )
    department_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("department.id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    site: Mapped[Site] = relationship(back_populates="projects")


class EmployeeProject(Base):
    """Employee <-> Project assignment (many-to-many)."""

    __tablename__ = "employee_project"

    employee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employee.id"),
        primary_key=True,
    )
    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("project.id"),
        primary_key=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    employee: Mapped["Employee"] = relationship(back_populates="project_links")
    project: Mapped[Project] = relationship()

    __table_args__ = (
        Index("ix_employee_project_project", "project_id"),
    )


# Forward references
from shared.models.employee import Employee
