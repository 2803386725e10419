"""
Employee Model

HR record for skill tracking. Separate from any login account.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.models.base import Base, SoftDeleteMixin, TimestampMixin, id_column


class Employee(TimestampMixin, SoftDeleteMixin, Base):
    """
    Workforce member.

    Every employee belongs to exactly one site. Department, role and
    project assignments are optional and change over time.
    """

    __tablename__ = "employee"

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
    role_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("role.id"),
        nullable=True,
    )
    employee_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
    )  # active | terminated | leave

    # Relationships
    site: Mapped["Site"] = relationship(back_populates="employees")
    department: Mapped[Optional["Department"]] = relationship()
    role: Mapped[Optional["Role"]] = relationship()
    project_links: Mapped[list["EmployeeProject"]] = relationship(back_populates="employee")
    certifications: Mapped[list["EmployeeSkill"]] = relationship(back_populates="employee")

    __table_args__ = (
        Index("ix_employee_site", "site_id"),
        Index("ix_employee_department", "department_id"),
        Index("ix_employee_status", "status"),
    )

    @property
    def project_ids(self) -> frozenset[str]:
        """Ids of the projects this employee is assigned to."""
        return frozenset(link.project_id for link in self.project_links)


# Forward references
from shared.models.certification import EmployeeSkill
from shared.models.organization import Department, EmployeeProject, Role, Site
