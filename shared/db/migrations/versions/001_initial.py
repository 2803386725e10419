"""Initial schema

Revision ID: 001_initial
Revises: 
Create Date: 2025-01-10

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # Organization tables
    op.create_table(
        "site",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("timezone", sa.String(64), nullable=False, server_default="UTC"),
        *_timestamps(),
    )

    op.create_table(
        "department",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "role",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "project",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("site.id"), nullable=False),
        sa.Column("department_id", sa.String(36), sa.ForeignKey("department.id"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )

    # Employee tables
    op.create_table(
        "employee",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("site.id"), nullable=False),
        sa.Column("department_id", sa.String(36), sa.ForeignKey("department.id"), nullable=True),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("employee_number", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_employee_site", "employee", ["site_id"])
    op.create_index("ix_employee_department", "employee", ["department_id"])
    op.create_index("ix_employee_status", "employee", ["status"])

    op.create_table(
        "employee_project",
        sa.Column("employee_id", sa.String(36), sa.ForeignKey("employee.id"), primary_key=True),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("project.id"), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_employee_project_project", "employee_project", ["project_id"])

    # Skill catalog
    op.create_table(
        "skill",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("max_level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("validity_months", sa.Integer, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "skill_revision",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("skill_id", sa.String(36), sa.ForeignKey("skill.id"), nullable=False),
        sa.Column("revision_label", sa.String(50), nullable=False),
        sa.Column("change_log", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("effective_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("requires_retraining", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_index("ix_skill_revision_skill_status", "skill_revision", ["skill_id", "status"])

    op.create_table(
        "skill_requirement",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("skill_id", sa.String(36), sa.ForeignKey("skill.id"), nullable=False),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("site.id"), nullable=True),
        sa.Column("department_id", sa.String(36), sa.ForeignKey("department.id"), nullable=True),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("project.id"), nullable=True),
        sa.Column("required_level", sa.Integer, nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint(
            "skill_id", "site_id", "department_id", "role_id", "project_id",
            name="uq_skill_requirement_scope",
        ),
    )

    # Certification ledger
    op.create_table(
        "employee_skill",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("employee_id", sa.String(36), sa.ForeignKey("employee.id"), nullable=False),
        sa.Column("skill_id", sa.String(36), sa.ForeignKey("skill.id"), nullable=False),
        sa.Column("skill_revision_id", sa.String(36), sa.ForeignKey("skill_revision.id"), nullable=False),
        sa.Column("achieved_level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("certified_by", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(255), nullable=True),
        sa.Column("revocation_reason", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employee_skill_emp_skill", "employee_skill", ["employee_id", "skill_id"])
    op.create_index("ix_employee_skill_expires", "employee_skill", ["expires_at"])


def downgrade() -> None:
    op.drop_table("employee_skill")
    op.drop_table("skill_requirement")
    op.drop_table("skill_revision")
    op.drop_table("skill")
    op.drop_table("employee_project")
    op.drop_table("employee")
    op.drop_table("project")
    op.drop_table("role")
    op.drop_table("department")
    op.drop_table("site")
