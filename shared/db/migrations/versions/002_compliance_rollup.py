"""
Add site compliance rollups and requirement scope index

- site_compliance_rollup: per-site, per-skill counts written by the
  compliance worker
- ux_skill_requirement_live_scope: one live requirement per scope.
  The table's unique constraint treats NULL selectors as distinct, so
  the index coalesces them.

Revision ID: 002_compliance_rollup
Revises: 001_initial
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "002_compliance_rollup"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "site_compliance_rollup",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("site.id"), nullable=False),
        sa.Column("skill_id", sa.String(36), sa.ForeignKey("skill.id"), nullable=False),
        sa.Column("required_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("compliant_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("gap_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("missing_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("expired_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("outdated_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("computed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("site_id", "skill_id", name="uq_site_compliance_rollup"),
    )

    op.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS ux_skill_requirement_live_scope
        ON skill_requirement (
            skill_id,
            COALESCE(site_id, ''),
            COALESCE(department_id, ''),
            COALESCE(role_id, ''),
            COALESCE(project_id, '')
        )
        WHERE deleted_at IS NULL
        """
    )

    # Expiring-soon lookups only care about live, unrevoked certifications
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS ix_employee_skill_active_expiry
        ON employee_skill (expires_at)
        WHERE revoked_at IS NULL AND deleted_at IS NULL
        """
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_employee_skill_active_expiry")
    op.execute("DROP INDEX IF EXISTS ux_skill_requirement_live_scope")
    op.drop_table("site_compliance_rollup")
