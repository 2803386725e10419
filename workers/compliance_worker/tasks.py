"""
Compliance Worker Tasks

Celery tasks that precompute per-site compliance rollups from the matrix.
"""

from datetime import datetime, timezone

from sqlalchemy import and_, delete, select

from services.compliance_service.matrix import build_matrix
from services.compliance_service.repository import ComplianceRepository
from services.compliance_service.stats import ComplianceSummary, summarize_by_skill
from shared.db.session import get_db
from shared.models import Site, SiteComplianceRollup
from shared.utils.celery_app import celery_app
from shared.utils.logging import bind_task_context, get_logger

logger = get_logger("compliance_worker")


def upsert_site_rollups(db, site_id: str, by_skill: dict[str, ComplianceSummary]) -> int:
    """
    Write one rollup row per skill for a site. Returns rows written.

    Rows for skills no longer in ``by_skill`` are deleted, so an empty
    mapping clears the site.
    """
    computed_at = datetime.now(timezone.utc)

    stale = delete(SiteComplianceRollup).where(SiteComplianceRollup.site_id == site_id)
    if by_skill:
        stale = stale.where(SiteComplianceRollup.skill_id.not_in(list(by_skill)))
    db.execute(stale)

    for skill_id, summary in by_skill.items():
        rollup = db.execute(
            select(SiteComplianceRollup).where(
                and_(
                    SiteComplianceRollup.site_id == site_id,
                    SiteComplianceRollup.skill_id == skill_id,
                )
            )
        ).scalar_one_or_none()

        if rollup is None:
            rollup = SiteComplianceRollup(site_id=site_id, skill_id=skill_id)
            db.add(rollup)

        rollup.required_count = summary.total_required
        rollup.compliant_count = summary.compliant
        rollup.gap_count = summary.gaps - summary.missing
        rollup.missing_count = summary.missing
        rollup.expired_count = summary.expired
        rollup.outdated_count = summary.outdated
        rollup.computed_at = computed_at

    return len(by_skill)


def compute_site_rollup(db, site_id: str) -> dict:
    """Build the site's matrix and persist its per-skill rollups."""
    snapshot = ComplianceRepository(db).load_snapshot(site_id=site_id)

    if not snapshot.employees:
        upsert_site_rollups(db, site_id, {})
        return {"status": "no_employees", "site_id": site_id}

    matrix = build_matrix(
        snapshot.employees,
        snapshot.skills,
        snapshot.requirements,
        snapshot.certifications,
    )
    written = upsert_site_rollups(db, site_id, summarize_by_skill(matrix))

    return {"status": "success", "site_id": site_id, "skills": written}


@celery_app.task(bind=True, name="workers.compliance_worker.tasks.rollup_site_compliance")
def rollup_site_compliance(self, site_id: str):
    """
    Recompute compliance rollups for one site.

    Args:
        site_id: Site UUID
    """
    bind_task_context(self.request.id, "rollup_site_compliance", site_id=site_id)
    logger.info("Starting site compliance rollup")

    try:
        with get_db() as db:
            result = compute_site_rollup(db, site_id)
    except Exception as e:
        logger.error("Site compliance rollup failed", error=str(e))
        raise

    logger.info("Site compliance rollup complete", **result)
    return result


def list_site_ids(db) -> list[str]:
    return list(
        db.execute(
            select(Site.id).where(Site.deleted_at.is_(None)).order_by(Site.name)
        ).scalars().all()
    )
