"""
Dashboard API Router

Organization-wide compliance stats.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from services.compliance_service.matrix import build_matrix
from services.compliance_service.repository import ComplianceRepository
from services.compliance_service.stats import summarize_matrix
from shared.db.session import get_db
from shared.utils.config import get_settings

router = APIRouter()
settings = get_settings()


class DashboardStatsResponse(BaseModel):
    request_id: str
    total_employees: int
    total_skills: int
    expiring_soon: int
    compliance_rate: int
    gap_count: int
    expired_required_count: int
    outdated_required_count: int
    total_requirements: int


@router.get("/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(request: Request) -> DashboardStatsResponse:
    """Headline counts plus a summary of the full compliance matrix."""
    with get_db() as db:
        repo = ComplianceRepository(db)
        total_employees = repo.count_employees()
        total_skills = repo.count_skills()
        expiring_soon = repo.count_expiring_soon(settings.expiring_soon_days)
        snapshot = repo.load_snapshot()

    summary = summarize_matrix(
        build_matrix(
            snapshot.employees,
            snapshot.skills,
            snapshot.requirements,
            snapshot.certifications,
        )
    )

    return DashboardStatsResponse(
        request_id=request.state.request_id,
        total_employees=total_employees,
        total_skills=total_skills,
        expiring_soon=expiring_soon,
        compliance_rate=summary.compliance_rate,
        gap_count=summary.gaps,
        expired_required_count=summary.expired,
        outdated_required_count=summary.outdated,
        total_requirements=summary.total_required,
    )
