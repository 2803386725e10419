"""
Employees API Router

Per-employee gap report.
"""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from services.compliance_service.gaps import SkillGap, analyze_employee_gaps
from services.compliance_service.repository import ComplianceRepository
from shared.db.session import get_db
from shared.utils.config import get_settings

router = APIRouter()
settings = get_settings()


class EmployeeGapsResponse(BaseModel):
    """Gap report for one employee."""
    request_id: str
    employee_id: str
    employee_name: str
    gaps: list[SkillGap]


@router.get("/{employee_id}/gaps", response_model=EmployeeGapsResponse)
def get_employee_gaps(employee_id: str, request: Request) -> EmployeeGapsResponse:
    """Compare an employee's applicable requirements with their certifications."""
    with get_db() as db:
        repo = ComplianceRepository(db)
        employee, history = repo.load_employee_history(employee_id)

        if employee is None:
            raise HTTPException(status_code=404, detail="Employee not found")

        requirements = repo.load_requirements()
        skills = {skill.id: skill for skill in repo.load_skills()}

    gaps = analyze_employee_gaps(
        employee,
        requirements,
        history,
        skills,
        expiring_soon_days=settings.expiring_soon_days,
    )

    return EmployeeGapsResponse(
        request_id=request.state.request_id,
        employee_id=employee.id,
        employee_name=employee.name,
        gaps=gaps,
    )
