"""
Matrix API Router

Compliance matrix for the whole organization or a site / department.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from services.compliance_service.matrix import MatrixCell, MatrixEmployee, MatrixSkill, build_matrix
from services.compliance_service.repository import ComplianceRepository
from shared.db.session import get_db

router = APIRouter()


class MatrixResponse(BaseModel):
    """Compliance matrix response."""
    request_id: str
    employees: list[MatrixEmployee]
    skills: list[MatrixSkill]
    cells: dict[str, dict[str, MatrixCell]]


@router.get("", response_model=MatrixResponse)
def get_matrix(
    request: Request,
    site_id: Optional[str] = Query(None, description="Only employees at this site"),
    department_id: Optional[str] = Query(None, description="Only employees in this department"),
) -> MatrixResponse:
    """
    Build the employee x skill compliance matrix from a fresh snapshot.
    """
    with get_db() as db:
        snapshot = ComplianceRepository(db).load_snapshot(
            site_id=site_id,
            department_id=department_id,
        )

    matrix = build_matrix(
        snapshot.employees,
        snapshot.skills,
        snapshot.requirements,
        snapshot.certifications,
    )

    return MatrixResponse(
        request_id=request.state.request_id,
        employees=matrix.employees,
        skills=matrix.skills,
        cells=matrix.cells,
    )
