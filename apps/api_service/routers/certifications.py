"""
Certifications API Router

Record and revoke certifications. Records are append-only: re-certifying
inserts a new row, revoking marks a row inactive.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy import select

from services.compliance_service.expiration import calculate_expires_at
from services.compliance_service.repository import ComplianceRepository
from shared.db.session import get_db
from shared.models import Employee, EmployeeSkill, Skill
from shared.utils.config import get_settings
from shared.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)
settings = get_settings()


# =============================================================================
# Request / Response Models
# =============================================================================

class CertifyRequest(BaseModel):
    employee_id: str
    skill_id: str
    achieved_level: int = Field(..., ge=1)
    certified_by: Optional[str] = None
    notes: Optional[str] = None


class RevokeRequest(BaseModel):
    revoked_by: Optional[str] = None
    reason: str = Field(..., min_length=1)


class CertificationItem(BaseModel):
    id: str
    employee_id: str
    skill_id: str
    skill_revision_id: str
    achieved_level: int
    achieved_at: datetime
    expires_at: Optional[datetime] = None
    certified_by: Optional[str] = None
    notes: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None
    revocation_reason: Optional[str] = None

    class Config:
        from_attributes = True


class CertificationResponse(BaseModel):
    request_id: str
    certification: CertificationItem


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=CertificationResponse, status_code=201)
def certify_skill(payload: CertifyRequest, request: Request) -> CertificationResponse:
    """
    Certify an employee on the current active revision of a skill.

    Expiry is computed here, once, from the skill's validity window.
    """
    with get_db() as db:
        employee = db.execute(
            select(Employee).where(Employee.id == payload.employee_id, Employee.deleted_at.is_(None))
        ).scalar_one_or_none()
        if not employee:
            raise HTTPException(status_code=404, detail="Employee not found")

        skill = db.execute(
            select(Skill).where(Skill.id == payload.skill_id, Skill.deleted_at.is_(None))
        ).scalar_one_or_none()
        if not skill:
            raise HTTPException(status_code=404, detail="Skill not found")

        max_level = min(skill.max_level or 1, settings.max_certification_level)
        if payload.achieved_level > max_level:
            raise HTTPException(
                status_code=422,
                detail=f"achieved_level must be <= {max_level} for this skill",
            )

        revision = ComplianceRepository(db).current_revision(skill.id)
        if not revision:
            raise HTTPException(status_code=422, detail="No active revision found for this skill")

        achieved_at = datetime.now(timezone.utc)
        certification = EmployeeSkill(
            employee_id=employee.id,
            skill_id=skill.id,
            skill_revision_id=revision.id,
            achieved_level=payload.achieved_level,
            achieved_at=achieved_at,
            expires_at=calculate_expires_at(skill, achieved_at),
            certified_by=payload.certified_by,
            notes=payload.notes,
        )
        db.add(certification)
        db.flush()

        logger.info(
            "Recorded certification",
            certification_id=certification.id,
            employee_id=employee.id,
            skill_id=skill.id,
            revision_id=revision.id,
            achieved_level=payload.achieved_level,
        )

        return CertificationResponse(
            request_id=request.state.request_id,
            certification=CertificationItem.model_validate(certification),
        )


@router.post("/{certification_id}/revoke", response_model=CertificationResponse)
def revoke_certification(
    certification_id: str,
    payload: RevokeRequest,
    request: Request,
) -> CertificationResponse:
    """Revoke a certification. Terminal: a revoked record stays revoked."""
    with get_db() as db:
        certification = db.execute(
            select(EmployeeSkill).where(
                EmployeeSkill.id == certification_id,
                EmployeeSkill.deleted_at.is_(None),
            )
        ).scalar_one_or_none()

        if not certification:
            raise HTTPException(status_code=404, detail="Certification not found")
        if certification.revoked_at is not None:
            raise HTTPException(status_code=409, detail="Certification is already revoked")

        certification.revoked_at = datetime.now(timezone.utc)
        certification.revoked_by = payload.revoked_by
        certification.revocation_reason = payload.reason
        db.flush()

        logger.info(
            "Revoked certification",
            certification_id=certification_id,
            employee_id=certification.employee_id,
            skill_id=certification.skill_id,
        )

        return CertificationResponse(
            request_id=request.state.request_id,
            certification=CertificationItem.model_validate(certification),
        )
