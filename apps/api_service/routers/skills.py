"""
Skills API Router

Skill catalog and revision lifecycle.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy import select

from services.compliance_service.repository import ComplianceRepository
from services.compliance_service.revisions import (
    InvalidRevisionTransition,
    activate_revision,
    select_current_revision,
)
from shared.db.session import get_db
from shared.models import Skill

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class SkillItem(BaseModel):
    """Skill with its current revision."""
    id: str
    name: str
    code: Optional[str] = None
    max_level: int
    validity_months: Optional[int] = None
    current_revision_id: Optional[str] = None
    current_revision_label: Optional[str] = None


class SkillListResponse(BaseModel):
    request_id: str
    skills: list[SkillItem]


class RevisionActivateResponse(BaseModel):
    request_id: str
    revision_id: str
    status: str
    archived_revision_ids: list[str]


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=SkillListResponse)
def list_skills(request: Request) -> SkillListResponse:
    """List catalog skills with the revision new certifications would use."""
    with get_db() as db:
        skills = db.execute(
            select(Skill).where(Skill.deleted_at.is_(None)).order_by(Skill.name)
        ).scalars().all()

        items = []
        for skill in skills:
            current = select_current_revision(r for r in skill.revisions if r.deleted_at is None)
            items.append(
                SkillItem(
                    id=skill.id,
                    name=skill.name,
                    code=skill.code,
                    max_level=skill.max_level,
                    validity_months=skill.validity_months,
                    current_revision_id=current.id if current else None,
                    current_revision_label=current.revision_label if current else None,
                )
            )

        return SkillListResponse(request_id=request.state.request_id, skills=items)


@router.post(
    "/{skill_id}/revisions/{revision_id}/activate",
    response_model=RevisionActivateResponse,
)
def activate_skill_revision(
    skill_id: str,
    revision_id: str,
    request: Request,
) -> RevisionActivateResponse:
    """
    Activate a draft revision.

    If it requires retraining, the previously active revisions are archived
    and certifications against them show as outdated.
    """
    with get_db() as db:
        revisions = ComplianceRepository(db).skill_revisions(skill_id)
        revision = next((r for r in revisions if r.id == revision_id), None)
        if not revision:
            raise HTTPException(status_code=404, detail="Revision not found")

        try:
            archived = activate_revision(revision, revisions)
        except InvalidRevisionTransition as e:
            raise HTTPException(status_code=409, detail=str(e))

        return RevisionActivateResponse(
            request_id=request.state.request_id,
            revision_id=revision.id,
            status=revision.status,
            archived_revision_ids=[r.id for r in archived],
        )
