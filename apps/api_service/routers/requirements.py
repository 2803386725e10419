"""
Requirements API Router

Manage scoped skill requirement rules.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from services.compliance_service.repository import requirement_to_record
from services.compliance_service.requirements import format_requirement_source
from shared.db.session import get_db
from shared.models import Skill, SkillRequirement
from shared.utils.config import get_settings
from shared.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)
settings = get_settings()

SCOPE_COLUMNS = ("site_id", "department_id", "role_id", "project_id")


# =============================================================================
# Request / Response Models
# =============================================================================

class RequirementCreate(BaseModel):
    """New requirement rule. Leaving every scope unset makes it global."""
    skill_id: str = Field(..., min_length=1)
    required_level: int = Field(1, ge=1)
    site_id: Optional[str] = None
    department_id: Optional[str] = None
    role_id: Optional[str] = None
    project_id: Optional[str] = None


class RequirementItem(BaseModel):
    """Requirement rule with its provenance label."""
    id: str
    skill_id: str
    skill_name: str
    required_level: int
    site_id: Optional[str] = None
    department_id: Optional[str] = None
    role_id: Optional[str] = None
    project_id: Optional[str] = None
    scope_label: str


class RequirementListResponse(BaseModel):
    request_id: str
    requirements: list[RequirementItem]


class RequirementResponse(BaseModel):
    request_id: str
    requirement: RequirementItem


class DeleteResponse(BaseModel):
    request_id: str
    id: str
    deleted: bool


def _to_item(req: SkillRequirement) -> RequirementItem:
    return RequirementItem(
        id=req.id,
        skill_id=req.skill_id,
        skill_name=req.skill.name,
        required_level=req.required_level,
        site_id=req.site_id,
        department_id=req.department_id,
        role_id=req.role_id,
        project_id=req.project_id,
        scope_label=format_requirement_source(requirement_to_record(req)),
    )


def _load_requirement(db, requirement_id: str) -> SkillRequirement | None:
    return db.execute(
        select(SkillRequirement)
        .where(
            SkillRequirement.id == requirement_id,
            SkillRequirement.deleted_at.is_(None),
        )
        .options(
            selectinload(SkillRequirement.skill),
            selectinload(SkillRequirement.site),
            selectinload(SkillRequirement.department),
            selectinload(SkillRequirement.role),
            selectinload(SkillRequirement.project),
        )
    ).scalar_one_or_none()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=RequirementListResponse)
def list_requirements(request: Request) -> RequirementListResponse:
    """List active requirement rules, newest first."""
    with get_db() as db:
        rows = db.execute(
            select(SkillRequirement)
            .where(SkillRequirement.deleted_at.is_(None))
            .options(
                selectinload(SkillRequirement.skill),
                selectinload(SkillRequirement.site),
                selectinload(SkillRequirement.department),
                selectinload(SkillRequirement.role),
                selectinload(SkillRequirement.project),
            )
            .order_by(SkillRequirement.created_at.desc())
        ).scalars().all()

        return RequirementListResponse(
            request_id=request.state.request_id,
            requirements=[_to_item(r) for r in rows],
        )


@router.post("", response_model=RequirementResponse, status_code=201)
def create_requirement(payload: RequirementCreate, request: Request) -> RequirementResponse:
    """
    Create a requirement rule.

    Overlapping scopes are allowed (e.g. a site-wide rule and a role rule
    for the same skill); an identical scope for the same skill is not.
    """
    if payload.required_level > settings.max_certification_level:
        raise HTTPException(
            status_code=422,
            detail=f"required_level must be <= {settings.max_certification_level}",
        )

    with get_db() as db:
        skill = db.execute(
            select(Skill).where(Skill.id == payload.skill_id, Skill.deleted_at.is_(None))
        ).scalar_one_or_none()
        if not skill:
            raise HTTPException(status_code=404, detail="Skill not found")

        # NULL never equals NULL in the unique index, so match unset scopes explicitly
        conditions = [SkillRequirement.skill_id == payload.skill_id]
        for column in SCOPE_COLUMNS:
            value = getattr(payload, column)
            attr = getattr(SkillRequirement, column)
            conditions.append(attr.is_(None) if value is None else attr == value)

        existing = db.execute(
            select(SkillRequirement).where(*conditions)
        ).scalars().first()

        if existing and existing.deleted_at is None:
            raise HTTPException(
                status_code=409,
                detail="A requirement with this exact scope already exists for this skill",
            )

        if existing:
            # Revive the soft-deleted row; the scope tuple is unique
            requirement = existing
            requirement.deleted_at = None
            requirement.required_level = payload.required_level
        else:
            requirement = SkillRequirement(
                skill_id=payload.skill_id,
                required_level=payload.required_level,
                site_id=payload.site_id,
                department_id=payload.department_id,
                role_id=payload.role_id,
                project_id=payload.project_id,
            )
            db.add(requirement)
        db.flush()

        logger.info(
            "Created requirement",
            requirement_id=requirement.id,
            skill_id=payload.skill_id,
            required_level=payload.required_level,
        )

        created = _load_requirement(db, requirement.id)
        return RequirementResponse(
            request_id=request.state.request_id,
            requirement=_to_item(created),
        )


@router.delete("/{requirement_id}", response_model=DeleteResponse)
def delete_requirement(requirement_id: str, request: Request) -> DeleteResponse:
    """Soft-delete a requirement rule."""
    with get_db() as db:
        requirement = _load_requirement(db, requirement_id)
        if not requirement:
            raise HTTPException(status_code=404, detail="Requirement not found")

        requirement.deleted_at = datetime.now(timezone.utc)
        logger.info("Deleted requirement", requirement_id=requirement_id)

        return DeleteResponse(
            request_id=request.state.request_id,
            id=requirement_id,
            deleted=True,
        )
