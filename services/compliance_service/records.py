"""
Compliance Records

Plain in-memory records consumed by the compliance engine. The repository
builds them from ORM rows; tests build them directly.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class RevisionStatus(str, Enum):
    """Skill revision lifecycle state."""
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class ScopeDimension(str, Enum):
    """Requirement scope selector dimensions, in provenance order."""
    SITE = "site"
    DEPARTMENT = "department"
    ROLE = "role"
    PROJECT = "project"


@dataclass(frozen=True)
class EmployeeRecord:
    """An employee as seen by the compliance engine."""
    id: str
    site_id: str
    department_id: str | None = None
    role_id: str | None = None
    project_ids: frozenset[str] = field(default_factory=frozenset)
    name: str = ""
    employee_number: str = ""
    site_name: str = ""
    role_name: str | None = None


@dataclass(frozen=True)
class SkillRecord:
    """A catalog skill."""
    id: str
    name: str
    code: str | None = None
    max_level: int = 1
    validity_months: int | None = None


@dataclass(frozen=True)
class RequirementScope:
    """
    The four scope selectors of a requirement row.

    ``None`` means the selector is unset and matches any value,
    including an employee with no value for that dimension.
    """
    site_id: str | None = None
    department_id: str | None = None
    role_id: str | None = None
    project_id: str | None = None

    def selector(self, dimension: ScopeDimension) -> str | None:
        return getattr(self, f"{dimension.value}_id")

    @property
    def set_dimensions(self) -> list[ScopeDimension]:
        return [d for d in ScopeDimension if self.selector(d) is not None]

    @property
    def is_global(self) -> bool:
        return not self.set_dimensions


@dataclass(frozen=True)
class RequirementRecord:
    """A requirement rule plus display names for provenance."""
    id: str
    skill_id: str
    required_level: int | None = 1
    scope: RequirementScope = field(default_factory=RequirementScope)
    site_name: str | None = None
    department_name: str | None = None
    role_name: str | None = None
    project_name: str | None = None

    @property
    def effective_level(self) -> int:
        # Unset / zero levels are stored as "at least level 1"
        return self.required_level or 1

    def display_name(self, dimension: ScopeDimension) -> str | None:
        return getattr(self, f"{dimension.value}_name")


@dataclass(frozen=True)
class CertificationRecord:
    """A certification ledger entry."""
    id: str
    employee_id: str
    skill_id: str
    achieved_level: int
    achieved_at: datetime | None = None
    expires_at: datetime | None = None
    revoked_at: datetime | None = None
    revision_id: str | None = None
    revision_status: RevisionStatus | None = None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_outdated(self) -> bool:
        """Certified against a revision that has since been archived."""
        return self.revision_status == RevisionStatus.ARCHIVED
