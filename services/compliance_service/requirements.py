"""
Requirement Resolver

Aggregates the requirement rows that apply to an employee for one skill
into a single effective level (max wins) plus provenance strings.
"""

from collections import defaultdict
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from services.compliance_service.records import EmployeeRecord, RequirementRecord, ScopeDimension
from services.compliance_service.scope import matches

# Labels used in provenance strings, e.g. "Site: Austin, Role: Technician (Lvl 2)"
SCOPE_LABELS = {
    ScopeDimension.SITE: "Site",
    ScopeDimension.DEPARTMENT: "Dept",
    ScopeDimension.ROLE: "Role",
    ScopeDimension.PROJECT: "Proj",
}

GLOBAL_LABEL = "Global"


@dataclass(frozen=True)
class ResolvedRequirement:
    """Effective required level for one (employee, skill) pair."""
    level: int = 0
    sources: list[str] = field(default_factory=list)

    @property
    def is_required(self) -> bool:
        return self.level > 0


def format_requirement_source(requirement: RequirementRecord) -> str:
    """
    Format a human-readable provenance entry for a matching requirement.

    Dimensions without a display name fall back to their id.
    """
    parts = []
    for dimension in requirement.scope.set_dimensions:
        name = requirement.display_name(dimension) or requirement.scope.selector(dimension)
        parts.append(f"{SCOPE_LABELS[dimension]}: {name}")

    if not parts:
        parts.append(GLOBAL_LABEL)

    return f"{', '.join(parts)} (Lvl {requirement.effective_level})"


def applicable_requirements(
    employee: EmployeeRecord,
    employee_project_ids: Collection[str],
    requirements: Iterable[RequirementRecord],
) -> list[RequirementRecord]:
    """Filter requirement rows down to those whose scope matches the employee."""
    return [req for req in requirements if matches(employee, employee_project_ids, req)]


def resolve(
    employee: EmployeeRecord,
    employee_project_ids: Collection[str],
    skill_id: str,
    all_requirements: Iterable[RequirementRecord],
) -> ResolvedRequirement:
    """
    Resolve the effective required level of a skill for an employee.

    Args:
        employee: Employee being evaluated
        employee_project_ids: Ids of the employee's project assignments
        skill_id: Skill to resolve
        all_requirements: Requirement rows (any skill)

    Returns:
        ResolvedRequirement with the max matching level (0 if none match)
        and one provenance entry per matching row
    """
    level = 0
    sources: list[str] = []

    for req in all_requirements:
        if req.skill_id != skill_id:
            continue
        if not matches(employee, employee_project_ids, req):
            continue

        level = max(level, req.effective_level)
        sources.append(format_requirement_source(req))

    return ResolvedRequirement(level=level, sources=sources)


def index_requirements_by_skill(
    requirements: Iterable[RequirementRecord],
) -> dict[str, list[RequirementRecord]]:
    """Group requirement rows by skill id, keeping input order."""
    by_skill: dict[str, list[RequirementRecord]] = defaultdict(list)
    for req in requirements:
        by_skill[req.skill_id].append(req)
    return dict(by_skill)
