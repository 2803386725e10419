"""
Scope Matcher

Decides whether a single requirement row applies to an employee.

Within one row every set selector must match (AND). Separate rows are
evaluated independently by the resolver, so they combine as OR.
"""

from collections.abc import Collection

from services.compliance_service.records import EmployeeRecord, RequirementRecord, ScopeDimension


def _employee_value(employee: EmployeeRecord, dimension: ScopeDimension) -> str | None:
    if dimension is ScopeDimension.SITE:
        return employee.site_id
    if dimension is ScopeDimension.DEPARTMENT:
        return employee.department_id
    if dimension is ScopeDimension.ROLE:
        return employee.role_id
    return None


def matches(
    employee: EmployeeRecord,
    employee_project_ids: Collection[str],
    requirement: RequirementRecord,
) -> bool:
    """
    Check if a requirement applies to an employee.

    Args:
        employee: Employee being evaluated
        employee_project_ids: Ids of the employee's project assignments
        requirement: Requirement row

    Returns:
        True if every set selector on the requirement is satisfied
    """
    for dimension in requirement.scope.set_dimensions:
        wanted = requirement.scope.selector(dimension)

        if dimension is ScopeDimension.PROJECT:
            # Requirement names one project, employee may have many
            if wanted not in employee_project_ids:
                return False
        elif _employee_value(employee, dimension) != wanted:
            return False

    return True
