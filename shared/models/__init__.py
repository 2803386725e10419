"""Shared models package."""

from shared.models.base import Base
from shared.models.certification import EmployeeSkill, SiteComplianceRollup
from shared.models.employee import Employee
from shared.models.organization import Department, EmployeeProject, Project, Role, Site
from shared.models.skill import Skill, SkillRequirement, SkillRevision

__all__ = [
    "Base",
    "Department",
    "Employee",
    "EmployeeProject",
    "EmployeeSkill",
    "Project",
    "Role",
    "Site",
    "SiteComplianceRollup",
    "Skill",
    "SkillRequirement",
    "SkillRevision",
]
