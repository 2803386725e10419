"""
Requirement Resolver Tests.

Run with:
    pytest tests/test_requirements.py -v
"""

from services.compliance_service.requirements import (
    ResolvedRequirement,
    applicable_requirements,
    format_requirement_source,
    index_requirements_by_skill,
    resolve,
)


class TestResolve:
    """Tests for effective level resolution."""

    def test_no_requirements_is_not_required(self, make_employee):
        resolved = resolve(make_employee(), set(), "s1", [])
        assert resolved.level == 0
        assert resolved.sources == []
        assert not resolved.is_required

    def test_max_level_wins(self, make_employee, make_requirement):
        """Site rule Lvl 1 and role rule Lvl 3 resolve to 3 with both sources."""
        emp = make_employee(site_id="austin", role_id="tech")
        reqs = [
            make_requirement(required_level=1, site_id="austin", site_name="Austin"),
            make_requirement(required_level=3, role_id="tech", role_name="Technician"),
        ]

        resolved = resolve(emp, set(), "s1", reqs)

        assert resolved.level == 3
        assert resolved.sources == ["Site: Austin (Lvl 1)", "Role: Technician (Lvl 3)"]

    def test_only_requested_skill_counts(self, make_employee, make_requirement):
        reqs = [make_requirement(skill_id="other", required_level=4)]
        assert resolve(make_employee(), set(), "s1", reqs).level == 0

    def test_non_matching_rows_ignored(self, make_employee, make_requirement):
        emp = make_employee(site_id="austin")
        reqs = [
            make_requirement(required_level=2, site_id="reno"),
            make_requirement(required_level=1, site_id="austin"),
        ]

        resolved = resolve(emp, set(), "s1", reqs)

        assert resolved.level == 1
        assert len(resolved.sources) == 1

    def test_unset_level_counts_as_one(self, make_employee, make_requirement):
        for level in (None, 0):
            resolved = resolve(make_employee(), set(), "s1", [make_requirement(required_level=level)])
            assert resolved.level == 1
            assert resolved.sources == ["Global (Lvl 1)"]

    def test_order_of_rows_does_not_change_level(self, make_employee, make_requirement):
        emp = make_employee(site_id="austin", role_id="tech")
        reqs = [
            make_requirement(required_level=2, site_id="austin"),
            make_requirement(required_level=3, role_id="tech"),
            make_requirement(required_level=1),
        ]

        forward = resolve(emp, set(), "s1", reqs)
        backward = resolve(emp, set(), "s1", list(reversed(reqs)))

        assert forward.level == backward.level == 3
        assert sorted(forward.sources) == sorted(backward.sources)

    def test_project_requirement_uses_project_ids(self, make_employee, make_requirement):
        req = make_requirement(required_level=2, project_id="line4", project_name="Line 4")

        assert resolve(make_employee(), {"line4"}, "s1", [req]).level == 2
        assert resolve(make_employee(), set(), "s1", [req]).level == 0

    def test_resolved_default(self):
        assert ResolvedRequirement() == ResolvedRequirement(level=0, sources=[])


class TestRequirementSource:
    """Tests for provenance formatting."""

    def test_global_label(self, make_requirement):
        assert format_requirement_source(make_requirement(required_level=2)) == "Global (Lvl 2)"

    def test_dimension_order_and_labels(self, make_requirement):
        req = make_requirement(
            required_level=2,
            site_id="austin",
            department_id="maint",
            role_id="tech",
            project_id="line4",
            site_name="Austin",
            department_name="Maintenance",
            role_name="Technician",
            project_name="Line 4",
        )

        assert format_requirement_source(req) == (
            "Site: Austin, Dept: Maintenance, Role: Technician, Proj: Line 4 (Lvl 2)"
        )

    def test_missing_name_falls_back_to_id(self, make_requirement):
        req = make_requirement(site_id="austin-id")
        assert format_requirement_source(req) == "Site: austin-id (Lvl 1)"


class TestRequirementHelpers:
    """Tests for filtering and indexing helpers."""

    def test_applicable_requirements(self, make_employee, make_requirement):
        emp = make_employee(site_id="austin")
        matching = make_requirement(site_id="austin")
        other = make_requirement(site_id="reno")

        assert applicable_requirements(emp, set(), [matching, other]) == [matching]

    def test_index_by_skill_keeps_order(self, make_requirement):
        a1 = make_requirement(skill_id="a")
        b1 = make_requirement(skill_id="b")
        a2 = make_requirement(skill_id="a")

        assert index_requirements_by_skill([a1, b1, a2]) == {"a": [a1, a2], "b": [b1]}
