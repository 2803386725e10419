"""
Compliance Summary Tests.

Run with:
    pytest tests/test_stats.py -v
"""

from datetime import timedelta

from services.compliance_service.matrix import build_matrix
from services.compliance_service.records import RevisionStatus
from services.compliance_service.stats import ComplianceSummary, summarize_by_skill, summarize_matrix


class TestComplianceSummary:
    """Tests for summary counting."""

    def test_empty_rate_is_100(self):
        assert ComplianceSummary().compliance_rate == 100

    def test_rate_is_rounded(self):
        assert ComplianceSummary(total_required=3, compliant=2).compliance_rate == 67

    def test_rate_rounds_halves_up(self):
        assert ComplianceSummary(total_required=8, compliant=1).compliance_rate == 13
        assert ComplianceSummary(total_required=8, compliant=3).compliance_rate == 38
        assert ComplianceSummary(total_required=200, compliant=1).compliance_rate == 1

    def test_summarize_matrix(self, make_employee, make_skill, make_requirement, make_certification, now):
        employees = [make_employee(id=f"e{i}") for i in range(1, 6)]
        skills = [make_skill(id="s1"), make_skill(id="extra")]
        reqs = [make_requirement(skill_id="s1", required_level=2)]
        certs = [
            make_certification(employee_id="e1", skill_id="s1", achieved_level=2),
            make_certification(employee_id="e2", skill_id="s1", achieved_level=1),
            make_certification(employee_id="e3", skill_id="s1", achieved_level=2,
                               expires_at=now - timedelta(days=1)),
            make_certification(employee_id="e4", skill_id="s1", achieved_level=2,
                               revision_status=RevisionStatus.ARCHIVED),
            make_certification(employee_id="e1", skill_id="extra"),
        ]

        summary = summarize_matrix(build_matrix(employees, skills, reqs, certs, now))

        assert summary.total_required == 5
        assert summary.compliant == 1
        assert summary.gaps == 2  # e2 gap + e5 missing
        assert summary.missing == 1
        assert summary.expired == 1
        assert summary.outdated == 1
        assert summary.compliance_rate == 20

    def test_summarize_by_skill_includes_unrequired_skills(self, make_employee, make_skill, make_requirement, now):
        matrix = build_matrix(
            [make_employee(id="e1")],
            [make_skill(id="s1"), make_skill(id="s2")],
            [make_requirement(skill_id="s1")],
            [],
            now,
        )

        by_skill = summarize_by_skill(matrix)

        assert set(by_skill) == {"s1", "s2"}
        assert by_skill["s1"].missing == 1
        assert by_skill["s2"].total_required == 0
        assert by_skill["s2"].compliance_rate == 100
