"""
Certification Lookup Tests.

Run with:
    pytest tests/test_certifications.py -v
"""

from datetime import datetime, timedelta, timezone

from services.compliance_service.certifications import CertificationIndex, latest_by_key


class TestLatestByKey:
    """Tests for picking one certification per (employee, skill)."""

    def test_most_recent_achievement_wins(self, make_certification, now):
        older = make_certification(achieved_level=3, achieved_at=now - timedelta(days=400))
        newer = make_certification(achieved_level=1, achieved_at=now - timedelta(days=10))

        assert latest_by_key([newer, older])[("e1", "s1")] is newer
        assert latest_by_key([older, newer])[("e1", "s1")] is newer

    def test_ties_go_to_later_row(self, make_certification, now):
        first = make_certification(id="first", achieved_at=now)
        second = make_certification(id="second", achieved_at=now)

        assert latest_by_key([first, second])[("e1", "s1")].id == "second"

    def test_missing_achieved_at_loses_to_dated_row(self, make_certification, now):
        dated = make_certification(id="dated", achieved_at=now)
        undated = make_certification(id="undated", achieved_at=None)

        assert latest_by_key([dated, undated])[("e1", "s1")].id == "dated"

    def test_naive_and_aware_timestamps_compare(self, make_certification):
        naive = make_certification(id="naive", achieved_at=datetime(2025, 3, 1))
        aware = make_certification(id="aware", achieved_at=datetime(2025, 2, 1, tzinfo=timezone.utc))

        assert latest_by_key([naive, aware])[("e1", "s1")].id == "naive"

    def test_keys_are_independent(self, make_certification):
        result = latest_by_key([
            make_certification(employee_id="e1", skill_id="s1"),
            make_certification(employee_id="e1", skill_id="s2"),
            make_certification(employee_id="e2", skill_id="s1"),
        ])
        assert set(result) == {("e1", "s1"), ("e1", "s2"), ("e2", "s1")}


class TestCertificationIndex:
    """Tests for the active certification index."""

    def test_lookup_absent_pair(self):
        assert CertificationIndex.from_records([]).lookup("e1", "s1") is None

    def test_revoked_rows_are_dropped(self, make_certification, now):
        revoked = make_certification(achieved_at=now, revoked_at=now)
        index = CertificationIndex.from_records([revoked])

        assert index.lookup("e1", "s1") is None
        assert len(index) == 0

    def test_revoked_newer_row_falls_back_to_older_active(self, make_certification, now):
        older = make_certification(id="older", achieved_at=now - timedelta(days=30))
        revoked = make_certification(id="revoked", achieved_at=now, revoked_at=now)

        index = CertificationIndex.from_records([older, revoked])

        assert index.lookup("e1", "s1").id == "older"
