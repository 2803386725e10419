"""
Status Classifier Tests.

Run with:
    pytest tests/test_status.py -v
"""

import itertools
from datetime import timedelta

import pytest

from services.compliance_service.records import RevisionStatus
from services.compliance_service.status import MatrixStatus, classify, is_expired


class TestIsExpired:
    """Tests for the expiry check."""

    def test_never_expires(self, now):
        assert not is_expired(None, now)

    def test_strictly_before_now(self, now):
        assert is_expired(now - timedelta(seconds=1), now)
        assert not is_expired(now, now)
        assert not is_expired(now + timedelta(days=1), now)


class TestClassify:
    """Tests for the per-cell decision table."""

    def test_not_required_not_certified(self, now):
        assert classify(0, None, now) == MatrixStatus.NONE

    def test_required_not_certified(self, now):
        assert classify(2, None, now) == MatrixStatus.MISSING

    def test_expired_beats_level(self, make_certification, now):
        cert = make_certification(achieved_level=3, expires_at=now - timedelta(days=1))
        assert classify(1, cert, now) == MatrixStatus.EXPIRED

    def test_expired_even_when_not_required(self, make_certification, now):
        cert = make_certification(expires_at=now - timedelta(days=1))
        assert classify(0, cert, now) == MatrixStatus.EXPIRED

    def test_extra(self, make_certification, now):
        assert classify(0, make_certification(), now) == MatrixStatus.EXTRA

    def test_gap(self, make_certification, now):
        assert classify(3, make_certification(achieved_level=2), now) == MatrixStatus.GAP

    def test_compliant_at_and_above_level(self, make_certification, now):
        assert classify(2, make_certification(achieved_level=2), now) == MatrixStatus.COMPLIANT
        assert classify(2, make_certification(achieved_level=5), now) == MatrixStatus.COMPLIANT

    def test_outdated_beats_expired(self, make_certification, now):
        cert = make_certification(
            expires_at=now - timedelta(days=1),
            revision_status=RevisionStatus.ARCHIVED,
        )
        assert classify(1, cert, now) == MatrixStatus.OUTDATED
        assert classify(0, cert, now) == MatrixStatus.OUTDATED

    def test_draft_revision_is_not_outdated(self, make_certification, now):
        cert = make_certification(revision_status=RevisionStatus.DRAFT)
        assert classify(1, cert, now) == MatrixStatus.COMPLIANT

    @pytest.mark.parametrize(
        "required, has_cert, expired, sufficient",
        list(itertools.product([0, 2], [True, False], [True, False], [True, False])),
    )
    def test_every_combination_has_one_status(
        self, make_certification, now, required, has_cert, expired, sufficient
    ):
        cert = None
        if has_cert:
            cert = make_certification(
                achieved_level=2 if sufficient else 1,
                expires_at=now - timedelta(days=1) if expired else now + timedelta(days=1),
            )

        status = classify(required, cert, now)

        assert isinstance(status, MatrixStatus)
        if not has_cert:
            assert status == (MatrixStatus.MISSING if required else MatrixStatus.NONE)
        elif expired:
            assert status == MatrixStatus.EXPIRED
        elif not required:
            assert status == MatrixStatus.EXTRA
        else:
            assert status == (MatrixStatus.COMPLIANT if sufficient else MatrixStatus.GAP)
