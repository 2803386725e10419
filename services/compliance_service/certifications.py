"""
Certification Lookup

Indexes active certifications by (employee_id, skill_id).
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from services.compliance_service.expiration import ensure_utc
from services.compliance_service.records import CertificationRecord

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _recency(record: CertificationRecord) -> datetime:
    return ensure_utc(record.achieved_at) or _EPOCH


def latest_by_key(
    certifications: Iterable[CertificationRecord],
) -> dict[tuple[str, str], CertificationRecord]:
    """
    Keep one certification per (employee_id, skill_id).

    The most recent achieved_at wins; ties go to the later row in input order.
    """
    latest: dict[tuple[str, str], CertificationRecord] = {}
    for cert in certifications:
        key = (cert.employee_id, cert.skill_id)
        current = latest.get(key)
        if current is None or _recency(cert) >= _recency(current):
            latest[key] = cert
    return latest


class CertificationIndex:
    """O(1) lookup of an employee's current certification on a skill."""

    def __init__(self, by_key: dict[tuple[str, str], CertificationRecord]):
        self._by_key = by_key

    @classmethod
    def from_records(cls, certifications: Iterable[CertificationRecord]) -> "CertificationIndex":
        """Build the index, dropping revoked certifications."""
        active = (cert for cert in certifications if not cert.is_revoked)
        return cls(latest_by_key(active))

    def lookup(self, employee_id: str, skill_id: str) -> CertificationRecord | None:
        return self._by_key.get((employee_id, skill_id))

    def __len__(self) -> int:
        return len(self._by_key)
