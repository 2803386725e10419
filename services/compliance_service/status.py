"""
Status Classifier

Combines required level, achieved level, revision state and expiry into
one compliance status per (employee, skill) cell.

Precedence for a held certification: outdated, then expired, then level.
"""

from datetime import datetime
from enum import Enum

from services.compliance_service.expiration import ensure_utc, utcnow
from services.compliance_service.records import CertificationRecord


class MatrixStatus(str, Enum):
    """Compliance status of a matrix cell."""
    MISSING = "missing"      # Required but not certified
    GAP = "gap"              # Certified below the required level
    EXPIRED = "expired"      # Certified but expired
    OUTDATED = "outdated"    # Certified against an archived revision
    COMPLIANT = "compliant"  # Meets requirement
    EXTRA = "extra"          # Certified but not required
    NONE = "none"            # Not required, not certified


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """Expired iff an expiry is set and strictly before now."""
    if expires_at is None:
        return False
    return ensure_utc(expires_at) < ensure_utc(now)


def classify(
    required_level: int,
    certification: CertificationRecord | None,
    now: datetime | None = None,
) -> MatrixStatus:
    """
    Classify a single (employee, skill) cell.

    Args:
        required_level: Effective required level (0 = not required)
        certification: Active certification, or None
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        MatrixStatus for the cell
    """
    if certification is None:
        return MatrixStatus.MISSING if required_level > 0 else MatrixStatus.NONE

    if certification.is_outdated:
        return MatrixStatus.OUTDATED

    if is_expired(certification.expires_at, now or utcnow()):
        return MatrixStatus.EXPIRED

    if required_level <= 0:
        return MatrixStatus.EXTRA

    if certification.achieved_level < required_level:
        return MatrixStatus.GAP

    return MatrixStatus.COMPLIANT
