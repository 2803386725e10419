"""
Compliance Summary

Aggregates matrix cells into dashboard / rollup counts.
"""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel

from services.compliance_service.matrix import MatrixCell, MatrixData
from services.compliance_service.status import MatrixStatus


class ComplianceSummary(BaseModel):
    """Counts over required cells only."""
    total_required: int = 0
    compliant: int = 0
    gaps: int = 0  # gap + missing
    missing: int = 0
    expired: int = 0
    outdated: int = 0

    @property
    def compliance_rate(self) -> int:
        """Percentage of required cells that are compliant, halves rounded up."""
        if self.total_required == 0:
            return 100
        rate = Decimal(self.compliant * 100) / Decimal(self.total_required)
        return int(rate.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    def add(self, cell: MatrixCell) -> None:
        if cell.required_level <= 0:
            return

        self.total_required += 1
        if cell.status == MatrixStatus.COMPLIANT:
            self.compliant += 1
        elif cell.status in (MatrixStatus.GAP, MatrixStatus.MISSING):
            self.gaps += 1
            if cell.status == MatrixStatus.MISSING:
                self.missing += 1
        elif cell.status == MatrixStatus.EXPIRED:
            self.expired += 1
        elif cell.status == MatrixStatus.OUTDATED:
            self.outdated += 1


def summarize_matrix(matrix: MatrixData) -> ComplianceSummary:
    """Summarize every required cell of the matrix."""
    summary = ComplianceSummary()
    for cell in matrix.iter_cells():
        summary.add(cell)
    return summary


def summarize_by_skill(matrix: MatrixData) -> dict[str, ComplianceSummary]:
    """Summaries keyed by skill id (skills with no required cells included)."""
    by_skill: dict[str, ComplianceSummary] = defaultdict(ComplianceSummary)
    for skill in matrix.skills:
        by_skill[skill.id] = ComplianceSummary()
    for cell in matrix.iter_cells():
        by_skill[cell.skill_id].add(cell)
    return dict(by_skill)
