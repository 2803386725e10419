#!/usr/bin/env python3
"""
Report Generation Script

Generates `reports/compliance_{timestamp}.json` with the organization-wide
compliance summary and a per-skill breakdown.
Usage: python scripts/generate_report.py [--site SITE_ID]
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.compliance_service.matrix import build_matrix
from services.compliance_service.repository import ComplianceRepository
from services.compliance_service.stats import summarize_by_skill, summarize_matrix
from shared.db.session import get_db
from shared.utils.config import get_settings
from shared.utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)
settings = get_settings()


def generate_report(site_id: Optional[str] = None) -> dict:
    """Build the matrix and summarize it."""
    with get_db() as db:
        repo = ComplianceRepository(db)
        snapshot = repo.load_snapshot(site_id=site_id)
        expiring_soon = repo.count_expiring_soon(settings.expiring_soon_days, site_id=site_id)

    matrix = build_matrix(
        snapshot.employees,
        snapshot.skills,
        snapshot.requirements,
        snapshot.certifications,
    )
    summary = summarize_matrix(matrix)
    by_skill = summarize_by_skill(matrix)
    skills = {s.id: s for s in matrix.skills}

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "site_id": site_id,
        "employees": len(matrix.employees),
        "skills": len(matrix.skills),
        "expiring_soon": expiring_soon,
        "summary": {
            **summary.model_dump(),
            "compliance_rate": summary.compliance_rate,
        },
        "by_skill": [
            {
                "skill_id": skill_id,
                "skill_name": skills[skill_id].name,
                "skill_code": skills[skill_id].code,
                **skill_summary.model_dump(),
                "compliance_rate": skill_summary.compliance_rate,
            }
            for skill_id, skill_summary in by_skill.items()
        ],
    }


def main(argv: list[str]) -> int:
    """Generate and save report."""
    site_id = None
    if "--site" in argv:
        idx = argv.index("--site")
        if idx + 1 >= len(argv):
            print("✗ --site requires a site id")
            return 2
        site_id = argv[idx + 1]

    print("📊 Generating Compliance Report...")

    report = generate_report(site_id)

    reports_dir = Path(__file__).parent.parent / "reports"
    reports_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    report_path = reports_dir / f"compliance_{timestamp}.json"

    with open(report_path, "w") as f:
        json.dump(report, f, indent=2)

    summary = report["summary"]
    print(f"\n📈 Report saved to: {report_path}")
    print("\n" + "=" * 50)
    print("COMPLIANCE SUMMARY")
    print("=" * 50)
    print(f"  Employees:        {report['employees']:,}")
    print(f"  Skills:           {report['skills']:,}")
    print(f"  Required cells:   {summary['total_required']:,}")
    print(f"  Compliant:        {summary['compliant']:,}")
    print(f"  Gaps:             {summary['gaps']:,} ({summary['missing']:,} missing)")
    print(f"  Expired:          {summary['expired']:,}")
    print(f"  Outdated:         {summary['outdated']:,}")
    print(f"  Expiring soon:    {report['expiring_soon']:,}")
    print(f"  Compliance rate:  {summary['compliance_rate']}%")

    worst = sorted(
        (s for s in report["by_skill"] if s["total_required"]),
        key=lambda s: s["compliance_rate"],
    )[:5]
    if worst:
        print("\n  Lowest compliance:")
        for i, skill in enumerate(worst, 1):
            print(f"    {i}. {skill['skill_name']}: {skill['compliance_rate']}%")

    logger.info("Compliance report written", path=str(report_path))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
