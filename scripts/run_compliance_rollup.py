#!/usr/bin/env python3
"""
Compliance Rollup Orchestrator

Enqueues one rollup task per site to the compliance workers.
Run this after starting a worker with:
    celery -A shared.utils.celery_app worker -Q q.compliance
Pass --sync to compute rollups in-process instead.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.db.session import get_db
from shared.utils.logging import get_logger, setup_logging
from workers.compliance_worker.tasks import (
    compute_site_rollup,
    list_site_ids,
    rollup_site_compliance,
)

setup_logging()
logger = get_logger(__name__)


def main(argv: list[str]) -> int:
    sync = "--sync" in argv

    print("=" * 60)
    print("📊 Caliber - Site Compliance Rollups")
    print("=" * 60)

    with get_db() as db:
        site_ids = list_site_ids(db)

    if not site_ids:
        print("\n   No sites found")
        return 0

    for site_id in site_ids:
        if sync:
            with get_db() as db:
                result = compute_site_rollup(db, site_id)
            print(f"   {site_id}: {result['status']}")
        else:
            rollup_site_compliance.delay(site_id)

    if sync:
        print(f"\n✅ Computed rollups for {len(site_ids)} sites")
    else:
        print(f"\n✅ Enqueued {len(site_ids)} rollup tasks to q.compliance")

    logger.info("Rollups dispatched", site_count=len(site_ids), sync=sync)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
