#!/usr/bin/env python3
"""Delete audit log entries older than the retention window.

Usage:
  uv run python scripts/cleanup_audit_logs.py [--days 90]

Without --days the AUDIT_RETENTION_DAYS setting is used. Intended to run
from cron or a scheduled job.
"""
from __future__ import annotations

import argparse
import asyncio
import sys

from rulegate.config import configure_logging, get_settings
from rulegate.infrastructure.audit.audit_log_service import AuditLogService
from rulegate.infrastructure.persistence.postgres.connection import create_pool
from rulegate.infrastructure.persistence.postgres.unit_of_work import create_uow_factory


async def _run(days: int | None) -> int:
    settings = get_settings()
    pool = create_pool(settings.database_url, min_size=1, max_size=2)
    await pool.open()
    try:
        audit_log = AuditLogService(
            create_uow_factory(pool), retention_days=settings.audit_retention_days
        )
        deleted = await audit_log.delete_older_than(days)
    finally:
        await pool.close()
    print(f"Deleted {deleted} audit log entries")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete old audit log entries")
    parser.add_argument("--days", type=int, default=None, help="Retention in days")
    args = parser.parse_args()
    if args.days is not None and args.days < 0:
        parser.error("--days must be non-negative")

    settings = get_settings()
    configure_logging(settings.log_level, settings.debug)
    return asyncio.run(_run(args.days))


if __name__ == "__main__":
    sys.exit(main())
