"""
Scheduler - Promotion activity report

Job Schedule:
1. Promotion Report: every PROMOTION_REPORT_INTERVAL_MINUTES (default hourly)
   logs windows that ended since the previous run and the number of active
   windows per content type.

The report is informational; listings never depend on it.

Usage:
    python scheduler.py              # Run scheduler daemon
    python scheduler.py --once       # Run the report once and exit
    python scheduler.py --migrate    # Apply migrations and exit
"""
import asyncio
import sys
from datetime import datetime, timedelta
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from config import settings, ensure_directories
from constants import TargetType
from database import (
    init_engine,
    close_engine,
    init_database_async,
    get_session,
    get_table_counts_async,
    check_database_exists,
    run_migrations,
)
from ranking import RankingEngine
from repositories import PromotionRepository, content_sources
from utils.clock import utcnow
from utils.logger import init_logging


class PromotionActivityScheduler:
    """Periodic reporting on the promotion ledger."""

    def __init__(self, interval_minutes: Optional[int] = None):
        self.scheduler = AsyncIOScheduler()
        self.interval_minutes = interval_minutes or settings.PROMOTION_REPORT_INTERVAL_MINUTES
        self._last_report_at: Optional[datetime] = None

    def setup(self):
        """Setup scheduled jobs."""
        self.scheduler.add_job(
            self.report_promotion_activity,
            IntervalTrigger(minutes=self.interval_minutes),
            id="promotion_report",
            name="Promotion Activity Report",
            replace_existing=True,
            next_run_time=datetime.now() + timedelta(minutes=1)  # First run in 1 minute
        )

        logger.info("Scheduler setup complete with 1 job")
        self._log_schedule()

    def _log_schedule(self):
        """Log current job schedule."""
        jobs = self.scheduler.get_jobs()
        logger.info(f"Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    async def report_promotion_activity(self, now: Optional[datetime] = None) -> Optional[dict]:
        """
        Job: log ended windows and active counts.

        Covers (previous run, now]; the first run looks back one interval.

        Returns:
            Summary dict, or None if the ledger could not be read
        """
        now = now or utcnow()
        since = self._last_report_at or now - timedelta(minutes=self.interval_minutes)

        try:
            async with get_session() as session:
                engine = RankingEngine(content_sources(session), PromotionRepository(session), clock=lambda: now)
                ended = await engine.ended_promotions(since, now)
                active = {
                    target_type.value: await engine.count_active_promotions(target_type)
                    for target_type in TargetType
                }
        except Exception as e:
            logger.exception(f"Promotion report failed: {e}")
            return None

        for record in ended:
            logger.info(
                f"Promotion ended: {record.target_type.value} #{record.target_id} "
                f"({record.tier.value}, {record.duration_days}d, owner={record.owner_id})"
            )
        logger.info(
            f"Promotion report {since:%Y-%m-%d %H:%M} -> {now:%Y-%m-%d %H:%M}: "
            f"{len(ended)} ended, active {active}"
        )

        self._last_report_at = now
        return {
            "since": since.isoformat(),
            "until": now.isoformat(),
            "ended": [record.to_dict() for record in ended],
            "active": active,
        }

    def start(self):
        """Start the scheduler. Must be called with a running event loop."""
        self.setup()
        self.scheduler.start()
        logger.info("Scheduler started - Press Ctrl+C to stop")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Scheduler stopped")

    async def run_once(self) -> bool:
        """Run the report once."""
        await _prepare_database()
        logger.info("Running promotion report once...")
        result = await self.report_promotion_activity()
        await close_engine()

        if result is not None:
            logger.info("Promotion report completed successfully")
        else:
            logger.error("Promotion report failed")
        return result is not None


async def _prepare_database():
    ensure_directories()
    if not check_database_exists(settings.DATABASE_PATH):
        logger.info(f"Creating new database at {settings.DATABASE_PATH}")
    await init_engine()
    await init_database_async()


async def _report_table_counts():
    await init_engine()
    counts = await get_table_counts_async()
    for table, rows in counts.items():
        logger.info(f"  - {table}: {rows} rows")
    await close_engine()


async def run_scheduler():
    """Run the scheduler until cancelled."""
    await _prepare_database()
    scheduler = PromotionActivityScheduler()
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()
        await close_engine()


def main():
    """Main entry point with CLI arguments."""
    import argparse

    parser = argparse.ArgumentParser(description="Content Ranking Engine Scheduler")
    parser.add_argument("--once", action="store_true", help="Run the promotion report once and exit")
    parser.add_argument("--migrate", action="store_true", help="Apply Alembic migrations and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    init_logging("scheduler", "DEBUG" if args.verbose else None)

    if args.migrate:
        run_migrations()
        logger.info("Migrations applied")
        asyncio.run(_report_table_counts())
        sys.exit(0)

    if args.once:
        result = asyncio.run(PromotionActivityScheduler().run_once())
        sys.exit(0 if result else 1)

    try:
        asyncio.run(run_scheduler())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Received shutdown signal")


if __name__ == "__main__":
    main()
