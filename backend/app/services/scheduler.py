"""
Scheduled jobs
APScheduler runs the nightly tree integrity sweep
"""

import logging
from typing import Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import SessionLocal
from app.repositories.hierarchy import HierarchyRepository
from app.services.hierarchy import HierarchyKind
from app.services.kinds import CATEGORY, MENU_ITEM, PRODUCT_CATEGORY
from app.utils.tree import IntegrityReport, find_integrity_violations

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None

TREE_KINDS = (CATEGORY, PRODUCT_CATEGORY, MENU_ITEM)


async def sweep_kind(db: AsyncSession, kind: HierarchyKind, repair: bool = False) -> IntegrityReport:
    """Scan one table for dangling parents and cycles, optionally fixing them.

    Repair promotes orphans to root and detaches the first member of each
    cycle from its parent, which breaks the loop without deleting anything.
    """
    repo = HierarchyRepository(db, kind.model)
    report = find_integrity_violations(await repo.find_all())

    if report.orphans:
        logger.warning(f"⚠️ {kind.name}: {len(report.orphans)} row(s) point at a missing parent: {report.orphans}")
    if report.cycles:
        logger.warning(f"⚠️ {kind.name}: parent cycles found: {report.cycles}")

    if repair and not report.ok:
        async with repo.transaction():
            if report.orphans:
                await repo.update_many([kind.model.id.in_(report.orphans)], {"parent_id": None})
            for cycle in report.cycles:
                await repo.update_fields(cycle[0], {"parent_id": None})
        logger.info(f"🔧 {kind.name}: repaired {len(report.orphans)} orphan(s), {len(report.cycles)} cycle(s)")

    return report


async def tree_integrity_sweep() -> Dict[str, IntegrityReport]:
    """Run the sweep over every tree table"""
    reports = {}
    async with SessionLocal() as db:
        for kind in TREE_KINDS:
            try:
                reports[kind.name] = await sweep_kind(db, kind, repair=settings.TREE_AUDIT_REPAIR)
            except Exception as e:
                logger.error(f"❌ Integrity sweep failed for {kind.name}: {e}")
    clean = [name for name, report in reports.items() if report.ok]
    logger.info(f"✅ Integrity sweep finished, clean tables: {clean}")
    return reports


def init_scheduler():
    """Create and start the scheduler"""
    global scheduler

    if not settings.TREE_AUDIT_ENABLED:
        logger.info("🌳 Tree integrity sweep disabled")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        tree_integrity_sweep,
        trigger=CronTrigger(
            hour=settings.TREE_AUDIT_HOUR,
            minute=settings.TREE_AUDIT_MINUTE
        ),
        id="tree_integrity_sweep",
        name="Tree integrity sweep",
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"⏰ Scheduler started - integrity sweep daily at {settings.TREE_AUDIT_HOUR:02d}:{settings.TREE_AUDIT_MINUTE:02d}")


def shutdown_scheduler():
    """Stop the scheduler"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ Scheduler stopped")
