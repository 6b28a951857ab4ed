"""
Administration Endpoints.

Destructive maintenance operations, ADMIN only.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.io.admin import OrphanCleanupResult, ResetResult, SeedResult, SeedStats
from cgplayer.server.services.deps import AdminDep, SessionDep, SettingsDep, StorageDep
from cgplayer.server.services.maintenance import cleanup_orphaned_songs
from cgplayer.server.services.seeding import reset_database, seed_demo_data

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/reset",
    response_model=ResetResult,
    summary="Reset Database",
    description="Delete every row of every table. Uploaded files are left on disk.",
)
async def reset(current: AdminDep, session: SessionDep) -> ResetResult:
    logger.warning(f"Database reset requested by {current.id}")
    deleted = await reset_database(session)
    return ResetResult(message="Database reset completed", deleted=deleted)


@router.post("/seed", response_model=SeedResult, summary="Seed Demo Data")
async def seed(current: AdminDep, session: SessionDep, settings: SettingsDep) -> SeedResult:
    """
    Insert the demo data set: locations, administrator accounts, singers
    spread across cities and a few events.
    """
    logger.info(f"Demo seed requested by {current.id}")
    summary = await seed_demo_data(session, settings)
    return SeedResult(
        message="Database seeded successfully",
        stats=SeedStats(
            total_users=summary.total_users,
            active_users=summary.active_users,
            inactive_users=summary.inactive_users,
            locations=summary.locations,
            events=summary.events,
        ),
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/cleanup-orphans", response_model=OrphanCleanupResult, summary="Clean Up Orphaned Songs")
async def cleanup_orphans(current: AdminDep, session: SessionDep, storage: StorageDep) -> OrphanCleanupResult:
    """Deactivate songs whose file is missing and containers left without variants."""
    report = await cleanup_orphaned_songs(session, storage)
    logger.info(f"Orphan cleanup run by {current.id}: {len(report.deactivated_ids)} songs deactivated")
    return OrphanCleanupResult(
        missing_files=report.missing_files,
        empty_containers=report.empty_containers,
        deactivated_ids=report.deactivated_ids,
    )
