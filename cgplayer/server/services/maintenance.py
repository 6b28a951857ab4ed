"""
Orphan reconciliation.

Uploads write files before committing rows, and a crash in between (or a
file removed by hand) leaves active rows pointing at nothing. This pass
deactivates such rows, then any container left without an active variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.server.services.uploads import UploadStorage

logger = get_logger(__name__)


@dataclass
class OrphanReport:
    missing_files: int = 0
    empty_containers: int = 0
    deactivated_ids: List[str] = field(default_factory=list)


async def cleanup_orphaned_songs(session: AsyncSession, storage: UploadStorage) -> OrphanReport:
    """Deactivate songs whose file is gone and containers left empty, then commit."""
    repo = SongRepository(session)
    report = OrphanReport()

    for song in await repo.list_active_files():
        if storage.resolve(song.file_path).is_file():
            continue
        logger.warning(f"Song {song.id} points at a missing file: {song.file_path}")
        song.is_active = False
        session.add(song)
        report.missing_files += 1
        report.deactivated_ids.append(song.id)
    await session.flush()

    containers = await repo.list_active_containers()
    children = await repo.active_children_of(container.id for container in containers)
    for container in containers:
        if children.get(container.id):
            continue
        logger.warning(f"Container song {container.id} has no active variants left")
        container.is_active = False
        session.add(container)
        report.empty_containers += 1
        report.deactivated_ids.append(container.id)

    await session.commit()
    logger.info(
        f"Orphan cleanup finished: {report.missing_files} missing files, "
        f"{report.empty_containers} empty containers"
    )
    return report
