"""
Orphan relation detection and cleanup.

Detects relations rows whose source or target element no longer exists. The
foreign keys cascade on PostgreSQL, but rows can still be orphaned on
databases without enforced foreign keys or after manual data fixes.

Usage:
    python -m tasks.orphan_relations           # Report only (default)
    python -m tasks.orphan_relations --delete   # Report and delete orphans
"""
import argparse
import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy import delete as sa_delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import async_session_factory
from models.element import Element
from models.relation import Relation

logger = logging.getLogger(__name__)


@dataclass
class OrphanStats:
    """Statistics from an orphan relation cleanup run."""

    orphaned_source: int = 0
    orphaned_target: int = 0
    total_deleted: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to simple dict for logging/return."""
        return {
            "orphaned_source": self.orphaned_source,
            "orphaned_target": self.orphaned_target,
            "total_deleted": self.total_deleted,
        }


def _source_missing():  # noqa: ANN202
    return ~select(Element.id).where(Element.id == Relation.source_id).exists()


def _target_missing():  # noqa: ANN202
    return ~select(Element.id).where(Element.id == Relation.target_id).exists()


async def find_orphaned_relations(db: AsyncSession) -> list[Relation]:
    """
    Find relations where the source or target element no longer exists.

    Trashed (soft-deleted) elements still exist, so their relations are NOT
    orphaned. A relation orphaned on both sides is returned once.
    """
    stmt = (
        select(Relation)
        .where(or_(_source_missing(), _target_missing()))
        .order_by(Relation.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def cleanup_orphaned_relations(
    db: AsyncSession,
    delete: bool = False,
) -> OrphanStats:
    """
    Find and optionally delete orphaned relations.

    In delete mode, source orphans are removed first, so a relation missing
    both ends is counted once (as a source orphan). In report mode, such a
    relation is counted on both sides.

    Args:
        db: Database session.
        delete: If True, delete orphaned relations. If False (default),
                only report them.

    Returns:
        OrphanStats with breakdown of orphans found/deleted.
    """
    stats = OrphanStats()

    for side, missing in (("source", _source_missing), ("target", _target_missing)):
        if delete:
            result = await db.execute(
                sa_delete(Relation)
                .where(missing())
                .execution_options(synchronize_session=False),
            )
            count = result.rowcount
        else:
            count = await db.scalar(
                select(func.count(Relation.id)).where(missing()),
            ) or 0

        if side == "source":
            stats.orphaned_source = count
        else:
            stats.orphaned_target = count

        if count > 0:
            logger.info(
                "%s %d orphaned relations with missing %s",
                "Deleted" if delete else "Found",
                count,
                side,
            )

    stats.total_deleted = stats.orphaned_source + stats.orphaned_target if delete else 0

    if delete:
        await db.commit()

    return stats


async def run_orphan_cleanup(
    db: AsyncSession | None = None,
    delete: bool = False,
) -> OrphanStats:
    """
    Entry point for orphan relation cleanup.

    Args:
        db: Database session. If None, creates one from async_session_factory.
        delete: If True, delete orphaned relations.

    Returns:
        OrphanStats with results.
    """
    logger.info("Starting orphan relation cleanup (delete=%s)", delete)

    if db is not None:
        stats = await cleanup_orphaned_relations(db, delete=delete)
    else:
        async with async_session_factory() as session:
            stats = await cleanup_orphaned_relations(session, delete=delete)

    logger.info("Orphan relation cleanup complete: %s", stats.to_dict())
    return stats


def main() -> None:
    """CLI entry point with --delete flag."""
    parser = argparse.ArgumentParser(
        description="Detect and optionally remove orphaned relations.",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete orphaned relations (default: report only)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_orphan_cleanup(delete=args.delete))


if __name__ == "__main__":
    main()
