"""
Turf directory: lookup, ownership and display metadata for bookable venues.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from turf_booking.core.errors import Forbidden, NotFound
from turf_booking.core.logging import get_logger
from turf_booking.core.security import Principal
from turf_booking.models.turf import Turf
from turf_booking.schemas.interval import TurfSummary
from turf_booking.schemas.turf import TurfCreate

logger = get_logger(__name__)


class TurfDirectory:
    """Read side of the turfs table as seen by the admission service."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_turf(self, turf_id: int) -> Turf:
        async with self.session_factory() as session:
            turf = await session.get(Turf, turf_id)
        if turf is None:
            raise NotFound(f"Turf {turf_id} not found")
        return turf

    async def describe(self, turf_ids: set[int]) -> dict[int, TurfSummary]:
        """Name and location for each known turf id; unknown ids are omitted."""
        if not turf_ids:
            return {}
        async with self.session_factory() as session:
            result = await session.execute(
                select(Turf.id, Turf.name, Turf.location).where(Turf.id.in_(sorted(turf_ids)))
            )
            return {
                row.id: TurfSummary(id=row.id, name=row.name, location=row.location)
                for row in result
            }


def ensure_owner(principal: Principal) -> None:
    if not principal.is_owner:
        raise Forbidden("Only owners can manage turfs")


async def create_turf(db: AsyncSession, turf_data: TurfCreate, principal: Principal) -> Turf:
    """Publish a new turf owned by the calling owner."""
    ensure_owner(principal)

    turf = Turf(
        name=turf_data.name,
        location=turf_data.location,
        image_url=turf_data.image_url,
        owner_id=principal.user_id,
    )
    db.add(turf)
    await db.flush()
    await db.refresh(turf)

    logger.info("turf_created", turf_id=turf.id, owner_id=principal.user_id, name=turf.name)
    return turf


async def list_turfs(db: AsyncSession) -> list[Turf]:
    """All turfs with their owners, oldest first."""
    result = await db.execute(select(Turf).order_by(Turf.id.asc()))
    return list(result.scalars().unique().all())


async def list_owner_turfs(db: AsyncSession, principal: Principal) -> list[Turf]:
    ensure_owner(principal)
    result = await db.execute(
        select(Turf).where(Turf.owner_id == principal.user_id).order_by(Turf.id.asc())
    )
    return list(result.scalars().unique().all())
