"""Location repository: list, get, create, bulk create, update, delete."""
from collections.abc import Sequence
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.location import Location


class LocationGateway(Protocol):
    """Storage operations the location service depends on."""

    async def find_all(self) -> list[Location]: ...
    async def find_by_id(self, location_id: int) -> Optional[Location]: ...
    async def find_by_identifier(self, identifier: str) -> Optional[Location]: ...
    async def insert(self, location: Location) -> Location: ...
    async def insert_many(self, locations: Sequence[Location]) -> int: ...
    async def update(self, location: Location) -> Location: ...
    async def delete(self, location: Location) -> None: ...
    async def list_identifiers(self) -> set[str]: ...


class LocationRepository:
    """SQLAlchemy implementation of LocationGateway bound to one request session.

    Writes commit immediately. A failed commit is rolled back before the error
    propagates so the session stays usable for the rest of the request.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[Location]:
        """Return all locations ordered by description."""
        result = await self.session.execute(select(Location).order_by(Location.description, Location.id))
        return list(result.scalars().all())

    async def find_by_id(self, location_id: int) -> Optional[Location]:
        """Return a location by id or None."""
        return await self.session.get(Location, location_id)

    async def find_by_identifier(self, identifier: str) -> Optional[Location]:
        """Return the first location with this identifier or None."""
        result = await self.session.execute(
            select(Location).where(Location.identifier == identifier).order_by(Location.id).limit(1)
        )
        return result.scalars().first()

    async def insert(self, location: Location) -> Location:
        """Add a location, commit, and return it with its assigned id."""
        self.session.add(location)
        await self._commit()
        await self.session.refresh(location)
        return location

    async def insert_many(self, locations: Sequence[Location]) -> int:
        """Add all locations in one commit. Returns the number inserted."""
        self.session.add_all(locations)
        await self._commit()
        return len(locations)

    async def update(self, location: Location) -> Location:
        """Commit pending changes on an already-loaded location and return it."""
        await self._commit()
        await self.session.refresh(location)
        return location

    async def delete(self, location: Location) -> None:
        """Delete a loaded location and commit."""
        await self.session.delete(location)
        await self._commit()

    async def list_identifiers(self) -> set[str]:
        """Return every stored identifier in a single query."""
        result = await self.session.execute(select(Location.identifier))
        return set(result.scalars().all())

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
