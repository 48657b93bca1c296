"""Location service: single-record CRUD and the bulk insert pipeline."""
from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
from typing import Optional

from models.location import DEFAULT_SYSTEM_TYPE, Location, utcnow
from repositories.location_repository import LocationGateway
from schemas.locations import LocationInput
from utils.import_parsers import parse_locations_json

LOG = logging.getLogger(__name__)


@dataclass
class BulkInsertOutcome:
    """Result of a bulk insert. Per-item problems are reported here, never raised."""

    success: bool = False
    inserted_count: int = 0
    duplicates_skipped: int = 0
    errors: list[str] = field(default_factory=list)


class LocationService:
    """All location business logic. Talks to storage only through a LocationGateway."""

    def __init__(self, gateway: LocationGateway):
        self._gateway = gateway

    async def list_locations(self) -> list[Location]:
        return await self._gateway.find_all()

    async def get_location(self, location_id: int) -> Optional[Location]:
        return await self._gateway.find_by_id(location_id)

    async def get_location_by_identifier(self, identifier: str) -> Optional[Location]:
        return await self._gateway.find_by_identifier(identifier)

    async def create_location(self, data: LocationInput) -> Location:
        """Create and persist a location. An identifier collision raises IntegrityError from the store."""
        location = Location(
            identifier=data.identifier,
            description=data.description or "",
            system_type_name=data.system_type_name or DEFAULT_SYSTEM_TYPE,
            created_date=utcnow(),
            updated_date=None,
        )
        return await self._gateway.insert(location)

    async def update_location(self, location_id: int, data: LocationInput) -> Optional[Location]:
        """Overwrite description and system type. The stored identifier is never changed."""
        location = await self._gateway.find_by_id(location_id)
        if location is None:
            return None
        location.description = data.description or ""
        location.system_type_name = data.system_type_name or DEFAULT_SYSTEM_TYPE
        location.updated_date = utcnow()
        return await self._gateway.update(location)

    async def delete_location(self, location_id: int) -> bool:
        """Delete by id. Returns False if the location does not exist."""
        location = await self._gateway.find_by_id(location_id)
        if location is None:
            return False
        await self._gateway.delete(location)
        return True

    async def bulk_insert(self, items: Iterable[LocationInput]) -> BulkInsertOutcome:
        """
        Insert new locations in input order, skipping duplicates and items without an identifier.

        Identifiers are checked against the store (loaded once) and against items
        staged earlier in the same call. Only an unexpected storage failure makes
        the outcome unsuccessful; in that case all counts are discarded.
        """
        try:
            known = await self._gateway.list_identifiers()
            to_insert: list[Location] = []
            duplicates = 0
            errors: list[str] = []

            for item in items:
                identifier = item.identifier
                if not identifier or not identifier.strip():
                    errors.append(f"Missing identifier for location: {item.description or ''}")
                    continue
                if identifier in known:
                    duplicates += 1
                    LOG.info("Skipping duplicate identifier: %s", identifier)
                    continue
                to_insert.append(
                    Location(
                        identifier=identifier,
                        description=item.description or "",
                        system_type_name=item.system_type_name or DEFAULT_SYSTEM_TYPE,
                        created_date=utcnow(),
                    )
                )
                known.add(identifier)

            inserted = 0
            if to_insert:
                inserted = await self._gateway.insert_many(to_insert)
        except Exception as e:
            LOG.exception("Error during bulk insert operation")
            return BulkInsertOutcome(success=False, errors=[f"storage error: {e}"])

        LOG.info("Bulk insert completed: %d inserted, %d duplicates skipped", inserted, duplicates)
        return BulkInsertOutcome(
            success=True,
            inserted_count=inserted,
            duplicates_skipped=duplicates,
            errors=errors,
        )

    async def bulk_insert_from_text(self, raw: str) -> BulkInsertOutcome:
        """Parse a JSON array of locations and bulk insert it. Parse failures are reported, not raised."""
        try:
            items = parse_locations_json(raw)
        except ValueError as e:
            LOG.error("Error parsing JSON content: %s", e)
            return BulkInsertOutcome(success=False, errors=[f"JSON parsing error: {e}"])
        return await self.bulk_insert(items)
