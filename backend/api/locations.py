"""Location API routes."""
import json
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_db
from models.location import Location
from repositories.location_repository import LocationRepository
from schemas.locations import (
    BulkInsertRequest,
    BulkInsertResponse,
    LocationCreate,
    LocationResponse,
)
from services.location_service import BulkInsertOutcome, LocationService
from utils.import_parsers import decode_upload

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])

LOCATIONS_JSON_TEMPLATE = """[
  {
    "identifier": "14",
    "description": "St Louis",
    "systemTypeName": "CSW"
  },
  {
    "identifier": "92",
    "description": "Seattle",
    "systemTypeName": "CSW"
  }
]
"""


def get_location_service(db: AsyncSession = Depends(get_db)) -> LocationService:
    """FastAPI dependency: location service over the request session."""
    return LocationService(LocationRepository(db))


def _to_response(loc: Location) -> LocationResponse:
    return LocationResponse(
        id=loc.id,
        identifier=loc.identifier,
        description=loc.description,
        system_type_name=loc.system_type_name,
        created_date=loc.created_date,
        updated_date=loc.updated_date,
    )


def _to_bulk_response(outcome: BulkInsertOutcome) -> BulkInsertResponse:
    return BulkInsertResponse(
        success=outcome.success,
        inserted_count=outcome.inserted_count,
        duplicates_skipped=outcome.duplicates_skipped,
        errors=list(outcome.errors),
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def _not_found_by_id(location_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Location with ID {location_id} not found",
    )


def _unwrap_json_string(text: str) -> str:
    """Accept a body that is itself a JSON string literal holding the JSON document."""
    stripped = text.strip()
    if stripped.startswith('"'):
        try:
            inner = json.loads(stripped)
        except ValueError:
            return text
        if isinstance(inner, str):
            return inner
    return text


@router.get("", response_model=list[LocationResponse])
async def list_locations(service: LocationService = Depends(get_location_service)) -> list[LocationResponse]:
    """List all locations ordered by description."""
    try:
        locations = await service.list_locations()
    except SQLAlchemyError as e:
        LOG.exception("Error retrieving locations")
        raise _internal_error() from e
    return [_to_response(loc) for loc in locations]


@router.get("/templates/locations.json", response_class=Response)
def template_locations_json():
    """Download a sample JSON file for bulk upload."""
    return Response(
        content=LOCATIONS_JSON_TEMPLATE,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="locations.json"'},
    )


@router.get("/identifier/{identifier}", response_model=LocationResponse)
async def get_location_by_identifier(
    identifier: str,
    service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    """Get a location by its business identifier."""
    try:
        loc = await service.get_location_by_identifier(identifier)
    except SQLAlchemyError as e:
        LOG.exception("Error retrieving location with identifier %s", identifier)
        raise _internal_error() from e
    if loc is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with identifier '{identifier}' not found",
        )
    return _to_response(loc)


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: int,
    service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    """Get a location by id."""
    try:
        loc = await service.get_location(location_id)
    except SQLAlchemyError as e:
        LOG.exception("Error retrieving location with ID %s", location_id)
        raise _internal_error() from e
    if loc is None:
        raise _not_found_by_id(location_id)
    return _to_response(loc)


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    body: LocationCreate,
    response: Response,
    service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    """Create a new location. An identifier that already exists is a server error."""
    try:
        loc = await service.create_location(body)
    except SQLAlchemyError as e:
        LOG.exception("Error creating location with identifier %s", body.identifier)
        raise _internal_error() from e
    response.headers["Location"] = f"{router.prefix}/{loc.id}"
    return _to_response(loc)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    body: LocationCreate,
    service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    """Update description and system type of a location. The identifier is not editable."""
    try:
        loc = await service.update_location(location_id, body)
    except SQLAlchemyError as e:
        LOG.exception("Error updating location with ID %s", location_id)
        raise _internal_error() from e
    if loc is None:
        raise _not_found_by_id(location_id)
    return _to_response(loc)


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: int,
    service: LocationService = Depends(get_location_service),
) -> None:
    """Delete a location by id."""
    try:
        deleted = await service.delete_location(location_id)
    except SQLAlchemyError as e:
        LOG.exception("Error deleting location with ID %s", location_id)
        raise _internal_error() from e
    if not deleted:
        raise _not_found_by_id(location_id)


@router.post("/bulk", response_model=BulkInsertResponse)
async def bulk_insert(
    body: BulkInsertRequest,
    service: LocationService = Depends(get_location_service),
) -> BulkInsertResponse:
    """Insert many locations; duplicates and items without identifier are reported, not fatal."""
    if not body.locations:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Locations list cannot be empty")
    outcome = await service.bulk_insert(body.locations)
    return _to_bulk_response(outcome)


@router.post("/bulk/json", response_model=BulkInsertResponse)
async def bulk_insert_from_json(
    request: Request,
    service: LocationService = Depends(get_location_service),
) -> BulkInsertResponse:
    """Insert locations from a raw JSON array sent as the request body."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body is not valid UTF-8") from e
    text = _unwrap_json_string(text)
    if not text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="JSON content cannot be empty")
    outcome = await service.bulk_insert_from_text(text)
    return _to_bulk_response(outcome)


@router.post("/upload", response_model=BulkInsertResponse)
async def upload_locations(
    file: UploadFile = File(...),
    service: LocationService = Depends(get_location_service),
) -> BulkInsertResponse:
    """Upload a .json file holding an array of locations and insert them."""
    content = await file.read()
    try:
        text = decode_upload(content, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    outcome = await service.bulk_insert_from_text(text)
    return _to_bulk_response(outcome)
