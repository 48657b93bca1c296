# Schemas package
from .health import HealthResponse
from .locations import (
    BulkInsertRequest,
    BulkInsertResponse,
    LocationCreate,
    LocationInput,
    LocationResponse,
)

__all__ = [
    "BulkInsertRequest",
    "BulkInsertResponse",
    "HealthResponse",
    "LocationCreate",
    "LocationInput",
    "LocationResponse",
]
