"""Parse raw JSON text and uploaded files for location bulk import."""
import json

from pydantic import ValidationError

from schemas.locations import LocationInput


def parse_locations_json(text: str) -> list[LocationInput]:
    """Parse a JSON array of location objects. Raises ValueError with a diagnostic if invalid."""
    try:
        data = json.loads(text)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e
    if data is None:
        raise ValueError("JSON content is null")
    if not isinstance(data, list):
        raise ValueError("JSON must be an array of objects")
    items: list[LocationInput] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Row {i + 1} is not an object")
        try:
            items.append(LocationInput.model_validate(item))
        except ValidationError as e:
            raise ValueError(f"Row {i + 1}: {e.errors()[0]['msg']}") from e
    return items


def decode_upload(content: bytes, filename: str | None) -> str:
    """Check an uploaded file is a non-empty .json file and return its UTF-8 text. Raises ValueError."""
    if not filename or not filename.lower().endswith(".json"):
        raise ValueError("Only JSON files are allowed")
    if not content:
        raise ValueError("Empty file")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValueError("File is not valid UTF-8") from e
