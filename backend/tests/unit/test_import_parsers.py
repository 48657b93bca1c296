"""Unit tests: JSON text and upload parsing for bulk import."""
import json

import pytest

from utils.import_parsers import decode_upload, parse_locations_json

pytestmark = pytest.mark.unit


def test_parse_locations_json_array():
    """parse_locations_json returns one LocationInput per object, camelCase keys accepted."""
    text = '[{"identifier":"14","description":"St Louis","systemTypeName":"CSW"},{"identifier":"92"}]'
    items = parse_locations_json(text)
    assert [i.identifier for i in items] == ["14", "92"]
    assert items[0].system_type_name == "CSW"
    assert items[1].description is None and items[1].system_type_name is None


def test_parse_locations_json_snake_case_keys():
    """snake_case field names are accepted as well."""
    items = parse_locations_json('[{"identifier":"A","system_type_name":"XYZ"}]')
    assert items[0].system_type_name == "XYZ"


def test_parse_locations_json_empty_array():
    """An empty array is valid and yields no items."""
    assert parse_locations_json("[]") == []


def test_parse_locations_json_malformed_raises():
    """Malformed JSON raises ValueError (JSONDecodeError)."""
    with pytest.raises(json.JSONDecodeError):
        parse_locations_json("{ invalid json }")


def test_parse_locations_json_null_raises():
    """A literal null is rejected."""
    with pytest.raises(ValueError, match="null"):
        parse_locations_json("null")


def test_parse_locations_json_not_array_raises():
    """A JSON object instead of an array raises ValueError."""
    with pytest.raises(ValueError, match="array"):
        parse_locations_json('{"identifier":"A"}')


def test_parse_locations_json_row_not_object_raises():
    """Array elements must be objects."""
    with pytest.raises(ValueError, match="Row 2 is not an object"):
        parse_locations_json('[{"identifier":"A"}, 5]')


def test_parse_locations_json_wrong_field_type_raises():
    """A field of the wrong type is reported with its row number."""
    with pytest.raises(ValueError, match="Row 1"):
        parse_locations_json('[{"identifier": ["A"]}]')


def test_parse_locations_json_numeric_identifier_coerced():
    """Numeric identifiers are read as their string form."""
    items = parse_locations_json('[{"identifier": 14, "description": "St Louis"}]')
    assert items[0].identifier == "14"


def test_parse_locations_json_deep_nesting_raises_value_error():
    """Nesting too deep for the decoder is reported as ValueError."""
    with pytest.raises(ValueError, match="nesting too deep"):
        parse_locations_json("[" * 100000)


def test_decode_upload_json_file():
    """decode_upload returns the UTF-8 text of a .json file (extension is case-insensitive)."""
    assert decode_upload(b'[{"identifier":"A"}]', "LOCATIONS.JSON") == '[{"identifier":"A"}]'


def test_decode_upload_strips_bom():
    """A UTF-8 byte order mark is not part of the text."""
    assert decode_upload(b"\xef\xbb\xbf[]", "x.json") == "[]"


@pytest.mark.parametrize("filename", ["locations.csv", "locations.txt", "", None])
def test_decode_upload_rejects_non_json_names(filename):
    """Only .json files are accepted."""
    with pytest.raises(ValueError, match="Only JSON files"):
        decode_upload(b"[]", filename)


def test_decode_upload_rejects_empty_file():
    """An empty .json file is rejected."""
    with pytest.raises(ValueError, match="Empty file"):
        decode_upload(b"", "locations.json")


def test_decode_upload_rejects_invalid_utf8():
    """Bytes that are not UTF-8 are rejected."""
    with pytest.raises(ValueError, match="UTF-8"):
        decode_upload(b"\xff\xfe[\x00]\x00", "locations.json")
