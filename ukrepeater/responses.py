#!/usr/bin/env python3
"""
Repeater API response decoding and formatting
Turns raw API bodies into repeater records and records into reply text
"""

import json
import math
from typing import Any, Dict, List, Union

from .errors import DecodeError, NotFoundError
from .models import RepeaterListResult, RepeaterLocation, RepeaterRecord, RepeaterUpdated

ATTRIBUTION = "API Provided by Rik M7GMT"
REPEATER_NOT_FOUND = "Repeater not found!"
REPEATERS_NOT_FOUND = "Repeaters not found!"

_JSON_TYPE_NAMES = {
    dict: 'object',
    list: 'array',
    str: 'string',
    int: 'number',
    float: 'number',
    bool: 'boolean',
}


def _json_type(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def _mismatch(path: str, expected: str, value: Any) -> DecodeError:
    return DecodeError(f"field '{path}' should be {expected}, got {_json_type(value)}")


def _reject_constant(token: str) -> Any:
    raise ValueError(f"'{token}' is not valid JSON")


def _load_object(body: Union[bytes, str], path: str) -> Dict[str, Any]:
    """Parse a body and require a JSON object (null decodes as empty)"""
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        raise DecodeError(str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _mismatch(path, 'an object', data)
    return data


def _string(data: Dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _mismatch(f"{path}{key}", 'a string', value)
    return value


def _float(data: Dict[str, Any], key: str, path: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _mismatch(f"{path}{key}", 'a number', value)
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise DecodeError(f"field '{path}{key}' is out of range for a number")
    return number


def _int(data: Dict[str, Any], key: str, path: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _mismatch(f"{path}{key}", 'an integer', value)
    return value


def _object(data: Dict[str, Any], key: str, path: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _mismatch(f"{path}{key}", 'an object', value)
    return value


def _array(data: Dict[str, Any], key: str, path: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise _mismatch(f"{path}{key}", 'an array', value)
    return value


def _string_list(data: Dict[str, Any], key: str, path: str) -> List[str]:
    items = []
    for i, item in enumerate(_array(data, key, path)):
        if item is None:
            item = ""
        elif not isinstance(item, str):
            raise _mismatch(f"{path}{key}[{i}]", 'a string', item)
        items.append(item)
    return items


def _record_from_dict(data: Dict[str, Any], path: str = "") -> RepeaterRecord:
    location = _object(data, 'location', path)
    location_path = f"{path}location."
    updated = _object(data, 'updated', path)
    updated_path = f"{path}updated."
    return RepeaterRecord(
        name=_string(data, 'name', path),
        tx=_string(data, 'tx', path),
        rx=_string(data, 'rx', path),
        tone=_string(data, 'tone', path),
        channel=_string(data, 'channel', path),
        modes=_string_list(data, 'modes', path),
        location=RepeaterLocation(
            lat=_float(location, 'lat', location_path),
            lng=_float(location, 'lng', location_path),
            locator=_string(location, 'locator', location_path),
            placename=_string(location, 'placename', location_path),
            region=_string(location, 'region', location_path),
        ),
        keeper=_string(data, 'keeper', path),
        api_version=_string(data, 'api_version', path),
        updated=RepeaterUpdated(
            human=_string(updated, 'human', updated_path),
            machine=_int(updated, 'machine', updated_path),
        ),
    )


def decode_repeater(body: Union[bytes, str]) -> RepeaterRecord:
    """Decode a /repeater/{name} response.

    Missing or null fields take empty values. Any other shape mismatch
    discards the whole response.

    Raises:
        DecodeError: If the body is not valid JSON of the expected shape.
    """
    return _record_from_dict(_load_object(body, 'repeater'))


def decode_repeater_list(body: Union[bytes, str]) -> RepeaterListResult:
    """Decode a /findbylocator/{locator} response.

    Raises:
        DecodeError: If the body is not valid JSON of the expected shape.
    """
    data = _load_object(body, 'repeaters')
    repeaters = []
    for i, item in enumerate(_array(data, 'repeaters', '')):
        path = f"repeaters[{i}]"
        if item is None:
            item = {}
        elif not isinstance(item, dict):
            raise _mismatch(path, 'an object', item)
        repeaters.append(_record_from_dict(item, f"{path}."))
    return RepeaterListResult(
        locator=_string(data, 'locator', ''),
        range=_int(data, 'range', ''),
        repeaters=repeaters,
        message=_string(data, 'message', ''),
        status=_string(data, 'status', ''),
        repeater_list=_string_list(data, 'repeater_list', ''),
    )


def _format_fields(record: RepeaterRecord) -> str:
    return (
        f"Name: {record.name}\n"
        f"Mode: [{' '.join(record.modes)}]\n"
        f"Tx: {record.tx}\n"
        f"Rx: {record.rx}\n"
        f"Tone: {record.tone}\n"
        f"Lat: {record.location.lat!r}\n"
        f"Lon: {record.location.lng!r}\n"
        f"Locator: {record.location.locator}\n"
        f"Keeper: {record.keeper}\n"
    )


def format_repeater(record: RepeaterRecord) -> str:
    """Render a single repeater followed by the attribution line.

    Raises:
        NotFoundError: If the record has no name.
    """
    if not record.found:
        raise NotFoundError(REPEATER_NOT_FOUND)
    return (
        f"{_format_fields(record)}"
        f"Last DB update: {record.updated.human}\n"
        f"\n"
        f"{ATTRIBUTION}"
    )


def format_repeater_list(result: RepeaterListResult) -> str:
    """Render every repeater as a numbered block, in upstream order.

    Raises:
        NotFoundError: If the result holds no repeaters.
    """
    if not result.found:
        raise NotFoundError(REPEATERS_NOT_FOUND)
    blocks = [f"[{i}]\n{_format_fields(record)}\n" for i, record in enumerate(result.repeaters, start=1)]
    return "".join(blocks) + ATTRIBUTION
