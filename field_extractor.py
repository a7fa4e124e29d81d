# Maps raw open-data records onto our standard NormalizedRoute object.

import json
import math
import re
from typing import Any

from route_structures import NormalizedRoute

# Candidate keys per field, consulted in order. First match wins.
ID_KEYS = ('id', '_id', 'route_id', 'id_ruta')
NAME_KEYS = ('name', 'ruta', 'descripcion', 'description')
SPEED_KEYS = ('avg_speed', 'velocidad_media', 'vel_media', 'speed', 'media_speed')
DURATION_KEYS = ('avg_duration', 'duracion_media', 'tiempo_medio', 'duration', 'duracion')

NAME_FALLBACK_PREFIX = "ruta_"

_NUMERIC_STRING = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')


def format_number(value: float) -> str:
    """Shortest round-trip form of a number, without a trailing '.0'."""
    text = repr(float(value))
    if text.endswith('.0'):
        return text[:-2]
    return text


def text_of(value: Any) -> str:
    """
    Converts a record value into the text shown in logs and reports.
    Booleans follow the feed's PHP heritage: true is '1', false is ''.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
    return str(value)


def as_number(value: Any) -> float | None:
    """Returns the value as a float if it is numeric, None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float, str)):
        return None
    if isinstance(value, str) and not _NUMERIC_STRING.match(value):
        return None
    try:
        number = float(value)
    except OverflowError:
        # Integers beyond the float range.
        return None
    if not math.isfinite(number):
        return None
    return number


def first_present(record: dict, keys) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def first_numeric(record: dict, keys) -> float | None:
    for key in keys:
        number = as_number(record.get(key))
        if number is not None:
            return number
    return None


def extract(record: Any) -> NormalizedRoute:
    """
    Normalizes one raw record. Never raises: fields that cannot be found
    resolve to None, and the name falls back to 'ruta_<id>'.
    """
    if not isinstance(record, dict):
        record = {}

    raw_id = first_present(record, ID_KEYS)
    route_id = None if raw_id is None else text_of(raw_id)

    raw_name = first_present(record, NAME_KEYS)
    if raw_name is None:
        name = NAME_FALLBACK_PREFIX + text_of(route_id)
    else:
        name = text_of(raw_name)

    # *** NORMALIZATION to our standard NormalizedRoute object ***
    return NormalizedRoute(
        id=route_id,
        name=name,
        speed=first_numeric(record, SPEED_KEYS),
        duration=first_numeric(record, DURATION_KEYS),
    )


def extract_all(records: list) -> list[NormalizedRoute]:
    return [extract(record) for record in records]
