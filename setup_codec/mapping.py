"""
Field mapping engine: RawTable <-> canonical data through a dialect.

Both directions walk the dialect's (section, path, raw key) entries in
definition order. Entries are independent of each other, so the order
only matters for keeping output byte-identical between runs.

Policy (v1):
- a missing section or key is skipped; the canonical field keeps its default
- a raw value that is not a finite number becomes 0.0 and is logged, unless strict;
  so does a value whose transform result is out of range
- absent optional canonical fields are not written on encode
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Set

from .dialects import DialectDefinition
from .errors import InvalidValueError
from .models import RawScalar, RawTable
from .paths import get_path, set_path

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")

_UNPARSED = object()


def _number_or_unparsed(value: Any) -> Any:
    # bool is an int subclass but is never a number here
    if isinstance(value, bool):
        return _UNPARSED
    if isinstance(value, str):
        value = value.strip()
        if not _NUMBER_RE.fullmatch(value):
            return _UNPARSED
    elif not isinstance(value, (int, float)):
        return _UNPARSED
    try:
        number = float(value)
    except OverflowError:
        # integers beyond the float range
        return _UNPARSED
    return number if math.isfinite(number) else _UNPARSED


def _unparsed(value: Any, path: str, strict: bool) -> float:
    if strict:
        raise InvalidValueError(path, value)
    logger.warning("Non-numeric value %r for %s, using 0", value, path)
    return 0.0


def coerce_number(value: Any, path: str, strict: bool = False) -> float:
    """Raw scalar -> finite float, defaulting to 0.0 (or raising when strict)."""
    number = _number_or_unparsed(value)
    if number is _UNPARSED:
        return _unparsed(value, path, strict)
    return number


def to_raw_scalar(value: Any) -> RawScalar:
    """Canonical number -> raw scalar. Numbers are always written as floats."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return value


def decode_fields(
    table: RawTable,
    dialect: DialectDefinition,
    data: Dict[str, Any],
    strict: bool = False,
) -> Set[str]:
    """Project raw keys onto canonical paths in ``data``.

    Returns the section names the dialect maps, present or not.
    """
    for section, path, raw_key in dialect.iter_fields():
        values = table.sections.get(section)
        if values is None or raw_key not in values:
            continue

        raw_value = values[raw_key]
        number = _number_or_unparsed(raw_value)
        transform = dialect.transforms.get(path)
        if number is _UNPARSED:
            value = _unparsed(raw_value, path, strict)
        elif transform is not None:
            value = transform.decode(number)
            # a finite raw value can still scale out of range
            if not math.isfinite(value):
                value = _unparsed(raw_value, path, strict)
        else:
            value = number
        set_path(data, path, value)

    return set(dialect.sections)


def encode_fields(data: Dict[str, Any], dialect: DialectDefinition, table: RawTable) -> None:
    """Project canonical values in ``data`` back onto the dialect's raw keys."""
    for section, path, raw_key in dialect.iter_fields():
        value = get_path(data, path)
        if value is None:
            continue

        transform = dialect.transforms.get(path)
        if transform is not None:
            value = transform.encode(value)
        table.sections.setdefault(section, {})[raw_key] = to_raw_scalar(value)
