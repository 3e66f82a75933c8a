"""
Section/key/value text <-> RawTable.

Responsibilities:
- byte decoding of uploaded setup files (charset detection)
- tokenizing lines into sections and key = value pairs
- scalar classification (bool, int, float, text)
- pulling reserved header keys out of the section body
- the inverse: writing a RawTable back out so that parse(serialize(t)) == t

Comments and whitespace are not modeled; they are dropped on parse.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import MalformedInputError
from .models import RawHeader, RawScalar, RawTable
from .rules import (
    ACTIVE_KEY,
    ACTIVE_SECTION,
    COMMENT_PREFIXES,
    FALSE_LITERAL,
    HEADER_KEYS,
    KEY_VALUE_SEPARATOR,
    QUOTE,
    SECTION_CLOSE,
    SECTION_OPEN,
    TARGET_ENCODING,
    TRUE_LITERAL,
)

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
_NEEDS_QUOTES_RE = re.compile(r'[\[\]=";#\\\r\n\t]')


def read_text(raw: bytes) -> Tuple[str, Optional[str]]:
    """
    Decode uploaded setup bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If the detected encoding fails, fall back to UTF-8 with replacement characters.

    Returns the text and the detected encoding (None when nothing was detected).
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or TARGET_ENCODING
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (LookupError, UnicodeDecodeError):
        logger.warning("Could not decode setup as %s, falling back to utf-8", decode_used)
        text = raw.decode(TARGET_ENCODING, errors="replace")

    return text.lstrip("\ufeff"), detected


def parse_scalar(value: str) -> RawScalar:
    """Classify an unquoted raw value: boolean, integer, float, then text.

    Numbers that have no finite float value (``1e400``) or that exceed the
    interpreter's integer digit limit stay text.
    """
    lowered = value.lower()
    if lowered == TRUE_LITERAL:
        return True
    if lowered == FALSE_LITERAL:
        return False
    if _INT_RE.fullmatch(value):
        try:
            return int(value)
        except ValueError:
            return value
    if _FLOAT_RE.fullmatch(value):
        number = float(value)
        return number if math.isfinite(number) else value
    return value


def _unquote(value: str, line_number: int, line: str) -> Optional[str]:
    # None means "not a quoted value"
    if not value.startswith(QUOTE):
        return None
    try:
        text = json.loads(value)
    except ValueError as e:
        raise MalformedInputError("Unterminated or invalid quoted value", line_number, line) from e
    if not isinstance(text, str):
        raise MalformedInputError("Quoted value is not text", line_number, line)
    return text


def parse(text: str) -> RawTable:
    """Parse setup text into a RawTable."""
    header: Dict[str, str] = {}
    sections: Dict[str, Dict[str, RawScalar]] = {}
    current: Optional[str] = None

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIXES):
            continue

        if stripped.startswith(SECTION_OPEN):
            if not stripped.endswith(SECTION_CLOSE):
                raise MalformedInputError("Unterminated section header", line_number, line)
            name = stripped[1:-1].strip()
            if not name:
                raise MalformedInputError("Empty section name", line_number, line)
            if SECTION_OPEN in name or SECTION_CLOSE in name:
                raise MalformedInputError("Section name contains a bracket", line_number, line)
            current = name
            sections.setdefault(name, {})
            continue

        key, sep, value = stripped.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            raise MalformedInputError("Expected 'key = value'", line_number, line)
        key = key.strip()
        value = value.strip()
        if not key:
            raise MalformedInputError("Empty key", line_number, line)

        quoted = _unquote(value, line_number, line)

        if key in HEADER_KEYS:
            header[HEADER_KEYS[key]] = value if quoted is None else quoted
            continue
        if current == ACTIVE_SECTION and key == ACTIVE_KEY:
            header["name"] = value if quoted is None else quoted
            continue
        if current is None:
            raise MalformedInputError("Key outside of any section", line_number, line)

        sections[current][key] = parse_scalar(value) if quoted is None else quoted

    # RawTable drops an empty SETUPS section, whether or not it held the name
    logger.debug("Parsed setup with %d sections, header keys %s", len(sections), sorted(header))
    return RawTable(header=RawHeader(**header), sections=sections)


# --- serialize ---

def _format_text(value: str, header: bool = False) -> str:
    needs_quotes = (
        value != value.strip()
        or value.startswith(QUOTE)
        or _NEEDS_QUOTES_RE.search(value) is not None
    )
    # header values are never classified, section values are
    if not header and not needs_quotes:
        needs_quotes = not isinstance(parse_scalar(value), str)
    if needs_quotes:
        return json.dumps(value)
    return value


def format_scalar(value: RawScalar) -> str:
    """Natural textual form of a raw scalar."""
    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot write non-finite number {value!r}")
        return repr(value)
    return _format_text(str(value))


def _check_section_name(name: str) -> None:
    if (
        not name
        or name != name.strip()
        or SECTION_OPEN in name
        or SECTION_CLOSE in name
        or "\n" in name
        or "\r" in name
    ):
        raise ValueError(f"Section name {name!r} cannot be written to a setup file")


def _check_key(key: str) -> None:
    if (
        not key
        or key != key.strip()
        or KEY_VALUE_SEPARATOR in key
        or "\n" in key
        or "\r" in key
        or key.startswith(SECTION_OPEN)
        or key.startswith(COMMENT_PREFIXES)
    ):
        raise ValueError(f"Key {key!r} cannot be written to a setup file")


def serialize(table: RawTable) -> str:
    """Write a RawTable as setup text. Key order follows the table."""
    lines: List[str] = []
    header = table.header

    for key, attr in HEADER_KEYS.items():
        value = getattr(header, attr)
        if value is not None:
            lines.append(f"{key} {KEY_VALUE_SEPARATOR} {_format_text(value, header=True)}")

    sections = dict(table.sections)
    if header.name is not None:
        active = {ACTIVE_KEY: header.name}
        active.update(sections.pop(ACTIVE_SECTION, {}))
        sections = {ACTIVE_SECTION: active, **sections}
    elif not sections.get(ACTIVE_SECTION, True):
        del sections[ACTIVE_SECTION]

    for name, values in sections.items():
        _check_section_name(name)
        if lines:
            lines.append("")
        lines.append(f"{SECTION_OPEN}{name}{SECTION_CLOSE}")
        for key, value in values.items():
            _check_key(key)
            if key in HEADER_KEYS:
                raise ValueError(f"Reserved header key {key!r} inside section {name!r}")
            if name == ACTIVE_SECTION and key == ACTIVE_KEY:
                if header.name is None:
                    raise ValueError(f"{ACTIVE_KEY!r} inside {ACTIVE_SECTION!r} is reserved for the setup name")
                lines.append(f"{key} {KEY_VALUE_SEPARATOR} {_format_text(header.name, header=True)}")
                continue
            lines.append(f"{key} {KEY_VALUE_SEPARATOR} {format_scalar(value)}")

    return "\n".join(lines) + "\n"
