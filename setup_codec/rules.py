"""
Deterministic format rules for setup files.

The parser, the serializer and the generic mapper all read their
conventions from here so the three never drift apart.
"""

SETUP_FILE_SUFFIX = ".sto"
TARGET_ENCODING = "utf-8"

SECTION_OPEN = "["
SECTION_CLOSE = "]"
KEY_VALUE_SEPARATOR = "="
COMMENT_PREFIXES = (";", "#")
QUOTE = '"'

TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

# Top-level keys -> RawHeader attribute
HEADER_KEYS = {
    "VERSION": "version",
    "CAR": "vehicle_id",
    "TRACK": "environment_id",
    "TIMESTAMP": "timestamp",
}

# The display name lives inside a section rather than at the top level.
ACTIVE_SECTION = "SETUPS"
ACTIVE_KEY = "ACTIVE"

DEFAULT_FORMAT_VERSION = "1.0"
DEFAULT_SETUP_NAME = "Unnamed Setup"
DEFAULT_BRAKE_BIAS = 50.0

MAX_GEARS = 8
GEAR_SECTION = "GEARS"
GEAR_KEY_TEMPLATE = "GEAR_{}"
