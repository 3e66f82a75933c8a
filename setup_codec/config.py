"""Configuration for the setup codec, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "SETUP_CODEC_"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class CodecSettings:
    """Codec configuration.

    Attributes:
        strict_numbers: Reject non-numeric raw values instead of using zero
        dialects_path: JSON file with additional dialect definitions
        log_level: Level for the ``setup_codec`` loggers
    """

    strict_numbers: bool = False
    dialects_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CodecSettings":
        environ = os.environ if environ is None else environ

        strict_name = f"{ENV_PREFIX}STRICT_NUMBERS"
        strict = _parse_bool(strict_name, environ.get(strict_name, ""))

        dialects_path = environ.get(f"{ENV_PREFIX}DIALECTS_PATH") or None
        log_level = environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").strip().upper() or "INFO"

        return cls(
            strict_numbers=strict,
            dialects_path=Path(dialects_path) if dialects_path else None,
            log_level=log_level,
        )
