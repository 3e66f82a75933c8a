"""
Setup codec service.

One SetupCodec owns one DialectRegistry. Build it at startup, register
every dialect, then share it: decode and encode allocate their own
tables and records and only read the registry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set

from .config import CodecSettings
from .dialects import DialectDefinition, load_dialects
from .fallback import decode_generic, encode_generic
from .mapping import decode_fields, encode_fields
from .models import CanonicalRecord, Metadata, RawHeader, RawTable
from .registry import DialectRegistry
from .rules import DEFAULT_FORMAT_VERSION, DEFAULT_SETUP_NAME
from .tabular import parse, serialize
from .vehicles import BUILTIN_DIALECTS

logger = logging.getLogger(__name__)


def _record_skeleton(header: RawHeader) -> Dict[str, Any]:
    record = CanonicalRecord(
        vehicle_id=header.vehicle_id or "",
        environment_id=header.environment_id or "",
        name=header.name if header.name is not None else DEFAULT_SETUP_NAME,
        metadata=Metadata(
            created=header.timestamp,
            modified=header.timestamp,
            version=header.version or DEFAULT_FORMAT_VERSION,
        ),
    )
    return record.model_dump()


def _header_for(record: CanonicalRecord) -> RawHeader:
    metadata = record.metadata or Metadata()
    return RawHeader(
        version=metadata.version or DEFAULT_FORMAT_VERSION,
        vehicle_id=record.vehicle_id or None,
        environment_id=record.environment_id or None,
        name=record.name,
        timestamp=metadata.modified or metadata.created,
    )


class SetupCodec:
    """Decode vendor setup text into CanonicalRecord and back.

    Args:
        registry: Dialects to use; an empty registry means every file goes
            through the generic mapping
        strict: Raise InvalidValueError for non-numeric raw values instead
            of defaulting them to zero
    """

    def __init__(self, registry: Optional[DialectRegistry] = None, strict: bool = False):
        self._registry = registry if registry is not None else DialectRegistry()
        self.strict = strict

    @property
    def registry(self) -> DialectRegistry:
        return self._registry

    def register_dialect(self, definition: DialectDefinition) -> None:
        self._registry.register(definition)

    def dialect_for(self, vehicle_id: Optional[str]) -> Optional[DialectDefinition]:
        return self._registry.lookup(vehicle_id)

    # --- decode ---

    def decode(self, text: str) -> CanonicalRecord:
        """Parse setup text. Raises MalformedInputError for unparseable text."""
        return self.decode_table(parse(text))

    def decode_table(self, table: RawTable) -> CanonicalRecord:
        data = _record_skeleton(table.header)
        dialect = self._registry.lookup(table.header.vehicle_id)

        consumed: Set[str]
        if dialect is not None:
            logger.debug("Decoding %s with its dialect", dialect.vehicle_id)
            consumed = decode_fields(table, dialect, data, strict=self.strict)
        else:
            logger.info("No dialect for vehicle %r, using generic mapping", table.header.vehicle_id)
            consumed = decode_generic(table, data, strict=self.strict)

        data["additional_settings"] = {
            name: dict(values) for name, values in table.sections.items() if name not in consumed
        }
        return CanonicalRecord.model_validate(data)

    # --- encode ---

    def encode(self, record: CanonicalRecord) -> str:
        return serialize(self.encode_table(record))

    def encode_table(self, record: CanonicalRecord) -> RawTable:
        data = record.model_dump()
        table = RawTable(header=_header_for(record))
        dialect = self._registry.lookup(record.vehicle_id)

        if dialect is not None:
            encode_fields(data, dialect, table)
        else:
            encode_generic(data, table)

        for name, values in record.additional_settings.items():
            section = table.sections.setdefault(name, {})
            for key, value in values.items():
                if key in section:
                    logger.debug("Keeping mapped value for %s.%s over additional setting", name, key)
                    continue
                section[key] = value
        return table


def create_codec(settings: Optional[CodecSettings] = None) -> SetupCodec:
    """A fresh codec with the built-in dialects and any configured extras."""
    settings = settings or CodecSettings()
    registry = DialectRegistry(BUILTIN_DIALECTS)
    if settings.dialects_path is not None:
        for definition in load_dialects(settings.dialects_path):
            registry.register(definition)
    return SetupCodec(registry, strict=settings.strict_numbers)
