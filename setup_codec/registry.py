from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional

from .dialects import DialectDefinition, validate_dialect
from .errors import DuplicateDialectError, InvalidDialectError

logger = logging.getLogger(__name__)


class DialectRegistry:
    """Dialect definitions keyed by vehicle id.

    Fill it once at startup; after that it is only read. Definitions are
    immutable, so concurrent lookups need no locking.
    """

    def __init__(self, definitions: Iterable[DialectDefinition] = ()):
        self._dialects: Dict[str, DialectDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: DialectDefinition) -> None:
        if definition.vehicle_id in self._dialects:
            raise DuplicateDialectError(definition.vehicle_id)

        result = validate_dialect(definition)
        for issue in result.warnings:
            logger.warning("Dialect %s: %s: %s", definition.vehicle_id, issue.field_path, issue.message)
        if not result.is_valid:
            raise InvalidDialectError(definition.vehicle_id, result.errors)

        self._dialects[definition.vehicle_id] = definition
        logger.info("Registered dialect %s (%s)", definition.vehicle_id, definition.display_name)

    def lookup(self, vehicle_id: Optional[str]) -> Optional[DialectDefinition]:
        if not vehicle_id:
            return None
        return self._dialects.get(vehicle_id)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._dialects

    def __len__(self) -> int:
        return len(self._dialects)

    def __iter__(self) -> Iterator[DialectDefinition]:
        return iter(list(self._dialects.values()))
