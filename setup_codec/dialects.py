"""Dialect definitions and their validation.

A dialect is plain data: which raw key in which section holds which
canonical field, plus optional per-field transforms. Definitions are
validated once when they are registered; a bad definition produces a
ValidationResult listing every problem instead of failing halfway
through a decode.

Dialects can also be loaded from JSON, for example::

    {
      "dialects": [
        {
          "vehicle_id": "bmw_m4_gt3",
          "display_name": "BMW M4 GT3",
          "sections": {"TIRE": {"tire_pressures.front_left": "PRESS_FL"}},
          "transforms": {"tire_pressures.front_left": {"kind": "scale", "factor": 6.894757}}
        }
      ]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidDialectError
from .models import CanonicalRecord
from .paths import is_numeric_field
from .rules import HEADER_KEYS
from .transforms import Transform, negate, rescale, roundtrip_failures


@dataclass(frozen=True)
class DialectDefinition:
    """Immutable mapping table for one vehicle.

    Attributes:
        vehicle_id: Identifier found in the setup header (``CAR``)
        display_name: Human-readable vehicle name
        field_mappings: section -> (canonical path -> raw key)
        transforms: canonical path -> Transform
    """

    vehicle_id: str
    display_name: str
    field_mappings: Mapping[str, Mapping[str, str]]
    transforms: Mapping[str, Transform] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {
            section: MappingProxyType(dict(fields))
            for section, fields in self.field_mappings.items()
        }
        object.__setattr__(self, "field_mappings", MappingProxyType(frozen))
        object.__setattr__(self, "transforms", MappingProxyType(dict(self.transforms)))

    def iter_fields(self) -> Iterator[Tuple[str, str, str]]:
        """Yield (section, canonical path, raw key) in definition order."""
        for section, fields in self.field_mappings.items():
            for path, raw_key in fields.items():
                yield section, path, raw_key

    @property
    def sections(self) -> FrozenSet[str]:
        return frozenset(self.field_mappings)

    @property
    def mapped_paths(self) -> FrozenSet[str]:
        return frozenset(path for _, path, _ in self.iter_fields())


# --- validation ---

class ValidationSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """A single problem found in a dialect definition.

    Attributes:
        severity: Whether this is a warning or error
        field_path: Canonical path or section the issue is about
        message: Human-readable description of the issue
    """

    severity: ValidationSeverity
    field_path: str
    message: str


@dataclass
class ValidationResult:
    is_valid: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def add_warning(self, field_path: str, message: str) -> None:
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, field_path, message))

    def add_error(self, field_path: str, message: str) -> None:
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, field_path, message))
        self.is_valid = False


def validate_dialect(definition: DialectDefinition) -> ValidationResult:
    """Check a definition against the canonical schema and its own invariants."""
    result = ValidationResult()

    if not definition.vehicle_id:
        result.add_error("vehicle_id", "vehicle id must not be empty")

    seen_paths: Dict[str, str] = {}
    for section, fields in definition.field_mappings.items():
        if not section:
            result.add_error(section, "section name must not be empty")
        if not fields:
            result.add_warning(section, "section maps no fields")

        seen_keys: Dict[str, str] = {}
        for path, raw_key in fields.items():
            if not raw_key:
                result.add_error(path, f"empty raw key in section '{section}'")
            elif raw_key in HEADER_KEYS:
                result.add_error(path, f"raw key '{raw_key}' is a reserved header key")
            elif raw_key in seen_keys:
                result.add_error(
                    path, f"raw key '{section}.{raw_key}' is already mapped to '{seen_keys[raw_key]}'"
                )
            else:
                seen_keys[raw_key] = path

            if path in seen_paths:
                result.add_error(path, f"mapped twice (sections '{seen_paths[path]}' and '{section}')")
            else:
                seen_paths[path] = section

            if not is_numeric_field(CanonicalRecord, path):
                result.add_error(path, "not a numeric field of the canonical record")

    for path, transform in definition.transforms.items():
        if path not in seen_paths:
            result.add_error(path, "transform has no field mapping")
            continue
        failures = roundtrip_failures(transform)
        if failures:
            result.add_error(path, f"transform '{transform.name}' does not round-trip for {failures}")

    return result


# --- JSON documents ---

class TransformSpec(BaseModel):
    kind: Literal["negate", "scale"]
    factor: Optional[float] = None

    def build(self) -> Transform:
        if self.kind == "negate":
            return negate()
        if self.factor is None:
            raise ValueError("'scale' transform requires a factor")
        return rescale(self.factor)


class DialectDocument(BaseModel):
    vehicle_id: str
    display_name: str = ""
    sections: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    transforms: Dict[str, TransformSpec] = Field(default_factory=dict)

    def to_definition(self) -> DialectDefinition:
        try:
            transforms = {path: item.build() for path, item in self.transforms.items()}
        except ValueError as e:
            raise InvalidDialectError(self.vehicle_id, details=str(e)) from e
        return DialectDefinition(
            vehicle_id=self.vehicle_id,
            display_name=self.display_name or self.vehicle_id,
            field_mappings=self.sections,
            transforms=transforms,
        )


def dialects_from_data(data: Union[List[Any], Dict[str, Any]], source: str = "<data>") -> List[DialectDefinition]:
    """Build definitions from parsed JSON (a list, or an object with a 'dialects' list)."""
    entries = data.get("dialects", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise InvalidDialectError(source, details="expected a list of dialects")

    definitions = []
    for index, entry in enumerate(entries):
        try:
            document = DialectDocument.model_validate(entry)
        except ValidationError as e:
            raise InvalidDialectError(f"{source}[{index}]", details=str(e)) from e
        definitions.append(document.to_definition())
    return definitions


def load_dialects(path: Union[str, Path]) -> List[DialectDefinition]:
    """Load dialect definitions from a JSON file.

    Raises:
        InvalidDialectError: If the file is missing, not JSON, or not a valid dialect list
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidDialectError(str(path), details=f"cannot read dialect file: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidDialectError(str(path), details=f"invalid JSON: {e}") from e
    return dialects_from_data(data, source=str(path))
