"""Dotted-path access into canonical setup data.

Decode and encode work on the plain ``model_dump()`` form of a
CanonicalRecord, so ``get_path``/``set_path`` only need to understand
dicts and lists. The ``*_field`` helpers answer questions about the
pydantic schema itself and are used once, when a dialect is registered.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Mapping, MutableMapping
from typing import Any, List, Optional, Type

from pydantic import BaseModel

from .errors import InvalidPathError

_MISSING = object()


def split_path(path: str) -> List[str]:
    segments = path.split(".") if path else []
    if not segments or any(not segment for segment in segments):
        raise InvalidPathError(path, reason="empty path segment")
    return segments


def _child(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment, _MISSING)
    if isinstance(container, list) and segment.isdigit():
        index = int(segment)
        return container[index] if index < len(container) else _MISSING
    return _MISSING


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path``, or ``default`` when any segment is absent."""
    current = data
    for segment in split_path(path):
        current = _child(current, segment)
        if current is _MISSING or current is None:
            return default
    return current


def set_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate dicts as needed.

    A missing or ``None`` intermediate is replaced by an empty dict. An
    intermediate that already holds a scalar is a type conflict.
    """
    segments = split_path(path)
    current: Any = data
    for segment in segments[:-1]:
        child = _child(current, segment)
        if child is _MISSING or child is None:
            if not isinstance(current, MutableMapping):
                raise InvalidPathError(path, segment, "cannot create entry")
            child = current[segment] = {}
        elif not isinstance(child, (MutableMapping, list)):
            raise InvalidPathError(path, segment, f"{type(child).__name__} is not a container")
        current = child

    last = segments[-1]
    if isinstance(current, list):
        if not last.isdigit() or int(last) >= len(current):
            raise InvalidPathError(path, last, "list index out of range")
        current[int(last)] = value
    else:
        current[last] = value


# --- schema helpers ---

def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, getattr(types, "UnionType", typing.Union)):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def field_annotation(model: Type[BaseModel], path: str) -> Optional[Any]:
    """Type of the field at ``path`` in ``model`` (Optional unwrapped), or None if unknown."""
    current: Any = model
    for segment in split_path(path):
        if not _is_model(current):
            return None
        field = current.model_fields.get(segment)
        if field is None:
            return None
        current = _unwrap_optional(field.annotation)
    return current


def is_numeric_field(model: Type[BaseModel], path: str) -> bool:
    return field_annotation(model, path) in (float, int)


def numeric_field_paths(model: Type[BaseModel], prefix: str = "") -> List[str]:
    """Every numeric leaf path of ``model``, in declaration order."""
    paths: List[str] = []
    for name, field in model.model_fields.items():
        annotation = _unwrap_optional(field.annotation)
        path = f"{prefix}{name}"
        if annotation in (float, int):
            paths.append(path)
        elif _is_model(annotation):
            paths.extend(numeric_field_paths(annotation, f"{path}."))
    return paths
