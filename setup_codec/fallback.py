"""
Generic mapping for vehicles without a registered dialect.

Each canonical field has an ordered list of candidate sections and an
ordered list of candidate raw key names. Decode takes the first key that
is present; encode writes under the first section and first key name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Set, Tuple

from .mapping import coerce_number, to_raw_scalar
from .models import RawTable
from .paths import get_path, set_path
from .rules import GEAR_KEY_TEMPLATE, GEAR_SECTION, MAX_GEARS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeGroup:
    sections: Tuple[str, ...]
    # (canonical path, candidate raw keys)
    fields: Tuple[Tuple[str, Tuple[str, ...]], ...]


def _axle_fields(prefix: str, corner: str, axle: str, names) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    return tuple(
        (f"{prefix}.{axle.lower()}.{path}", (f"{key}_{corner}", f"{axle}_{key}"))
        for path, key in names
    )


_SUSPENSION_NAMES = (
    ("spring_rate", "SPRING_RATE"),
    ("ride_height", "RIDE_HEIGHT"),
    ("camber", "CAMBER"),
)
_DAMPER_NAMES = (("bump", "BUMP"), ("rebound", "REBOUND"))

PROBE_GROUPS = (
    ProbeGroup(
        sections=("TIRE",),
        fields=(
            ("tire_pressures.front_left", ("LEFT_FRONT", "PRESSURE_LF")),
            ("tire_pressures.front_right", ("RIGHT_FRONT", "PRESSURE_RF")),
            ("tire_pressures.rear_left", ("LEFT_REAR", "PRESSURE_LR")),
            ("tire_pressures.rear_right", ("RIGHT_REAR", "PRESSURE_RR")),
        ),
    ),
    ProbeGroup(
        sections=("SUSPENSION",),
        fields=(
            _axle_fields("suspension", "LF", "FRONT", _SUSPENSION_NAMES)
            + (
                ("suspension.front.toe", ("TOE_IN_LF", "FRONT_TOE")),
                ("suspension.front.anti_roll_bar", ("FRONT_ANTI_ROLL_BAR", "ARB_FRONT")),
            )
            + _axle_fields("suspension", "LR", "REAR", _SUSPENSION_NAMES)
            + (
                ("suspension.rear.toe", ("TOE_IN_LR", "REAR_TOE")),
                ("suspension.rear.anti_roll_bar", ("REAR_ANTI_ROLL_BAR", "ARB_REAR")),
            )
        ),
    ),
    # some vendors keep dampers inside the suspension section
    ProbeGroup(
        sections=("DAMPER", "SUSPENSION"),
        fields=(
            _axle_fields("dampers", "LF", "FRONT", _DAMPER_NAMES)
            + _axle_fields("dampers", "LR", "REAR", _DAMPER_NAMES)
        ),
    ),
    ProbeGroup(
        sections=("AERO",),
        fields=(
            ("aero.front_wing", ("FRONT_WING", "WING_FRONT")),
            ("aero.rear_wing", ("REAR_WING", "WING_REAR")),
        ),
    ),
    ProbeGroup(
        sections=("BRAKE",),
        fields=(("brake_bias", ("BIAS", "BRAKE_BIAS")),),
    ),
    ProbeGroup(
        sections=("DIFFERENTIAL",),
        fields=(
            ("differential.preload", ("PRELOAD", "DIFF_PRELOAD")),
            ("differential.power_ramp", ("POWER_RAMP", "DIFF_POWER")),
            ("differential.coast_ramp", ("COAST_RAMP", "DIFF_COAST")),
        ),
    ),
)

KNOWN_SECTIONS = frozenset(
    [section for group in PROBE_GROUPS for section in group.sections] + [GEAR_SECTION]
)


def _probe(table: RawTable, sections: Tuple[str, ...], keys: Tuple[str, ...]) -> Any:
    for section in sections:
        values = table.sections.get(section)
        if not values:
            continue
        for key in keys:
            if key in values:
                return values[key]
    return None


def decode_gears(table: RawTable, strict: bool = False) -> List[float]:
    """GEAR_1, GEAR_2, ... up to the first missing index."""
    values = table.sections.get(GEAR_SECTION, {})
    ratios = []
    for number in range(1, MAX_GEARS + 1):
        key = GEAR_KEY_TEMPLATE.format(number)
        if key not in values:
            break
        ratios.append(coerce_number(values[key], f"gear_ratios.{number - 1}", strict))
    return ratios


def decode_generic(table: RawTable, data: Dict[str, Any], strict: bool = False) -> Set[str]:
    """Fill ``data`` from well-known key names. Returns the consumed section names."""
    found = 0
    for group in PROBE_GROUPS:
        for path, keys in group.fields:
            raw_value = _probe(table, group.sections, keys)
            if raw_value is None:
                continue
            set_path(data, path, coerce_number(raw_value, path, strict))
            found += 1

    ratios = decode_gears(table, strict)
    if ratios:
        data["gear_ratios"] = ratios

    logger.debug("Generic mapping matched %d fields and %d gears", found, len(ratios))
    return set(KNOWN_SECTIONS)


def encode_generic(data: Dict[str, Any], table: RawTable) -> None:
    for group in PROBE_GROUPS:
        section = group.sections[0]
        for path, keys in group.fields:
            value = get_path(data, path)
            if value is None:
                continue
            table.sections.setdefault(section, {})[keys[0]] = to_raw_scalar(value)

    ratios = data.get("gear_ratios") or []
    if len(ratios) > MAX_GEARS:
        logger.warning("Only %d gear ratios can be written, dropping %d", MAX_GEARS, len(ratios) - MAX_GEARS)
    if ratios:
        table.sections[GEAR_SECTION] = {
            GEAR_KEY_TEMPLATE.format(number): to_raw_scalar(ratio)
            for number, ratio in enumerate(ratios[:MAX_GEARS], start=1)
        }
