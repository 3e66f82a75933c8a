from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .rules import ACTIVE_SECTION, DEFAULT_BRAKE_BIAS, DEFAULT_SETUP_NAME

RawScalar = Union[bool, int, float, str]


# --- Raw side: what the tabular parser produces ---

class RawHeader(BaseModel):
    version: Optional[str] = None
    vehicle_id: Optional[str] = None
    environment_id: Optional[str] = None
    name: Optional[str] = None
    timestamp: Optional[str] = None


class RawTable(BaseModel):
    header: RawHeader = Field(default_factory=RawHeader)
    sections: Dict[str, Dict[str, RawScalar]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def drop_empty_active_section(self) -> "RawTable":
        # an empty SETUPS section cannot be told apart from one holding only
        # the setup name once written, so it is never kept
        if ACTIVE_SECTION in self.sections and not self.sections[ACTIVE_SECTION]:
            del self.sections[ACTIVE_SECTION]
        return self


# --- Canonical side: one shape for every vendor ---

class CanonicalModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class SuspensionAxle(CanonicalModel):
    spring_rate: float = 0.0  # N/m
    ride_height: float = 0.0  # mm
    camber: float = 0.0  # degrees, negative tilts the top inward
    toe: float = 0.0  # degrees, positive is toe-in
    anti_roll_bar: float = 0.0


class Suspension(CanonicalModel):
    front: SuspensionAxle = Field(default_factory=SuspensionAxle)
    rear: SuspensionAxle = Field(default_factory=SuspensionAxle)


class DamperAxle(CanonicalModel):
    bump: float = 0.0
    rebound: float = 0.0


class Dampers(CanonicalModel):
    front: DamperAxle = Field(default_factory=DamperAxle)
    rear: DamperAxle = Field(default_factory=DamperAxle)


class TirePressures(CanonicalModel):
    # kPa
    front_left: float = 0.0
    front_right: float = 0.0
    rear_left: float = 0.0
    rear_right: float = 0.0


class Aero(CanonicalModel):
    front_wing: Optional[float] = None
    rear_wing: Optional[float] = None


class Differential(CanonicalModel):
    preload: float = 0.0
    power_ramp: Optional[float] = None
    coast_ramp: Optional[float] = None


class Metadata(CanonicalModel):
    created: Optional[str] = None
    modified: Optional[str] = None
    author: Optional[str] = None
    version: Optional[str] = None


class CanonicalRecord(CanonicalModel):
    vehicle_id: str = ""
    environment_id: str = ""
    name: str = DEFAULT_SETUP_NAME
    description: Optional[str] = None
    suspension: Suspension = Field(default_factory=Suspension)
    dampers: Dampers = Field(default_factory=Dampers)
    tire_pressures: TirePressures = Field(default_factory=TirePressures)
    aero: Optional[Aero] = None
    # percent of braking force on the front axle
    brake_bias: float = DEFAULT_BRAKE_BIAS
    differential: Optional[Differential] = None
    gear_ratios: Optional[List[float]] = None
    additional_settings: Dict[str, Dict[str, RawScalar]] = Field(default_factory=dict)
    metadata: Optional[Metadata] = None


# --- HTTP envelopes ---

class DialectInfo(BaseModel):
    vehicle_id: str
    display_name: str


class DialectsResponse(BaseModel):
    dialects: List[DialectInfo] = Field(default_factory=list)


class DecodeResponse(BaseModel):
    record: CanonicalRecord
    dialect: Optional[str] = Field(default=None, examples=["ferrari_488_gt3"])
    detected_encoding: Optional[str] = Field(default=None, examples=["ascii"])


class EncodedSetup(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content: str


class EncodeResponse(BaseModel):
    setup: EncodedSetup
    dialect: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool = True
