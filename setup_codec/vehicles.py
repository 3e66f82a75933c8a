"""Built-in dialects for the supported cars."""

from .dialects import DialectDefinition
from .transforms import negate, rescale

FERRARI_488_GT3 = DialectDefinition(
    vehicle_id="ferrari_488_gt3",
    display_name="Ferrari 488 GT3",
    field_mappings={
        "TIRE": {
            "tire_pressures.front_left": "PRESSURE_LF",
            "tire_pressures.front_right": "PRESSURE_RF",
            "tire_pressures.rear_left": "PRESSURE_LR",
            "tire_pressures.rear_right": "PRESSURE_RR",
        },
        "SUSPENSION": {
            "suspension.front.spring_rate": "SPRING_RATE_LF",
            "suspension.front.ride_height": "RIDE_HEIGHT_LF",
            "suspension.front.camber": "CAMBER_LF",
            "suspension.front.toe": "TOE_LF",
            "suspension.front.anti_roll_bar": "ARB_FRONT",
            "suspension.rear.spring_rate": "SPRING_RATE_LR",
            "suspension.rear.ride_height": "RIDE_HEIGHT_LR",
            "suspension.rear.camber": "CAMBER_LR",
            "suspension.rear.toe": "TOE_LR",
            "suspension.rear.anti_roll_bar": "ARB_REAR",
            "dampers.front.bump": "BUMP_LF",
            "dampers.front.rebound": "REBOUND_LF",
            "dampers.rear.bump": "BUMP_LR",
            "dampers.rear.rebound": "REBOUND_LR",
        },
        "AERO": {
            "aero.rear_wing": "WING_REAR",
        },
        "BRAKE": {
            "brake_bias": "BIAS",
        },
        "DIFFERENTIAL": {
            "differential.preload": "PRELOAD",
            "differential.power_ramp": "POWER_RAMP",
            "differential.coast_ramp": "COAST_RAMP",
        },
    },
    transforms={
        # Ferrari reports negative camber as a positive number
        "suspension.front.camber": negate(),
        "suspension.rear.camber": negate(),
    },
)

PORSCHE_911_GT3R = DialectDefinition(
    vehicle_id="porsche_911_gt3r",
    display_name="Porsche 911 GT3 R",
    field_mappings={
        "TIRE": {
            "tire_pressures.front_left": "LEFT_FRONT",
            "tire_pressures.front_right": "RIGHT_FRONT",
            "tire_pressures.rear_left": "LEFT_REAR",
            "tire_pressures.rear_right": "RIGHT_REAR",
        },
        "SUSPENSION": {
            "suspension.front.spring_rate": "FRONT_SPRING_RATE",
            "suspension.front.ride_height": "FRONT_RIDE_HEIGHT",
            "suspension.front.camber": "FRONT_CAMBER",
            "suspension.front.toe": "FRONT_TOE",
            "suspension.front.anti_roll_bar": "FRONT_ARB",
            "suspension.rear.spring_rate": "REAR_SPRING_RATE",
            "suspension.rear.ride_height": "REAR_RIDE_HEIGHT",
            "suspension.rear.camber": "REAR_CAMBER",
            "suspension.rear.toe": "REAR_TOE",
            "suspension.rear.anti_roll_bar": "REAR_ARB",
            "dampers.front.bump": "FRONT_BUMP",
            "dampers.front.rebound": "FRONT_REBOUND",
            "dampers.rear.bump": "REAR_BUMP",
            "dampers.rear.rebound": "REAR_REBOUND",
        },
        "AERO": {
            "aero.rear_wing": "REAR_WING",
        },
        "BRAKE": {
            "brake_bias": "BRAKE_BIAS",
        },
        "DIFFERENTIAL": {
            "differential.preload": "DIFF_PRELOAD",
            "differential.power_ramp": "DIFF_ENTRY",
            "differential.coast_ramp": "DIFF_EXIT",
        },
    },
    transforms={
        # spring rates are N/mm on disk, N/m canonically
        "suspension.front.spring_rate": rescale(1000),
        "suspension.rear.spring_rate": rescale(1000),
        "suspension.front.camber": negate(),
        "suspension.rear.camber": negate(),
    },
)

BUILTIN_DIALECTS = (FERRARI_488_GT3, PORSCHE_911_GT3R)
