from setup_codec.fallback import KNOWN_SECTIONS, decode_gears, decode_generic, encode_generic
from setup_codec.models import CanonicalRecord, RawTable


def _decode(sections):
    data = CanonicalRecord().model_dump()
    consumed = decode_generic(RawTable(sections=sections), data)
    return CanonicalRecord.model_validate(data), consumed


def test_decode_accepts_either_alias():
    record, _ = _decode(
        {
            "TIRE": {"LEFT_FRONT": 170, "PRESSURE_RF": 171, "LEFT_REAR": 160, "PRESSURE_RR": 161},
            "SUSPENSION": {
                "SPRING_RATE_LF": 120000,
                "REAR_SPRING_RATE": 110000,
                "FRONT_CAMBER": -3.1,
                "CAMBER_LR": -2.2,
                "TOE_IN_LF": 0.1,
                "ARB_REAR": 4,
                "FRONT_BUMP": 6,
                "REBOUND_LR": 9,
            },
            "AERO": {"WING_REAR": 5},
            "BRAKE": {"BRAKE_BIAS": 54.5},
        }
    )
    assert record.tire_pressures.front_left == 170
    assert record.tire_pressures.front_right == 171
    assert record.tire_pressures.rear_left == 160
    assert record.tire_pressures.rear_right == 161
    assert record.suspension.front.spring_rate == 120000
    assert record.suspension.rear.spring_rate == 110000
    assert record.suspension.front.camber == -3.1
    assert record.suspension.rear.camber == -2.2
    assert record.suspension.front.toe == 0.1
    assert record.suspension.rear.anti_roll_bar == 4
    # dampers fall back to the suspension section
    assert record.dampers.front.bump == 6
    assert record.dampers.rear.rebound == 9
    assert record.aero.rear_wing == 5
    assert record.aero.front_wing is None
    assert record.brake_bias == 54.5


def test_first_alias_wins():
    record, _ = _decode({"TIRE": {"LEFT_FRONT": 170, "PRESSURE_LF": 999}})
    assert record.tire_pressures.front_left == 170


def test_damper_section_is_preferred():
    record, _ = _decode({"DAMPER": {"BUMP_LF": 3}, "SUSPENSION": {"BUMP_LF": 8, "REBOUND_LF": 9}})
    assert record.dampers.front.bump == 3
    assert record.dampers.front.rebound == 9


def test_optional_blocks_only_when_found():
    record, _ = _decode({"TIRE": {"LEFT_FRONT": 170}, "DIFFERENTIAL": {"UNRELATED": 1}})
    assert record.aero is None
    assert record.differential is None
    assert record.gear_ratios is None
    assert record.brake_bias == 50.0

    record, _ = _decode({"DIFFERENTIAL": {"DIFF_COAST": 35}})
    assert record.differential.coast_ramp == 35
    assert record.differential.preload == 0.0
    assert record.differential.power_ramp is None


def test_gear_hole_truncates_sequence():
    table = RawTable(sections={"GEARS": {"GEAR_1": 3.1, "GEAR_2": 2.4, "GEAR_4": 1.5}})
    assert decode_gears(table) == [3.1, 2.4]


def test_gears_stop_at_eight():
    table = RawTable(sections={"GEARS": {f"GEAR_{n}": float(n) for n in range(1, 11)}})
    assert len(decode_gears(table)) == 8


def test_consumed_sections():
    _, consumed = _decode({"TIRE": {}, "ELECTRONICS": {"TC": 3}})
    assert consumed == set(KNOWN_SECTIONS)
    assert "ELECTRONICS" not in consumed


def test_encode_uses_first_alias():
    record = CanonicalRecord(
        tire_pressures={"front_left": 170, "front_right": 171, "rear_left": 160, "rear_right": 161},
        dampers={"front": {"bump": 6}},
        aero={"front_wing": 2},
        differential={"preload": 80, "power_ramp": 45},
        gear_ratios=[3.1, 2.4, 1.9],
    )
    table = RawTable()
    encode_generic(record.model_dump(), table)

    assert table.sections["TIRE"] == {"LEFT_FRONT": 170, "RIGHT_FRONT": 171, "LEFT_REAR": 160, "RIGHT_REAR": 161}
    assert table.sections["SUSPENSION"]["SPRING_RATE_LF"] == 0
    assert table.sections["SUSPENSION"]["FRONT_ANTI_ROLL_BAR"] == 0
    assert table.sections["DAMPER"]["BUMP_LF"] == 6
    assert table.sections["AERO"] == {"FRONT_WING": 2}
    assert table.sections["BRAKE"] == {"BIAS": 50}
    assert table.sections["DIFFERENTIAL"] == {"PRELOAD": 80, "POWER_RAMP": 45}
    assert table.sections["GEARS"] == {"GEAR_1": 3.1, "GEAR_2": 2.4, "GEAR_3": 1.9}


def test_encode_skips_absent_optional_blocks():
    table = RawTable()
    encode_generic(CanonicalRecord().model_dump(), table)
    assert set(table.sections) == {"TIRE", "SUSPENSION", "DAMPER", "BRAKE"}


def test_encode_then_decode_reproduces_fields():
    record = CanonicalRecord(
        suspension={"front": {"spring_rate": 125000, "camber": -3.5}, "rear": {"toe": 0.2}},
        dampers={"rear": {"rebound": 11}},
        aero={"rear_wing": 6},
        brake_bias=55.5,
        gear_ratios=[3.0, 2.2, 1.7, 1.35],
    )
    table = RawTable()
    encode_generic(record.model_dump(), table)
    decoded, _ = _decode(table.sections)

    assert decoded.suspension.model_dump() == record.suspension.model_dump()
    assert decoded.dampers.model_dump() == record.dampers.model_dump()
    assert decoded.aero.model_dump() == record.aero.model_dump()
    assert decoded.brake_bias == 55.5
    assert decoded.gear_ratios == [3.0, 2.2, 1.7, 1.35]
