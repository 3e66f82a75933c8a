import json

import pytest

from setup_codec.dialects import DialectDefinition, dialects_from_data, load_dialects, validate_dialect
from setup_codec.errors import DuplicateDialectError, InvalidDialectError
from setup_codec.registry import DialectRegistry
from setup_codec.transforms import Transform, negate, rescale
from setup_codec.vehicles import BUILTIN_DIALECTS, FERRARI_488_GT3, PORSCHE_911_GT3R


def _definition(**overrides):
    values = dict(
        vehicle_id="test_car",
        display_name="Test Car",
        field_mappings={"TIRE": {"tire_pressures.front_left": "FL"}},
        transforms={},
    )
    values.update(overrides)
    return DialectDefinition(**values)


def test_builtin_dialects_are_valid():
    for dialect in BUILTIN_DIALECTS:
        result = validate_dialect(dialect)
        assert result.is_valid, result.errors


def test_definition_is_read_only():
    with pytest.raises(TypeError):
        FERRARI_488_GT3.field_mappings["TIRE"]["tire_pressures.front_left"] = "X"
    with pytest.raises(TypeError):
        FERRARI_488_GT3.transforms["brake_bias"] = negate()


def test_iter_fields_follows_definition_order():
    entries = list(PORSCHE_911_GT3R.iter_fields())
    assert entries[0] == ("TIRE", "tire_pressures.front_left", "LEFT_FRONT")
    assert entries[-1] == ("DIFFERENTIAL", "differential.coast_ramp", "DIFF_EXIT")


def test_transform_without_mapping_is_invalid():
    result = validate_dialect(_definition(transforms={"suspension.front.camber": negate()}))
    assert not result.is_valid
    assert [i.field_path for i in result.errors] == ["suspension.front.camber"]


@pytest.mark.parametrize(
    "mappings",
    [
        {"TIRE": {"tire_pressures.nose": "FL"}},
        {"TIRE": {"name": "FL"}},
        {"TIRE": {"tire_pressures.front_left": "FL", "tire_pressures.front_right": "FL"}},
        {"TIRE": {"tire_pressures.front_left": "FL"}, "OTHER": {"tire_pressures.front_left": "X"}},
        {"TIRE": {"tire_pressures.front_left": "CAR"}},
        {"": {"tire_pressures.front_left": "FL"}},
    ],
)
def test_invalid_mappings(mappings):
    assert not validate_dialect(_definition(field_mappings=mappings)).is_valid


def test_empty_vehicle_id_is_invalid():
    assert not validate_dialect(_definition(vehicle_id="")).is_valid


def test_transform_that_does_not_round_trip_is_invalid():
    lossy = Transform(decode=lambda v: round(v), encode=lambda v: v, name="round")
    result = validate_dialect(_definition(transforms={"tire_pressures.front_left": lossy}))
    assert not result.is_valid
    assert "round" in result.errors[0].message


def test_empty_section_is_a_warning():
    result = validate_dialect(_definition(field_mappings={"TIRE": {"tire_pressures.front_left": "FL"}, "AERO": {}}))
    assert result.is_valid
    assert [w.field_path for w in result.warnings] == ["AERO"]


def test_registry_register_and_lookup():
    registry = DialectRegistry(BUILTIN_DIALECTS)
    assert len(registry) == 2
    assert registry.lookup("ferrari_488_gt3") is FERRARI_488_GT3
    assert registry.lookup("unknown") is None
    assert registry.lookup(None) is None
    assert "porsche_911_gt3r" in registry
    assert [d.vehicle_id for d in registry] == ["ferrari_488_gt3", "porsche_911_gt3r"]


def test_registry_rejects_duplicates():
    registry = DialectRegistry([FERRARI_488_GT3])
    with pytest.raises(DuplicateDialectError):
        registry.register(FERRARI_488_GT3)


def test_registry_rejects_invalid_definition():
    registry = DialectRegistry()
    with pytest.raises(InvalidDialectError) as excinfo:
        registry.register(_definition(transforms={"brake_bias": negate()}))
    assert excinfo.value.vehicle_id == "test_car"
    assert excinfo.value.issues[0].field_path == "brake_bias"
    assert "test_car" not in registry


def test_dialects_from_data():
    definitions = dialects_from_data(
        {
            "dialects": [
                {
                    "vehicle_id": "bmw_m4_gt3",
                    "display_name": "BMW M4 GT3",
                    "sections": {
                        "TIRE": {"tire_pressures.front_left": "PRESS_FL"},
                        "SUSPENSION": {
                            "suspension.front.spring_rate": "SPRING_F",
                            "suspension.front.camber": "CAMBER_F",
                        },
                    },
                    "transforms": {
                        "suspension.front.spring_rate": {"kind": "scale", "factor": 1000},
                        "suspension.front.camber": {"kind": "negate"},
                    },
                }
            ]
        }
    )
    assert len(definitions) == 1
    bmw = definitions[0]
    assert bmw.vehicle_id == "bmw_m4_gt3"
    assert bmw.transforms["suspension.front.spring_rate"].decode(90) == 90000.0
    assert bmw.transforms["suspension.front.camber"].decode(2.5) == -2.5
    assert validate_dialect(bmw).is_valid


def test_dialects_from_data_rejects_bad_documents():
    with pytest.raises(InvalidDialectError):
        dialects_from_data([{"display_name": "no id"}])
    with pytest.raises(InvalidDialectError):
        dialects_from_data([{"vehicle_id": "x", "transforms": {"brake_bias": {"kind": "scale"}}}])
    with pytest.raises(InvalidDialectError):
        dialects_from_data([{"vehicle_id": "x", "transforms": {"brake_bias": {"kind": "log"}}}])


def test_load_dialects_from_file(tmp_path):
    path = tmp_path / "dialects.json"
    path.write_text(json.dumps([{"vehicle_id": "x", "sections": {"BRAKE": {"brake_bias": "BB"}}}]))
    definitions = load_dialects(path)
    assert [d.vehicle_id for d in definitions] == ["x"]
    assert definitions[0].display_name == "x"


def test_load_dialects_errors(tmp_path):
    with pytest.raises(InvalidDialectError):
        load_dialects(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(InvalidDialectError):
        load_dialects(bad)


def test_rescale_transform_in_definition():
    definition = _definition(transforms={"tire_pressures.front_left": rescale(6.894757)})
    assert validate_dialect(definition).is_valid
