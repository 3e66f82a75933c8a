import hashlib

from fastapi.testclient import TestClient
from setup_codec.main import app

client = TestClient(app)

FERRARI_SETUP = """VERSION = 1.2
CAR = ferrari_488_gt3
TRACK = spa

[SETUPS]
ACTIVE = Quali

[TIRE]
PRESSURE_LF = 172
PRESSURE_RF = 172
PRESSURE_LR = 165
PRESSURE_RR = 165

[SUSPENSION]
CAMBER_LF = 3.0
"""


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_dialects_lists_builtin_cars():
    r = client.get("/dialects")
    assert r.status_code == 200
    ids = [d["vehicle_id"] for d in r.json()["dialects"]]
    assert "ferrari_488_gt3" in ids
    assert "porsche_911_gt3r" in ids


def test_decode_setup_file():
    files = {"file": ("quali.sto", FERRARI_SETUP.encode("ascii"), "text/plain")}
    r = client.post("/decode", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["dialect"] == "ferrari_488_gt3"
    record = data["record"]
    # camelCase on the wire
    assert record["tirePressures"] == {
        "frontLeft": 172,
        "frontRight": 172,
        "rearLeft": 165,
        "rearRight": 165,
    }
    assert record["suspension"]["front"]["camber"] == -3.0
    assert record["name"] == "Quali"
    assert record["environmentId"] == "spa"


def test_decode_rejects_other_file_types():
    files = {"file": ("setup.csv", b"a,b\n", "text/csv")}
    r = client.post("/decode", files=files)
    assert r.status_code == 422


def test_decode_malformed_setup():
    files = {"file": ("broken.sto", b"[TIRE\nPRESSURE_LF = 1\n", "text/plain")}
    r = client.post("/decode", files=files)
    assert r.status_code == 422
    assert "Unterminated section header" in r.json()["detail"]


def test_encode_round_trip_through_api():
    files = {"file": ("quali.sto", FERRARI_SETUP.encode("ascii"), "text/plain")}
    record = client.post("/decode", files=files).json()["record"]

    r = client.post("/encode", json=record)
    assert r.status_code == 200

    data = r.json()
    assert data["dialect"] == "ferrari_488_gt3"
    content = data["setup"]["content"]
    assert data["setup"]["sha256"] == hashlib.sha256(content.encode("utf-8")).hexdigest()
    assert "PRESSURE_LF = 172.0" in content.splitlines()
    assert "CAMBER_LF = 3.0" in content.splitlines()


def test_encode_accepts_snake_case_fields():
    r = client.post("/encode", json={"vehicle_id": "unknown_car", "tire_pressures": {"front_left": 150}})
    assert r.status_code == 200
    assert "LEFT_FRONT = 150.0" in r.json()["setup"]["content"].splitlines()


def test_decode_out_of_range_numbers():
    setup = b"CAR = porsche_911_gt3r\n[SUSPENSION]\nFRONT_SPRING_RATE = 1e306\n[ELECTRONICS]\nX = 1e400\n"
    files = {"file": ("huge.sto", setup, "text/plain")}
    r = client.post("/decode", files=files)
    assert r.status_code == 200

    record = r.json()["record"]
    assert record["suspension"]["front"]["springRate"] == 0.0
    assert record["additionalSettings"] == {"ELECTRONICS": {"X": "1e400"}}
