import hashlib
import logging

from fastapi import FastAPI, File, HTTPException, UploadFile

from .codec import create_codec
from .config import CodecSettings
from .errors import InvalidValueError, MalformedInputError
from .models import (
    CanonicalRecord,
    DecodeResponse,
    DialectInfo,
    DialectsResponse,
    EncodedSetup,
    EncodeResponse,
    HealthResponse,
)
from .rules import SETUP_FILE_SUFFIX, TARGET_ENCODING
from .tabular import read_text

settings = CodecSettings.from_env()
logging.getLogger("setup_codec").setLevel(settings.log_level)

codec = create_codec(settings)

app = FastAPI(
    title="setup-codec",
    description="Vendor setup files <-> canonical vehicle setup records",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/dialects", response_model=DialectsResponse)
def dialects():
    return DialectsResponse(
        dialects=[
            DialectInfo(vehicle_id=d.vehicle_id, display_name=d.display_name)
            for d in codec.registry
        ]
    )


@app.post("/decode", response_model=DecodeResponse)
async def decode_setup(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(SETUP_FILE_SUFFIX):
        raise HTTPException(status_code=422, detail="Only .sto setup files are supported")

    raw = await file.read()
    text, detected = read_text(raw)
    try:
        record = codec.decode(text)
    except (MalformedInputError, InvalidValueError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    dialect = codec.dialect_for(record.vehicle_id)
    return DecodeResponse(
        record=record,
        dialect=dialect.vehicle_id if dialect else None,
        detected_encoding=detected,
    )


@app.post("/encode", response_model=EncodeResponse)
def encode_setup(record: CanonicalRecord):
    try:
        content = codec.encode(record)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    dialect = codec.dialect_for(record.vehicle_id)
    return EncodeResponse(
        setup=EncodedSetup(
            sha256=hashlib.sha256(content.encode(TARGET_ENCODING)).hexdigest(),
            encoding=TARGET_ENCODING,
            content=content,
        ),
        dialect=dialect.vehicle_id if dialect else None,
    )
