from __future__ import annotations
import json, logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from .accessory import SpeakerAccessory
from .eventbus import EventBus
from .registry import CharacteristicRegistry, UnknownCharacteristic, ReadOnlyCharacteristic

log = logging.getLogger(__name__)

class CharacteristicBody(BaseModel):
    value: Any

def make_app(bus: EventBus, registry: CharacteristicRegistry, accessory: SpeakerAccessory) -> FastAPI:
    app = FastAPI()

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.get("/api/accessory")
    async def get_accessory():
        return {**accessory.info.to_dict(), "uuid": accessory.config.uuid, "host": accessory.config.host}

    @app.get("/api/characteristics")
    async def get_characteristics():
        return await registry.snapshot()

    @app.get("/api/characteristics/{name}")
    async def get_characteristic(name: str):
        try:
            value = await registry.get(name)
        except UnknownCharacteristic:
            return JSONResponse({"ok": False, "error": f"unknown characteristic {name}"}, status_code=404)
        return {"name": name, "value": value}

    @app.put("/api/characteristics/{name}")
    async def put_characteristic(name: str, body: CharacteristicBody):
        try:
            await registry.set(name, body.value)
        except UnknownCharacteristic:
            return JSONResponse({"ok": False, "error": f"unknown characteristic {name}"}, status_code=404)
        except ReadOnlyCharacteristic:
            return JSONResponse({"ok": False, "error": f"{name} is read-only"}, status_code=405)
        return {"ok": True}

    @app.get("/api/target")
    async def get_target():
        return accessory.reconciler.target.to_dict()

    @app.get("/events")
    async def sse(req: Request):
        async def gen():
            yield f"event: characteristics\ndata: {json.dumps(await registry.snapshot())}\n\n"
            async for ev in bus.subscribe():
                if await req.is_disconnected():
                    break
                yield f"event: {ev['type']}\ndata: {json.dumps(ev['data'])}\n\n"
        return StreamingResponse(gen(), media_type="text/event-stream")

    return app
