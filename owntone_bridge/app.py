"""Owntone bridge entry: discover the server, wire the accessory, serve its characteristics."""
from __future__ import annotations
import asyncio, logging

try:
    import uvloop as _uvloop  # type: ignore
    _uvloop.install()
except Exception:
    pass

import uvicorn

from .config import Config
from .speaker.accessory import SpeakerAccessory, discover
from .speaker.adapters.owntone import OwntoneClient
from .speaker.eventbus import EventBus
from .speaker.http_api import make_app
from .speaker.registry import CharacteristicRegistry

log = logging.getLogger(__name__)

async def main() -> int:
    cfg = Config.load()
    logging.basicConfig(level=cfg.log_level)
    log.debug("Config: %s", cfg)

    async with OwntoneClient(cfg.host, timeout=cfg.http_timeout) as client:
        accessory_cfg = await discover(client, cfg.host)
        if accessory_cfg is None:
            log.error("No Owntone server at %s, giving up", cfg.host)
            return 1
        log.info("Adding accessory %s (%s) for %s", accessory_cfg.library_name, accessory_cfg.version, cfg.name)

        bus = EventBus()
        registry = CharacteristicRegistry(bus)
        accessory = SpeakerAccessory(accessory_cfg, client, registry, bus=bus)
        app = make_app(bus, registry, accessory)

        # Uvicorn in this process; it handles SIGINT/SIGTERM and returns
        config = uvicorn.Config(app=app, host=cfg.api_host, port=cfg.api_port, log_level=cfg.log_level.lower(), loop="asyncio")
        server = uvicorn.Server(config)
        await server.serve()
    return 0

def run() -> None:
    raise SystemExit(asyncio.run(main()))

if __name__ == "__main__":
    run()
