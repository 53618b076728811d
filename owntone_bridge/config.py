"""Configuration helpers for environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _getenv_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _getenv_number(name: str, default: str, cast: type) -> float:
    raw = (os.getenv(name) or "").strip() or default
    try:
        return cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Config:
    server_ip: str
    server_port: int
    name: str
    http_timeout: float

    api_host: str
    api_port: int

    debug: bool
    log_level: str

    @property
    def host(self) -> str:
        """Base URL of the Owntone server, with the trailing slash."""
        return f"http://{self.server_ip}:{self.server_port}/"

    @staticmethod
    def load() -> "Config":
        """Build a Config from environment (compose env)."""
        server_ip    = (os.getenv("OWNTONE_SERVER_IP") or "").strip() or "127.0.0.1"
        server_port  = int(_getenv_number("OWNTONE_SERVER_PORT", "3689", int))
        name         = os.getenv("BRIDGE_NAME", "Owntone")
        http_timeout = float(_getenv_number("OWNTONE_HTTP_TIMEOUT", "5.0", float))

        api_host     = os.getenv("API_HOST", "0.0.0.0")
        api_port     = int(_getenv_number("API_PORT", "8000", int))

        debug        = _getenv_bool("DEBUG", False)
        log_level    = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()

        return Config(
            server_ip=server_ip,
            server_port=server_port,
            name=name,
            http_timeout=http_timeout,
            api_host=api_host,
            api_port=api_port,
            debug=debug,
            log_level=log_level,
        )
