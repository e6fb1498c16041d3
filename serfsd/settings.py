from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Discovery
    listen_address: str = "localhost:7373"
    refresh_interval: int = 30
    tag_separator: str = ","
    output_file: str = "custom_sd.json"

    # Journal / logging
    events_db: str = "serfsd.db"
    log_level: str = "INFO"

    # Status API (optional)
    enable_web: bool = False
    web_host: str = "127.0.0.1"
    web_port: int = 8000


def load_settings() -> Settings:
    """Read ``SERFSD_*`` environment overrides.

    Only used to seed command-line defaults; the discovery loop itself gets
    an explicit SDConfig.
    """
    d = Settings()
    return Settings(
        listen_address=os.getenv("SERFSD_LISTEN_ADDRESS", d.listen_address),
        refresh_interval=_env_int("SERFSD_REFRESH_INTERVAL", d.refresh_interval),
        tag_separator=os.getenv("SERFSD_TAG_SEPARATOR", d.tag_separator),
        output_file=os.getenv("SERFSD_OUTPUT_FILE", d.output_file),
        events_db=os.getenv("SERFSD_EVENTS_DB", d.events_db),
        log_level=os.getenv("SERFSD_LOG_LEVEL", d.log_level).upper(),
        enable_web=_env_bool("SERFSD_ENABLE_WEB", d.enable_web),
        web_host=os.getenv("SERFSD_WEB_HOST", d.web_host),
        web_port=_env_int("SERFSD_WEB_PORT", d.web_port),
    )
