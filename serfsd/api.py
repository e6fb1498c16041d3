from __future__ import annotations

from fastapi import FastAPI, Query

from .api_models import EventOut, HealthOut, TargetGroupOut
from .config import SDConfig
from .db import EventJournal
from .runtime import TargetStore


def create_app(store: TargetStore, journal: EventJournal | None = None, config: SDConfig | None = None) -> FastAPI:
    """Status API; ``/targets`` doubles as a Prometheus http_sd endpoint."""
    app = FastAPI(title="Serf Service Discovery")

    @app.get("/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut(status="healthy", groups=store.count(), last_update=store.last_update)

    @app.get("/targets", response_model=list[TargetGroupOut])
    def targets() -> list[TargetGroupOut]:
        return [TargetGroupOut(**g) for g in store.file_sd()]

    @app.get("/events", response_model=list[EventOut])
    def events(limit: int = Query(100, ge=1, le=1000)) -> list[EventOut]:
        if journal is None:
            return []
        return [EventOut(**e) for e in journal.latest_events(limit)]

    @app.get("/config", response_model=SDConfig)
    def current_config() -> SDConfig:
        return config or SDConfig()

    return app
