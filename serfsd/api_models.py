from __future__ import annotations

from pydantic import BaseModel, Field


class TargetGroupOut(BaseModel):
    targets: list[str] = Field(default_factory=list, description="host:port scrape targets")
    labels: dict[str, str] = Field(default_factory=dict)


class HealthOut(BaseModel):
    status: str
    groups: int
    last_update: str | None = None


class EventOut(BaseModel):
    id: int
    ts: str
    level: str
    source: str | None = None
    message: str
