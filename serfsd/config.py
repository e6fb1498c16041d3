from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SDConfig(BaseModel):
    """Discovery configuration, fixed for the lifetime of the process."""

    model_config = ConfigDict(frozen=True)

    address: str = Field("localhost:7373", min_length=1, description="Serf RPC address (host:port)")
    refresh_interval: int = Field(30, gt=0, description="Seconds between membership polls")
    # Reserved for tag based label expansion; not used by the transform yet.
    tag_separator: str = Field(",", description="Separator for multi-valued tags")
