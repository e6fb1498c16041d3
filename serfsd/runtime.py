from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any

ADDRESS_LABEL = "__address__"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Member:
    """One Serf cluster participant as reported by a single poll."""

    addr: str
    port: int
    name: str = ""
    tags: Mapping[str, str] = field(default_factory=dict)
    status: str = ""


@dataclass(frozen=True)
class TargetGroup:
    source: str
    labels: Mapping[str, str] = field(default_factory=dict)
    targets: tuple[Mapping[str, str], ...] = ()

    @property
    def is_tombstone(self) -> bool:
        return not self.targets

    def addresses(self) -> list[str]:
        return [t[ADDRESS_LABEL] for t in self.targets if ADDRESS_LABEL in t]


class TargetStore:
    """Thread-safe view of the most recently published target groups.

    The discovery loop publishes full batches; the file sink and the HTTP
    API read from here.
    """

    def __init__(self) -> None:
        self.lock = Lock()
        self.groups: dict[str, list[TargetGroup]] = {}  # source -> live groups
        self.last_update: str | None = None

    def apply(self, batch: Iterable[TargetGroup]) -> bool:
        """Merge a batch into the view.

        Live groups replace whatever was stored for their source, a tombstone
        drops the source. Returns True when the view changed.
        """
        incoming: dict[str, list[TargetGroup]] = {}
        for tg in batch:
            live = incoming.setdefault(tg.source, [])
            if not tg.is_tombstone:
                live.append(tg)

        with self.lock:
            before = {k: list(v) for k, v in self.groups.items()}
            for source, live in incoming.items():
                if live:
                    self.groups[source] = live
                else:
                    self.groups.pop(source, None)
            self.last_update = utc_now()
            return before != self.groups

    def sources(self) -> set[str]:
        with self.lock:
            return set(self.groups)

    def count(self) -> int:
        with self.lock:
            return sum(len(v) for v in self.groups.values())

    def file_sd(self) -> list[dict[str, Any]]:
        """Render in the Prometheus file_sd / http_sd JSON shape."""
        with self.lock:
            out: list[dict[str, Any]] = []
            for source in sorted(self.groups):
                for tg in self.groups[source]:
                    out.append({"targets": sorted(tg.addresses()), "labels": dict(tg.labels)})
            return out
