from __future__ import annotations

import json
import logging
import os
import queue
import tempfile
from threading import Event
from typing import Iterable, Protocol

from .runtime import TargetGroup, TargetStore

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def emit(self, batch: list[TargetGroup]) -> None:
        ...


class FileSDSink:
    """Persist published groups as a Prometheus file_sd JSON file.

    The file is rewritten only when the merged view changes, and always via
    a temp file in the same directory plus ``os.replace`` so Prometheus never
    reads a partial file.
    """

    def __init__(self, path: str, store: TargetStore | None = None) -> None:
        self.path = os.path.abspath(path)
        self.store = store if store is not None else TargetStore()
        self.writes = 0

    def emit(self, batch: list[TargetGroup]) -> None:
        changed = self.store.apply(batch)
        if changed or self.writes == 0:
            self.write()

    def write(self) -> None:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        payload = json.dumps(self.store.file_sd(), indent=4)
        fd, tmp = tempfile.mkstemp(prefix="sd-adapter", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        self.writes += 1
        logger.debug("Wrote %d target groups to %s", self.store.count(), self.path)


def pump(stream: queue.Queue[list[TargetGroup]], sinks: Iterable[Sink], stop: Event, poll_s: float = 0.5) -> None:
    """Hand every batch from ``stream`` to each sink until ``stop`` is set."""
    sinks = list(sinks)
    while not stop.is_set():
        try:
            batch = stream.get(timeout=poll_s)
        except queue.Empty:
            continue
        for sink in sinks:
            try:
                sink.emit(batch)
            except Exception as e:
                logger.error("Sink %s failed: %s: %s", type(sink).__name__, type(e).__name__, e)
