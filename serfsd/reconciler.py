from __future__ import annotations

import logging
import queue
import time
from threading import Event, Thread
from typing import Callable

from .config import SDConfig
from .db import EventJournal
from .membership import Connector, MembershipConnectionError, MembershipQueryError, connect_serf
from .runtime import Member, TargetGroup
from .targets import build_target_group, tombstone

logger = logging.getLogger(__name__)

Batch = list[TargetGroup]


class Discovery:
    """Polls the Serf cluster and publishes its members as target groups.

    One daemon thread per instance. Each cycle reconnects, lists members,
    diffs the sources against the previous successful poll and puts the full
    batch (live groups plus tombstones) on ``stream``. A failed cycle emits
    nothing and leaves the remembered sources alone.
    """

    def __init__(
        self,
        connect: Connector,
        config: SDConfig,
        journal: EventJournal | None = None,
        stream: queue.Queue[Batch] | None = None,
        interval_s: float | None = None,
    ) -> None:
        self.connect = connect
        self.config = config
        self.journal = journal
        self.stream: queue.Queue[Batch] = stream if stream is not None else queue.Queue(maxsize=1)
        self.interval_s = float(interval_s if interval_s is not None else config.refresh_interval)
        self.sources: set[str] = set()
        self._cancel = Event()
        self._thr: Thread | None = None

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            return
        self._thr = Thread(target=self._loop, name="serfsd-discovery", daemon=True)
        self._thr.start()

    def cancel(self) -> None:
        self._cancel.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop thread; returns True once it has exited."""
        if self._thr is None:
            return True
        self._thr.join(timeout)
        return not self._thr.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    # -- loop --------------------------------------------------------------

    def _loop(self) -> None:
        self._log("INFO", f"Discovery started for {self.config.address} every {self.interval_s:g}s")
        next_tick = time.monotonic() + self.interval_s
        while True:
            try:
                batch = self.run_cycle()
            except Exception as e:
                self._log("ERROR", f"Discovery cycle failed: {type(e).__name__}: {e}")
                batch = None

            if batch is None:
                # Same cadence after a failure: one full interval, then reconnect.
                if self._cancel.wait(self.interval_s):
                    break
                continue

            next_tick = self._skip_missed_ticks(next_tick)
            # Event.wait reports the flag at wake-up, so cancel wins over a tick.
            if self._cancel.wait(max(0.0, next_tick - time.monotonic())):
                break
            next_tick += self.interval_s
        self._log("INFO", "Discovery stopped")

    def _skip_missed_ticks(self, next_tick: float) -> float:
        now = time.monotonic()
        while next_tick < now:
            next_tick += self.interval_s
        return next_tick

    def run_cycle(self) -> Batch | None:
        """Connect, poll, diff and emit once.

        Returns the emitted batch, or None when the cycle failed.
        """
        try:
            client = self.connect(self.config.address)
        except MembershipConnectionError as e:
            self._log("ERROR", f"Error initializing serf client: {e}")
            return None

        try:
            members = client.members()
        except MembershipQueryError as e:
            self._log("ERROR", f"Error getting members list: {e}")
            return None
        finally:
            client.close()

        batch, new_sources = self.diff(members)
        self.stream.put(batch)
        self._report_changes(new_sources)
        self.sources = new_sources
        return batch

    def diff(self, members: list[Member]) -> tuple[Batch, set[str]]:
        """Build live groups for ``members`` and tombstones for vanished sources."""
        batch: Batch = []
        new_sources: set[str] = set()
        for member in members:
            tg = build_target_group(member)
            batch.append(tg)
            new_sources.add(tg.source)
        for source in sorted(self.sources - new_sources):
            batch.append(tombstone(source))
        return batch, new_sources

    def _report_changes(self, new_sources: set[str]) -> None:
        for source in sorted(new_sources - self.sources):
            self._log("INFO", "Target group added", source=source)
        for source in sorted(self.sources - new_sources):
            self._log("INFO", "Target group removed", source=source)

    def _log(self, level: str, message: str, source: str | None = None) -> None:
        if self.journal is not None:
            self.journal.log_event(level, f"{message}: {source}" if source else message, source=source)
            return
        logger.log(logging.ERROR if level == "ERROR" else logging.INFO, "%s%s", message, f": {source}" if source else "")


def start(
    config: SDConfig,
    connect: Connector = connect_serf,
    journal: EventJournal | None = None,
) -> tuple[queue.Queue[Batch], Callable[[], None]]:
    """Run discovery in the background; returns (batch stream, cancel)."""
    disc = Discovery(connect, config, journal=journal)
    disc.start()
    return disc.stream, disc.cancel
