"""Latest-snapshot ownership and the fixed-interval polling loop."""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from dustwatch.common.constants import POLL_INTERVAL_SECONDS
from dustwatch.common.ids import generate_cycle_id
from dustwatch.common.logging import log_event
from dustwatch.common.models import CycleResult, Snapshot
from dustwatch.common.time_utils import utc_timestamp_iso

PUBLISH_ERROR_CODE = "PUBLISH_ERROR"


class SnapshotStore:
    """Holds the most recent cycle result.

    Snapshots are swapped in whole under a lock. A snapshot whose sequence is
    not newer than the one already applied is dropped, so a slow cycle that
    finishes after a later one never overwrites fresher data.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest: Snapshot | None = None

    def next_sequence(self) -> int:
        with self._lock:
            return next(self._counter)

    def latest(self) -> Snapshot | None:
        with self._lock:
            return self._latest

    def publish(self, snapshot: Snapshot) -> bool:
        with self._lock:
            if self._latest is not None and snapshot.sequence <= self._latest.sequence:
                return False
            self._latest = snapshot
            return True


CycleRunner = Callable[[str], CycleResult]


class Poller:
    def __init__(
        self,
        run_cycle: CycleRunner,
        store: SnapshotStore | None = None,
        *,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        max_cycles: int | None = None,
        on_publish: Callable[[Snapshot], None] | None = None,
        logger: logging.Logger | None = None,
        max_in_flight: int = 2,
    ) -> None:
        self.run_cycle = run_cycle
        self.store = store or SnapshotStore()
        self.interval_seconds = interval_seconds
        self.max_cycles = max_cycles
        self.on_publish = on_publish
        self.logger = logger
        self.max_in_flight = max_in_flight
        self._stop = threading.Event()
        self._publish_lock = threading.Lock()
        self.publish_failures = 0

    def stop(self) -> None:
        self._stop.set()

    def _log(self, message: str, **fields) -> None:
        if self.logger is not None:
            log_event(self.logger, message, stage="poll", **fields)

    def run_once(self) -> Snapshot | None:
        """Run a single cycle and publish it; returns the snapshot if it was applied."""
        sequence = self.store.next_sequence()
        cycle_id = generate_cycle_id(sequence)
        try:
            result = self.run_cycle(cycle_id)
        except Exception as exc:
            self._log(
                f"cycle failed: {exc!r}",
                cycle_id=cycle_id,
                event="CYCLE_FAIL",
                status="error",
                error_code=getattr(exc, "error_code", "UNEXPECTED_ERROR"),
            )
            return None

        snapshot = Snapshot(
            sequence=sequence,
            cycle_id=cycle_id,
            updated_at=utc_timestamp_iso(),
            result=result,
        )
        # Publishing and its side effects happen in sequence order.
        with self._publish_lock:
            if not self.store.publish(snapshot):
                self._log("stale snapshot discarded", cycle_id=cycle_id, event="SNAPSHOT_STALE", status="skipped")
                return None

            self._log(
                "snapshot published",
                cycle_id=cycle_id,
                event="SNAPSHOT_PUBLISHED",
                status="ok",
                rows_out=len(result.locations),
            )
            if self.on_publish is not None:
                try:
                    self.on_publish(snapshot)
                except Exception as exc:
                    self.publish_failures += 1
                    self._log(
                        f"publish failed: {exc!r}",
                        cycle_id=cycle_id,
                        event="PUBLISH_FAIL",
                        status="error",
                        error_code=getattr(exc, "error_code", PUBLISH_ERROR_CODE),
                    )
        return snapshot

    def run(self) -> Snapshot | None:
        """Poll until stopped or ``max_cycles`` cycles have been started.

        The first cycle starts immediately. Later cycles start on the interval
        even if an earlier one is still running.
        """
        started = 0
        with ThreadPoolExecutor(max_workers=self.max_in_flight, thread_name_prefix="dustwatch-cycle") as executor:
            while not self._stop.is_set():
                executor.submit(self.run_once)
                started += 1
                if self.max_cycles is not None and started >= self.max_cycles:
                    break
                if self._stop.wait(self.interval_seconds):
                    break
        return self.store.latest()
