"""Background task that evicts expired secrets on a fixed period."""

from __future__ import annotations

import asyncio
import contextlib
import time
from typing import Optional

from whisperlink.core.logging import structured_log
from whisperlink.core.telemetry import record_sweep, span
from whisperlink.models.entities import SweepReport
from whisperlink.services.secret_store import SecretStore

DEFAULT_INTERVAL_SECONDS = 60 * 60.0


class Reaper:
    """Periodically sweeps a SecretStore.

    Runs as an asyncio task on the application's event loop. The first sweep
    happens one full interval after ``start``; ``stop`` cancels the schedule
    and waits for the task to unwind.
    """

    def __init__(self, store: SecretStore, interval_seconds: float = DEFAULT_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task[None]] = None
        self.last_report: Optional[SweepReport] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> SweepReport:
        """Sweep now and log the outcome."""
        started = time.perf_counter()
        with span("reaper.sweep"):
            report = self._store.sweep_report()
        elapsed_ms = (time.perf_counter() - started) * 1000
        record_sweep(report.removed)
        self.last_report = report
        structured_log(
            "INFO" if report.removed else "DEBUG",
            f"Removed {report.removed} expired secret(s)",
            operation="reaper.sweep",
            duration_ms=elapsed_ms,
            metadata={"removed": report.removed, "store_size": report.remaining},
        )
        return report

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.run_once()

    def start(self) -> None:
        """Schedule sweeps on the running loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="whisperlink-reaper")
        structured_log(
            "INFO",
            "Reaper started",
            operation="reaper.start",
            metadata={"interval_seconds": self._interval},
        )

    async def stop(self) -> None:
        """Cancel the schedule. An in-flight sweep completes first."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        structured_log("INFO", "Reaper stopped", operation="reaper.stop")
