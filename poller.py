"""
StatusPoller: periodic order-status checks on a single worker thread.

- One check immediately on start, then one every `interval` seconds.
- Ticks run on the same thread, so a check never overlaps the previous one.
- on_status returning True stops the poller (order reached a locked status).
- The first failed check is logged, reported through on_error and stops the poller; there is no retry.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class StatusPoller:

    def __init__(
        self,
        fetch: Callable[[], Any],
        on_status: Callable[[Any], bool],
        interval: float = 10.0,
        on_error: Optional[Callable[[Exception], None]] = None,
        name: str = "StatusPoller",
    ) -> None:
        """Create the poller without starting its thread."""
        self.fetch = fetch
        self.on_status = on_status
        self.interval = interval
        self._on_error = on_error
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self.ticks = 0

    def start(self) -> None:
        self._thread.start()

    def stop(self, join: bool = False, timeout: Optional[float] = None) -> None:
        """Request the loop to end. Safe to call from a callback running on the poller thread."""
        self._stop_event.set()
        if join and self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _tick(self) -> bool:
        self.ticks += 1
        try:
            payload = self.fetch()
        except Exception as e:
            logger.warning(f"{self._thread.name}: status check failed, polling stopped - {e}")
            if self._on_error is not None:
                self._on_error(e)
            return True
        return bool(self.on_status(payload))

    def _run(self) -> None:
        while not self._stop_event.is_set():
            if self._tick():
                self._stop_event.set()
                break
            if self._stop_event.wait(self.interval):
                break
