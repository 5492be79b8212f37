from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


def _start_daemon_thread(target: Callable[[], None]) -> Any:
    th = threading.Thread(target=target, daemon=True)
    th.start()
    return th


class RoundTimer:
    """Recurring countdown callback with a one-shot cancel.

    ``on_tick`` runs every ``interval`` seconds until it returns False or the
    timer is cancelled. ``start_task`` and ``sleep`` let the caller plug in the
    Socket.IO background task helpers so the loop cooperates with the server's
    async mode.
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        interval: float = 1.0,
        start_task: Callable[[Callable[[], None]], Any] | None = None,
        sleep: Callable[[float], Any] | None = None,
        name: str = "",
    ) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._start_task = start_task or _start_daemon_thread
        self._sleep = sleep or time.sleep
        self._cancelled = threading.Event()
        self._cancel_lock = threading.Lock()
        self._started = False
        self.name = name

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        logger.debug("[timer-start] %s interval=%ss", self.name, self._interval)
        self._start_task(self._run)

    def cancel(self) -> bool:
        """Stop the timer. Only the first call returns True."""
        with self._cancel_lock:
            if self._cancelled.is_set():
                return False
            self._cancelled.set()
        logger.debug("[timer-cancel] %s", self.name)
        return True

    def _run(self) -> None:
        while not self._cancelled.is_set():
            self._sleep(self._interval)
            if self._cancelled.is_set():
                break
            try:
                keep_going = self._on_tick()
            except Exception:
                logger.exception("[timer-error] %s", self.name)
                keep_going = False
            if not keep_going:
                break
        self.cancel()
