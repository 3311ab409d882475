from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from loguru import logger

__all__ = ["BackgroundWorker", "CallAfter"]

CallAfter = Callable[..., None]


def _call_directly(callback: Callable[..., Any], *args: Any) -> None:
    callback(*args)


class BackgroundWorker:
    """Runs blocking API calls in threads and hands results back through ``call_after``.

    ``call_after`` is the shell's way of scheduling a callback on its own
    thread (for example ``wx.CallAfter``); without one, callbacks run on the
    worker thread as soon as the task finishes.
    """

    def __init__(self, call_after: CallAfter | None = None) -> None:
        self._call_after = call_after or _call_directly
        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()

    def submit(
        self,
        func: Callable[..., Any],
        *args: Any,
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        **kwargs: Any,
    ) -> None:
        """Submit a task to run in a background thread.

        Args:
            func: The function to execute
            *args: Positional arguments for func
            on_success: Optional callback for successful completion (marshaled via call_after)
            on_error: Optional callback for errors (marshaled via call_after)
            **kwargs: Keyword arguments for func
        """
        if self.is_stopped():
            logger.warning(f"Worker stopped; dropping task {func.__name__}")
            return

        def wrapper():
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.exception(f"Background task failed: {exc}")
                if on_error:
                    self._call_after(on_error, exc)
                return

            if on_success:
                self._call_after(on_success, result)

        thread = threading.Thread(target=wrapper, name=f"worker-{func.__name__}", daemon=True)
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()
        logger.debug(f"Started background thread: {func.__name__}")

    def wait(self, timeout: float | None = None) -> None:
        """Block until every submitted task has finished."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout=timeout)

    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def shutdown(self, timeout: float = 10.0) -> None:
        """Signal all threads to stop and wait for them to finish."""
        logger.info("Shutting down background worker...")
        self._stop_event.set()

        with self._lock:
            threads = list(self._threads)

        for thread in threads:
            if thread.is_alive():
                logger.debug(f"Waiting for thread {thread.name} to finish...")
                thread.join(timeout=timeout)
                if thread.is_alive():
                    logger.warning(f"Thread {thread.name} did not finish within {timeout}s")

        logger.info("Background worker shutdown complete")

    def __enter__(self) -> BackgroundWorker:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
