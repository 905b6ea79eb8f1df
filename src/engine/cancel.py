"""Cooperative cancellation for engine runs."""

from __future__ import annotations

import threading


class RunCancelled(Exception):
    """Raised when the caller cancels a run between module-level work units."""


class CancellationToken:
    """A single caller-owned flag checked between module-level work units."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            msg = "Conformance run was cancelled"
            raise RunCancelled(msg)


__all__ = ["CancellationToken", "RunCancelled"]
