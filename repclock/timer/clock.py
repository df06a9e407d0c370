"""Tick sources, the 1-second clock behind every timer counter.

A tick source hands out *handles*.  Each handle is one repeating
1-second subscription; cancelling it stops the callback synchronously.

QtTickSource      Production source.  One QTimer per handle.
ManualTickSource  Deterministic source for tests and scripted sessions.
                  Nothing fires until ``advance()`` is called.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer


TICK_INTERVAL_MS = 1000


class TickSource(Protocol):
    def schedule(self, callback: Callable[[], None]) -> object:
        """Start a repeating 1-second callback and return its handle."""

    def cancel(self, handle: object) -> None:
        """Stop *handle*.  It must never fire again."""


# ── Qt ────────────────────────────────────────────────────────────────────


class QtTickSource:
    """Backs each subscription with its own ``QTimer``."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent
        self._timers: set[QTimer] = set()

    def schedule(self, callback: Callable[[], None]) -> QTimer:
        qt_timer = QTimer(self._parent)
        qt_timer.setInterval(TICK_INTERVAL_MS)
        qt_timer.timeout.connect(callback)
        qt_timer.start()
        self._timers.add(qt_timer)
        return qt_timer

    def cancel(self, handle: QTimer) -> None:
        if handle not in self._timers:
            return
        self._timers.discard(handle)
        handle.stop()
        handle.timeout.disconnect()
        handle.deleteLater()

    @property
    def live_count(self) -> int:
        return len(self._timers)


# ── manual ────────────────────────────────────────────────────────────────


class _ManualHandle:
    __slots__ = ("callback", "live", "seq")

    def __init__(self, callback: Callable[[], None], seq: int) -> None:
        self.callback = callback
        self.live = True
        self.seq = seq

    def __repr__(self) -> str:
        state = "live" if self.live else "cancelled"
        return f"<ManualHandle #{self.seq} {state}>"


class ManualTickSource:
    """Clock that only moves when told to.

    Within one ``advance`` step every handle that was live when the step
    began fires once, in subscription order.  A handle cancelled part way
    through the step is skipped; a handle scheduled during the step first
    fires on the following step.
    """

    def __init__(self) -> None:
        self._handles: list[_ManualHandle] = []
        self._seq = 0
        self.ticks_elapsed = 0

    def schedule(self, callback: Callable[[], None]) -> _ManualHandle:
        self._seq += 1
        handle = _ManualHandle(callback, self._seq)
        self._handles.append(handle)
        return handle

    def cancel(self, handle: _ManualHandle) -> None:
        handle.live = False
        if handle in self._handles:
            self._handles.remove(handle)

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            self.ticks_elapsed += 1
            for handle in list(self._handles):
                if handle.live:
                    handle.callback()

    @property
    def live_count(self) -> int:
        return len(self._handles)
