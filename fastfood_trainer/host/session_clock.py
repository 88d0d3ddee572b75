"""Qt-driven 1 Hz scheduler that feeds ticks to the trainer."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from fastfood_trainer.constants.timer_constants import TICK_INTERVAL_MS


class QtSessionClock(QObject):
    """Owns the QTimer and calls ``on_tick`` once per interval."""

    def __init__(
        self,
        on_tick: Callable[[], object],
        interval_ms: int = TICK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_tick = on_tick
        self.tick_count: int = 0
        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(interval_ms)
        self.tick_timer.timeout.connect(self._handle_timeout)

    def start(self) -> None:
        if not self.tick_timer.isActive():
            self.tick_timer.start()

    def stop(self) -> None:
        self.tick_timer.stop()

    def is_running(self) -> bool:
        return self.tick_timer.isActive()

    def _handle_timeout(self) -> None:
        self.tick_count += 1
        self._on_tick()
