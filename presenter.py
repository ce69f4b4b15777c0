"""Result view model: copy-to-clipboard with a transient "copied" flag."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from interfaces import ClipboardService
from models import CopyResult, ImagePayload, RecognitionResult

COPIED_RESET_S = 2.0

TimerFactory = Callable[[float, Callable[[], None]], Any]
CopiedCallback = Callable[[bool], None]


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class ResultPresenter:
    def __init__(
        self,
        result: RecognitionResult,
        payload: ImagePayload,
        on_reset: Callable[[], Any],
        clipboard: ClipboardService,
        copied_reset_s: float = COPIED_RESET_S,
        timer_factory: TimerFactory = _daemon_timer,
        on_copied_change: Optional[CopiedCallback] = None,
    ) -> None:
        self._result = result
        self._payload = payload
        self._on_reset = on_reset
        self._clipboard = clipboard
        self._copied_reset_s = copied_reset_s
        self._timer_factory = timer_factory
        self._on_copied_change = on_copied_change

        self._lock = threading.Lock()
        self._copied = False
        self._timer: Any = None

    @property
    def text(self) -> str:
        return self._result.text

    @property
    def payload(self) -> ImagePayload:
        return self._payload

    @property
    def copied(self) -> bool:
        return self._copied

    def copy(self) -> CopyResult:
        result = self._clipboard.copy_text(self._result.text)
        if not result.success:
            return result
        with self._lock:
            self._cancel_timer()
            self._timer = self._timer_factory(self._copied_reset_s, self._clear_copied)
            self._timer.start()
        self._set_copied(True)
        return result

    def reset(self) -> None:
        with self._lock:
            self._cancel_timer()
        self._set_copied(False)
        self._on_reset()

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()

    def _clear_copied(self) -> None:
        with self._lock:
            self._timer = None
        self._set_copied(False)

    def _set_copied(self, value: bool) -> None:
        if self._copied == value:
            return
        self._copied = value
        if self._on_copied_change:
            self._on_copied_change(value)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
