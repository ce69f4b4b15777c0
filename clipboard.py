"""Clipboard service for recognized text."""

from __future__ import annotations

import logging

from errors import CLIPBOARD_UNAVAILABLE
from models import CopyResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

logger = logging.getLogger(__name__)


class PyperclipClipboard:
    def copy_text(self, text: str) -> CopyResult:
        if pyperclip is None:
            logger.error("pyperclip is not installed")
            return CopyResult(success=False, reason=f"{CLIPBOARD_UNAVAILABLE}: dependency missing")
        try:
            pyperclip.copy(text)
        except Exception as exc:
            logger.warning("Failed to copy text: %s", exc)
            return CopyResult(success=False, reason=f"{CLIPBOARD_UNAVAILABLE}: {exc}")
        return CopyResult(success=True, reason="ok")
