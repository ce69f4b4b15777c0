"""OpenCV webcam capture adapter.

A session owns the device from ``open()`` until ``release()``; the workflow
controller releases it on every exit from the capturing state.

OpenCV exposes no facing metadata, so the "environment" (rear) sensor is
whichever device index is configured (``camera_index`` or ``CAMERA_INDEX``).
If that device cannot be opened the camera falls back to device 0.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from errors import CameraUnavailable
from models import ImagePayload

try:
    import cv2
except Exception:  # pragma: no cover
    cv2 = None  # type: ignore

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 85


class CV2CameraSession:
    def __init__(self, capture: Any, index: int, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self._cap = capture
        self.index = index
        self._jpeg_quality = jpeg_quality
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._cap is not None

    def read_frame(self) -> Optional[Any]:
        """Return the latest live frame, or None if the device is gone."""
        with self._lock:
            if self._cap is None:
                return None
            ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame

    def capture_payload(self) -> ImagePayload:
        frame = self.read_frame()
        if frame is None:
            logger.warning("camera %s: frame capture failed", self.index)
            raise CameraUnavailable()
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality])
        if not ok:
            logger.warning("camera %s: JPEG encoding failed", self.index)
            raise CameraUnavailable()
        return ImagePayload.from_bytes(bytes(buf), "image/jpeg")

    def release(self) -> None:
        with self._lock:
            cap, self._cap = self._cap, None
        if cap is not None:
            cap.release()
            logger.info("camera %s: released", self.index)

    def __enter__(self) -> "CV2CameraSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class CV2Camera:
    def __init__(
        self,
        index: Optional[int] = None,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
        facing_mode: str = "environment",
    ) -> None:
        self._index = index
        self._jpeg_quality = jpeg_quality
        self.facing_mode = facing_mode

    def candidate_indices(self) -> list[int]:
        preferred = self._index if self._index is not None else 0
        return [preferred] if preferred == 0 else [preferred, 0]

    def open(self) -> CV2CameraSession:
        if cv2 is None:
            logger.error("opencv-python is not installed")
            raise CameraUnavailable()

        for index in self.candidate_indices():
            cap = cv2.VideoCapture(index)
            if cap is not None and cap.isOpened():
                logger.info("camera %s: opened (facing=%s)", index, self.facing_mode)
                return CV2CameraSession(cap, index, self._jpeg_quality)
            logger.warning("camera %s: failed to open device", index)
            if cap is not None:
                cap.release()
        raise CameraUnavailable()
