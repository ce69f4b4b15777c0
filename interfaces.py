"""Protocol interfaces used by WorkflowController, ResultPresenter and App."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from config import RecognizerConfig
from models import CopyResult, ImagePayload, RecognitionResult


class CameraSession(Protocol):
    @property
    def active(self) -> bool: ...

    def read_frame(self) -> Optional[Any]: ...

    def capture_payload(self) -> ImagePayload: ...

    def release(self) -> None: ...


class CameraSource(Protocol):
    def open(self) -> CameraSession: ...


class RecognitionClient(Protocol):
    def recognize_text(self, payload: ImagePayload) -> RecognitionResult: ...


class ClipboardService(Protocol):
    def copy_text(self, text: str) -> CopyResult: ...


@runtime_checkable
class ConfigStore(Protocol):
    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_model(self) -> str: ...

    def get_camera_index(self) -> Optional[int]: ...

    def load_recognizer_config(self) -> RecognizerConfig: ...
