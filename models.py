"""Core data models for the app."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

ALLOWED_MIME_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/webp")
DEFAULT_MIME_TYPE = "image/jpeg"

DATA_URL_PREFIX_RE = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,")
_DATA_URL_MIME_RE = re.compile(r"^data:([^;,]*)")


def strip_data_url_prefix(data: str) -> str:
    """Remove a ``data:image/...;base64,`` prefix if present."""
    return DATA_URL_PREFIX_RE.sub("", data, count=1)


class WorkflowState(str, Enum):
    IDLE = "IDLE"
    CAPTURING = "CAPTURING"
    PROCESSING = "PROCESSING"
    RESULT = "RESULT"


@dataclass(frozen=True)
class ImagePayload:
    """An encoded still image: base64 text plus its declared MIME type."""

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    def __post_init__(self) -> None:
        if self.mime_type not in ALLOWED_MIME_TYPES:
            raise ValueError(f"unsupported image type: {self.mime_type!r}")
        if not strip_data_url_prefix(self.data).strip() or not self.decoded():
            raise ValueError("image data is empty")

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> "ImagePayload":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_data_url(cls, text: str) -> "ImagePayload":
        """Parse ``data:<mime>;base64,<data>``; unknown MIME falls back to JPEG."""
        match = _DATA_URL_MIME_RE.match(text)
        mime_type = match.group(1) if match and match.group(1) else DEFAULT_MIME_TYPE
        return cls(data=text, mime_type=mime_type)

    @property
    def base64_data(self) -> str:
        return strip_data_url_prefix(self.data)

    def decoded(self) -> bytes:
        try:
            return base64.b64decode(self.base64_data, validate=False)
        except (binascii.Error, ValueError):
            return b""

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


@dataclass(frozen=True)
class RecognitionResult:
    text: str

    def __post_init__(self) -> None:
        if self.text is None:
            raise ValueError("recognition text must not be None")


# One variant per workflow state, each carrying only the data valid there.


@dataclass(frozen=True)
class IdleState:
    error_message: Optional[str] = None
    kind: WorkflowState = field(default=WorkflowState.IDLE, init=False)


@dataclass(frozen=True)
class CapturingState:
    camera_error: Optional[str] = None
    kind: WorkflowState = field(default=WorkflowState.CAPTURING, init=False)


@dataclass(frozen=True)
class ProcessingState:
    payload: ImagePayload
    kind: WorkflowState = field(default=WorkflowState.PROCESSING, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, ImagePayload):
            raise TypeError(f"processing requires an ImagePayload, got {type(self.payload).__name__}")


@dataclass(frozen=True)
class ResultState:
    payload: ImagePayload
    result: RecognitionResult
    kind: WorkflowState = field(default=WorkflowState.RESULT, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, ImagePayload):
            raise TypeError(f"result requires an ImagePayload, got {type(self.payload).__name__}")
        if not isinstance(self.result, RecognitionResult):
            raise TypeError(f"result requires a RecognitionResult, got {type(self.result).__name__}")


WorkflowSnapshot = Union[IdleState, CapturingState, ProcessingState, ResultState]


@dataclass
class CopyResult:
    success: bool
    reason: str
