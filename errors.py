"""Shared error codes, user-facing messages and typed failures."""

from __future__ import annotations

CAMERA_UNAVAILABLE = "CAMERA_UNAVAILABLE"
RECOGNITION_UNAVAILABLE = "RECOGNITION_UNAVAILABLE"
IMAGE_UNREADABLE = "IMAGE_UNREADABLE"
CLIPBOARD_UNAVAILABLE = "CLIPBOARD_UNAVAILABLE"

ERROR_MESSAGES = {
    CAMERA_UNAVAILABLE: "Unable to access camera. Please ensure permissions are granted.",
    RECOGNITION_UNAVAILABLE: "Failed to extract text. Please try again.",
    IMAGE_UNREADABLE: "Could not read the selected image.",
    CLIPBOARD_UNAVAILABLE: "Failed to copy text.",
}

RECOGNITION_FAILED_MESSAGE = (
    "Failed to process image. Please check your internet connection and API Key."
)


class LensTextError(Exception):
    code = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(self.code, self.code))
        self.message = str(self)


class CameraUnavailable(LensTextError):
    code = CAMERA_UNAVAILABLE


class RecognitionUnavailable(LensTextError):
    """Network, auth, quota and malformed-response failures, indistinguishably."""

    code = RECOGNITION_UNAVAILABLE

    def __init__(self, message: str = RECOGNITION_FAILED_MESSAGE) -> None:
        super().__init__(message)


class ImageLoadError(LensTextError):
    code = IMAGE_UNREADABLE
