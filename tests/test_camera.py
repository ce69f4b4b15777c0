"""Tests for CV2Camera and CV2CameraSession."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock, patch

import pytest

from camera import CV2Camera, CV2CameraSession
from errors import CameraUnavailable


def _capture(opened: bool = True, frame: object = "frame") -> MagicMock:
    cap = MagicMock()
    cap.isOpened.return_value = opened
    cap.read.return_value = (frame is not None, frame)
    return cap


# ---------------------------------------------------------------
# Opening
# ---------------------------------------------------------------

@patch("camera.cv2")
def test_open_uses_configured_device(mock_cv2: MagicMock) -> None:
    cap = _capture()
    mock_cv2.VideoCapture.return_value = cap

    session = CV2Camera(index=2).open()

    mock_cv2.VideoCapture.assert_called_once_with(2)
    assert session.index == 2
    assert session.active is True


@patch("camera.cv2")
def test_open_falls_back_to_default_device(mock_cv2: MagicMock) -> None:
    missing = _capture(opened=False)
    fallback = _capture()
    mock_cv2.VideoCapture.side_effect = [missing, fallback]

    session = CV2Camera(index=1).open()

    assert session.index == 0
    missing.release.assert_called_once()


@patch("camera.cv2")
def test_open_raises_when_no_device(mock_cv2: MagicMock) -> None:
    mock_cv2.VideoCapture.return_value = _capture(opened=False)

    with pytest.raises(CameraUnavailable):
        CV2Camera().open()


@patch("camera.cv2", None)
def test_open_raises_when_opencv_missing() -> None:
    with pytest.raises(CameraUnavailable):
        CV2Camera().open()


# ---------------------------------------------------------------
# Capture / release
# ---------------------------------------------------------------

@patch("camera.cv2")
def test_capture_encodes_jpeg_at_quality_85(mock_cv2: MagicMock) -> None:
    mock_cv2.imencode.return_value = (True, b"\xff\xd8jpeg")
    session = CV2CameraSession(_capture(), index=0)

    payload = session.capture_payload()

    args = mock_cv2.imencode.call_args.args
    assert args[0] == ".jpg"
    assert args[2] == [mock_cv2.IMWRITE_JPEG_QUALITY, 85]
    assert payload.mime_type == "image/jpeg"
    assert base64.b64decode(payload.data) == b"\xff\xd8jpeg"


@patch("camera.cv2")
def test_capture_raises_when_frame_missing(mock_cv2: MagicMock) -> None:
    session = CV2CameraSession(_capture(frame=None), index=0)

    with pytest.raises(CameraUnavailable):
        session.capture_payload()
    mock_cv2.imencode.assert_not_called()


@patch("camera.cv2")
def test_capture_raises_when_encoding_fails(mock_cv2: MagicMock) -> None:
    mock_cv2.imencode.return_value = (False, None)
    session = CV2CameraSession(_capture(), index=0)

    with pytest.raises(CameraUnavailable):
        session.capture_payload()


def test_release_is_idempotent_and_stops_reads() -> None:
    cap = _capture()
    session = CV2CameraSession(cap, index=0)

    session.release()
    session.release()

    cap.release.assert_called_once()
    assert session.active is False
    assert session.read_frame() is None


def test_context_manager_releases_device() -> None:
    cap = _capture()

    with CV2CameraSession(cap, index=0) as session:
        assert session.read_frame() == "frame"

    cap.release.assert_called_once()
