"""Main window: one page per workflow state."""

from __future__ import annotations

from typing import Any, Optional

from models import ImagePayload

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import cv2
except Exception:  # pragma: no cover
    cv2 = None  # type: ignore

try:
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QImage, QPixmap
    from PySide6.QtWidgets import (
        QLabel,
        QMainWindow,
        QPlainTextEdit,
        QPushButton,
        QStackedWidget,
        QVBoxLayout,
        QHBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QImage = None  # type: ignore
    QPixmap = None  # type: ignore
    QLabel = object  # type: ignore
    QMainWindow = object  # type: ignore
    QPlainTextEdit = object  # type: ignore
    QPushButton = object  # type: ignore
    QStackedWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QHBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

ERROR_STYLE = (
    "color: #FCA5A5; padding: 8px; border: 1px solid #991B1B;"
    "background: rgba(127,29,29,80); border-radius: 8px;"
)
HINT_STYLE = "color: rgba(255,255,255,140); background: rgba(0,0,0,100); padding: 4px 12px;"


def payload_pixmap(payload: ImagePayload) -> Optional["QPixmap"]:
    pixmap = QPixmap()
    if not pixmap.loadFromData(payload.decoded()):
        return None
    return pixmap


def frame_to_qimage(frame: Any) -> Optional["QImage"]:
    """Convert a BGR OpenCV frame to a detached QImage."""
    if frame is None or cv2 is None or np is None:
        return None
    rgb = np.ascontiguousarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
    height, width, channels = rgb.shape
    image = QImage(rgb.data, width, height, channels * width, QImage.Format_RGB888)
    return image.copy()


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("LensText")
        self.resize(520, 720)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._idle_page = self._build_idle_page()
        self._camera_page = self._build_camera_page()
        self._processing_page = self._build_processing_page()
        self._result_page = self._build_result_page()
        for page in (self._idle_page, self._camera_page, self._processing_page, self._result_page):
            self._stack.addWidget(page)

    # ------------------------------------------------------------------
    # Page builders
    # ------------------------------------------------------------------

    def _build_idle_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        title = QLabel("Scan & Extract")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 26px; font-weight: bold;")
        subtitle = QLabel("Extract text from documents, signs, or screens.")
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setWordWrap(True)

        self.camera_button = QPushButton("Use Camera")
        self.upload_button = QPushButton("Upload Image")
        self._idle_error = QLabel("")
        self._idle_error.setWordWrap(True)
        self._idle_error.setAlignment(Qt.AlignCenter)
        self._idle_error.setStyleSheet(ERROR_STYLE)
        self._idle_error.hide()

        layout.addStretch(1)
        layout.addWidget(title)
        layout.addWidget(subtitle)
        layout.addSpacing(24)
        layout.addWidget(self.camera_button)
        layout.addWidget(self.upload_button)
        layout.addWidget(self._idle_error)
        layout.addStretch(1)
        return page

    def _build_camera_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        self._preview = QLabel("Starting camera...")
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setMinimumSize(320, 240)
        self._preview.setStyleSheet("background: black; color: white;")
        hint = QLabel("Align text within frame")
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet(HINT_STYLE)

        self._camera_error = QLabel("")
        self._camera_error.setWordWrap(True)
        self._camera_error.setAlignment(Qt.AlignCenter)
        self._camera_error.setStyleSheet(ERROR_STYLE)
        self._camera_error.hide()

        controls = QHBoxLayout()
        self.cancel_button = QPushButton("Cancel")
        self.capture_button = QPushButton("Capture")
        controls.addWidget(self.cancel_button)
        controls.addStretch(1)
        controls.addWidget(self.capture_button)

        layout.addWidget(self._preview, 1)
        layout.addWidget(hint)
        layout.addWidget(self._camera_error)
        layout.addLayout(controls)
        return page

    def _build_processing_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        heading = QLabel("Analyzing Image...")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet("font-size: 20px; font-weight: 600;")
        detail = QLabel("The vision model is reading text from the image.")
        detail.setAlignment(Qt.AlignCenter)
        self._processing_thumb = QLabel()
        self._processing_thumb.setAlignment(Qt.AlignCenter)
        self._processing_thumb.setEnabled(False)

        layout.addStretch(1)
        layout.addWidget(heading)
        layout.addWidget(detail)
        layout.addWidget(self._processing_thumb)
        layout.addStretch(1)
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        source_label = QLabel("SOURCE IMAGE")
        self._result_image = QLabel()
        self._result_image.setAlignment(Qt.AlignCenter)
        self._result_image.setFixedHeight(192)

        header = QHBoxLayout()
        header.addWidget(QLabel("DETECTED TEXT"))
        header.addStretch(1)
        self.copy_button = QPushButton("Copy")
        header.addWidget(self.copy_button)

        self._result_text = QPlainTextEdit()
        self._result_text.setReadOnly(True)
        self._result_text.setStyleSheet("font-family: monospace;")

        self.reset_button = QPushButton("Scan Another Image")

        layout.addWidget(source_label)
        layout.addWidget(self._result_image)
        layout.addLayout(header)
        layout.addWidget(self._result_text, 1)
        layout.addWidget(self.reset_button)
        return page

    # ------------------------------------------------------------------
    # Page switching
    # ------------------------------------------------------------------

    def show_idle(self, error_message: Optional[str] = None) -> None:
        if error_message:
            self._idle_error.setText(error_message)
            self._idle_error.show()
        else:
            self._idle_error.hide()
        self._stack.setCurrentWidget(self._idle_page)

    def show_capturing(self, camera_error: Optional[str] = None) -> None:
        if camera_error:
            self._preview.clear()
            self._preview.setText("Camera Error")
            self._camera_error.setText(camera_error)
            self._camera_error.show()
            self.capture_button.setEnabled(False)
            self.cancel_button.setText("Go Back")
        else:
            self._preview.setText("Starting camera...")
            self._camera_error.hide()
            self.capture_button.setEnabled(True)
            self.cancel_button.setText("Cancel")
        self._stack.setCurrentWidget(self._camera_page)

    def set_preview_frame(self, frame: Any) -> None:
        image = frame_to_qimage(frame)
        if image is None:
            return
        pixmap = QPixmap.fromImage(image).scaled(
            self._preview.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation
        )
        self._preview.setPixmap(pixmap)

    def show_processing(self, payload: ImagePayload) -> None:
        pixmap = payload_pixmap(payload)
        if pixmap is not None:
            self._processing_thumb.setPixmap(
                pixmap.scaled(128, 128, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
            )
        else:
            self._processing_thumb.clear()
        self._stack.setCurrentWidget(self._processing_page)

    def show_result(self, text: str, payload: ImagePayload) -> None:
        pixmap = payload_pixmap(payload)
        if pixmap is not None:
            self._result_image.setPixmap(
                pixmap.scaledToHeight(192, Qt.SmoothTransformation)
            )
        else:
            self._result_image.clear()
        self._result_text.setPlainText(text)
        self.set_copied(False)
        self._stack.setCurrentWidget(self._result_page)

    def set_copied(self, copied: bool) -> None:
        self.copy_button.setText("Copied" if copied else "Copy")
        self.copy_button.setStyleSheet("color: #4ADE80;" if copied else "")
