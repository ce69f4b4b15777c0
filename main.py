"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Optional

from camera import CV2Camera
from clipboard import PyperclipClipboard
from config import JsonConfigStore
from interfaces import ConfigStore
from logging_setup import setup_logging
from models import ResultState, WorkflowState
from presenter import ResultPresenter
from recognizer import DashscopeRecognitionClient
from window import MainWindow
from workflow_controller import WorkflowController

try:
    from PySide6.QtCore import QObject, QTimer, Signal
    from PySide6.QtGui import QAction
    from PySide6.QtWidgets import QApplication, QFileDialog, QInputDialog, QMessageBox
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)

PREVIEW_INTERVAL_MS = 33
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.gif *.bmp *.tif *.tiff)"


class UIBridge(QObject):
    state_signal = Signal(str, str)  # from_state, to_state
    error_signal = Signal(str, str)  # code, message
    copied_signal = Signal(bool)


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.config_store: ConfigStore = JsonConfigStore()
        self.clipboard = PyperclipClipboard()
        self.window = MainWindow()
        self.presenter: Optional[ResultPresenter] = None

        self.ui = UIBridge()
        self.ui.state_signal.connect(self._on_state_change_ui)
        self.ui.error_signal.connect(self._on_error_ui)
        self.ui.copied_signal.connect(self.window.set_copied)

        self.controller = WorkflowController(
            camera=CV2Camera(index=self.config_store.get_camera_index()),
            recognizer=DashscopeRecognitionClient(self.config_store.load_recognizer_config()),
            on_state_change=self._on_state_change,
            on_error=self._on_error,
        )

        self.preview_timer = QTimer()
        self.preview_timer.setInterval(PREVIEW_INTERVAL_MS)
        self.preview_timer.timeout.connect(self._refresh_preview)

        self._connect_buttons()
        self._setup_menu()
        self.window.show_idle()
        self.window.show()

    def _connect_buttons(self) -> None:
        self.window.camera_button.clicked.connect(self._start_capture)
        self.window.upload_button.clicked.connect(self._select_file)
        self.window.cancel_button.clicked.connect(self.controller.cancel_capture)
        self.window.capture_button.clicked.connect(self._capture_frame)
        self.window.copy_button.clicked.connect(self._copy_text)
        self.window.reset_button.clicked.connect(self._reset)

    def _setup_menu(self) -> None:
        menu = self.window.menuBar().addMenu("Settings")

        api_action = QAction("Set API Key", menu)
        api_action.triggered.connect(self._set_api_key)
        menu.addAction(api_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(self.window, "API Key", "DashScope API Key")
        if not ok:
            return
        self.config_store.set_api_key(value)
        # Hot-swap recognizer with new key
        self.controller.replace_recognizer(
            DashscopeRecognitionClient(self.config_store.load_recognizer_config())
        )
        QMessageBox.information(self.window, "Saved", "API Key saved and applied.")

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _start_capture(self) -> None:
        # Opening the device may block; keep the UI thread free.
        threading.Thread(target=self.controller.start_capture, daemon=True).start()

    def _capture_frame(self) -> None:
        if self.controller.capture_frame():
            self._recognize_in_background()

    def _select_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self.window, "Upload Image", "", IMAGE_FILTER)
        if not path:
            return
        if self.controller.select_file(path):
            self._recognize_in_background()

    def _recognize_in_background(self) -> None:
        threading.Thread(target=self.controller.recognize, daemon=True).start()

    def _copy_text(self) -> None:
        if self.presenter is None:
            return
        result = self.presenter.copy()
        if not result.success:
            logger.warning("copy failed: %s", result.reason)

    def _reset(self) -> None:
        if self.presenter is not None:
            self.presenter.reset()
        else:
            self.controller.reset()

    # ------------------------------------------------------------------
    # Callbacks (called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: WorkflowState, to_state: WorkflowState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_error(self, code: str, message: str) -> None:
        self.ui.error_signal.emit(code, message)

    def _on_copied_change(self, copied: bool) -> None:
        self.ui.copied_signal.emit(copied)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        if from_state == WorkflowState.CAPTURING.value:
            self.preview_timer.stop()
        if from_state == WorkflowState.RESULT.value and self.presenter is not None:
            self.presenter.close()
            self.presenter = None

        snapshot = self.controller.snapshot
        if to_state == WorkflowState.IDLE.value:
            self.window.show_idle(self.controller.error_message)
        elif to_state == WorkflowState.CAPTURING.value:
            camera_error = self.controller.error_message
            self.window.show_capturing(camera_error)
            if camera_error is None:
                self.preview_timer.start()
        elif to_state == WorkflowState.PROCESSING.value and self.controller.payload is not None:
            self.window.show_processing(self.controller.payload)
        elif to_state == WorkflowState.RESULT.value and isinstance(snapshot, ResultState):
            self.presenter = ResultPresenter(
                result=snapshot.result,
                payload=snapshot.payload,
                on_reset=self.controller.reset,
                clipboard=self.clipboard,
                on_copied_change=self._on_copied_change,
            )
            self.window.show_result(snapshot.result.text, snapshot.payload)

    def _on_error_ui(self, code: str, message: str) -> None:
        logger.info("%s: %s", code, message)
        if self.controller.state == WorkflowState.CAPTURING:
            self.preview_timer.stop()
            self.window.show_capturing(message)
        elif self.controller.state == WorkflowState.IDLE:
            self.window.show_idle(message)

    def _refresh_preview(self) -> None:
        frame = self.controller.read_preview_frame()
        if frame is not None:
            self.window.set_preview_frame(frame)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.app.aboutToQuit.connect(self.controller.shutdown)
        return self.app.exec()

    def quit(self) -> None:
        self.preview_timer.stop()
        self.controller.shutdown()
        self.app.quit()


def main() -> int:
    setup_logging()
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
