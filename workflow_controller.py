"""State-machine based orchestration of one recognition cycle."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from errors import (
    CAMERA_UNAVAILABLE,
    ERROR_MESSAGES,
    IMAGE_UNREADABLE,
    RECOGNITION_UNAVAILABLE,
    CameraUnavailable,
    ImageLoadError,
)
from file_loader import load_from_file
from interfaces import CameraSession, CameraSource, RecognitionClient
from models import (
    CapturingState,
    IdleState,
    ImagePayload,
    ProcessingState,
    RecognitionResult,
    ResultState,
    WorkflowSnapshot,
    WorkflowState,
)

logger = logging.getLogger(__name__)

StateCallback = Callable[[WorkflowState, WorkflowState], None]
ErrorCallback = Callable[[str, str], None]
FileLoader = Callable[[Path], ImagePayload]


class WorkflowController:
    def __init__(
        self,
        camera: CameraSource,
        recognizer: RecognitionClient,
        load_file: FileLoader = load_from_file,
        on_state_change: Optional[StateCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._camera = camera
        self._recognizer = recognizer
        self._load_file = load_file
        self._on_state_change = on_state_change
        self._on_error = on_error

        self._lock = threading.RLock()
        self._snapshot: WorkflowSnapshot = IdleState()
        self._camera_session: Optional[CameraSession] = None
        self._cycle_id = 0
        self._in_flight = False

    @property
    def state(self) -> WorkflowState:
        return self._snapshot.kind

    @property
    def snapshot(self) -> WorkflowSnapshot:
        return self._snapshot

    @property
    def error_message(self) -> Optional[str]:
        snap = self._snapshot
        if isinstance(snap, IdleState):
            return snap.error_message
        if isinstance(snap, CapturingState):
            return snap.camera_error
        return None

    @property
    def payload(self) -> Optional[ImagePayload]:
        snap = self._snapshot
        if isinstance(snap, (ProcessingState, ResultState)):
            return snap.payload
        return None

    @property
    def result(self) -> Optional[RecognitionResult]:
        snap = self._snapshot
        return snap.result if isinstance(snap, ResultState) else None

    @property
    def camera_active(self) -> bool:
        session = self._camera_session
        return session is not None and session.active

    def replace_recognizer(self, recognizer: RecognitionClient) -> None:
        with self._lock:
            self._recognizer = recognizer

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def start_capture(self) -> bool:
        with self._lock:
            if self.state != WorkflowState.IDLE:
                return False
            self._cycle_id += 1
            cycle = self._cycle_id
            self._transition(CapturingState())

        # Opening a device can take a while; cancel stays responsive meanwhile.
        try:
            session = self._camera.open()
        except CameraUnavailable as exc:
            logger.warning("camera unavailable: %s", exc)
            with self._lock:
                if self._cycle_id == cycle and self.state == WorkflowState.CAPTURING:
                    self._transition(CapturingState(camera_error=exc.message))
                    self._emit_error(CAMERA_UNAVAILABLE, exc.message)
            return True

        with self._lock:
            if self._cycle_id != cycle or self.state != WorkflowState.CAPTURING:
                session.release()
                return True
            self._camera_session = session
        return True

    def cancel_capture(self) -> bool:
        with self._lock:
            if self.state != WorkflowState.CAPTURING:
                return False
            self._cycle_id += 1
            self._release_camera()
            self._transition(IdleState())
            return True

    def read_preview_frame(self) -> Optional[Any]:
        session = self._camera_session
        if session is None:
            return None
        return session.read_frame()

    def capture_frame(self) -> bool:
        with self._lock:
            session = self._camera_session
            if self.state != WorkflowState.CAPTURING or session is None:
                return False
            try:
                payload = session.capture_payload()
            except CameraUnavailable as exc:
                logger.warning("frame capture failed: %s", exc)
                self._release_camera()
                self._transition(CapturingState(camera_error=exc.message))
                self._emit_error(CAMERA_UNAVAILABLE, exc.message)
                return False
            self._release_camera()
            self._transition(ProcessingState(payload=payload))
            return True

    def select_file(self, path: str | Path) -> bool:
        if self.state != WorkflowState.IDLE:
            return False
        try:
            payload = self._load_file(Path(path))
        except ImageLoadError as exc:
            with self._lock:
                if self.state == WorkflowState.IDLE:
                    self._transition(IdleState(error_message=exc.message))
                    self._emit_error(IMAGE_UNREADABLE, exc.message)
            return False
        return self.submit_payload(payload)

    def submit_payload(self, payload: ImagePayload) -> bool:
        """Enter Processing with ``payload``; raises TypeError for a non-payload."""
        with self._lock:
            if self.state != WorkflowState.IDLE:
                return False
            processing = ProcessingState(payload=payload)
            self._cycle_id += 1
            self._transition(processing)
            return True

    # ------------------------------------------------------------------
    # Recognition
    # ------------------------------------------------------------------

    def recognize(self) -> Optional[RecognitionResult]:
        """Run the one recognition call for the pending payload."""
        with self._lock:
            snap = self._snapshot
            if not isinstance(snap, ProcessingState) or self._in_flight:
                return None
            self._in_flight = True
            cycle = self._cycle_id
            recognizer = self._recognizer

        try:
            result = recognizer.recognize_text(snap.payload)
            if not isinstance(result, RecognitionResult):
                raise TypeError(f"recognizer returned {type(result).__name__}")
        except Exception as exc:
            logger.exception("recognition failed: %s", exc)
            with self._lock:
                self._in_flight = False
                if self._cycle_id == cycle and self.state == WorkflowState.PROCESSING:
                    message = ERROR_MESSAGES[RECOGNITION_UNAVAILABLE]
                    self._transition(IdleState(error_message=message))
                    self._emit_error(RECOGNITION_UNAVAILABLE, message)
            return None

        with self._lock:
            self._in_flight = False
            if self._cycle_id != cycle or self.state != WorkflowState.PROCESSING:
                return None
            self._transition(ResultState(payload=snap.payload, result=result))
        return result

    # ------------------------------------------------------------------
    # Reset / teardown
    # ------------------------------------------------------------------

    def reset(self) -> bool:
        with self._lock:
            if self.state not in (WorkflowState.RESULT, WorkflowState.IDLE):
                return False
            self._transition(IdleState())
            return True

    def shutdown(self) -> None:
        with self._lock:
            if self.state == WorkflowState.CAPTURING:
                self._cycle_id += 1
                self._transition(IdleState())
            self._release_camera()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _release_camera(self) -> None:
        session, self._camera_session = self._camera_session, None
        if session is None:
            return
        try:
            session.release()
        except Exception:  # pragma: no cover - defensive
            logger.exception("camera release failed")

    def _emit_error(self, code: str, message: str) -> None:
        if self._on_error:
            self._on_error(code, message)

    def _transition(self, snapshot: WorkflowSnapshot) -> None:
        previous = self._snapshot
        self._snapshot = snapshot
        from_state, to_state = previous.kind, snapshot.kind
        # Same-kind changes (an Idle error cleared or set) still notify.
        if previous == snapshot:
            return
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
