import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from plateguard.core.config import settings
from plateguard.domain.exceptions import OCREngineInitError, OCRProcessError
from plateguard.domain.Models.detection_result import (
    DetectionFailure,
    DetectionResult,
    DetectionStatus,
    FailureReason,
)
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Services.plate_text_validator import PlateTextValidator, check_acceptance
from plateguard.application.camera_lifecycle_manager import CameraLifecycleManager
from plateguard.application.ocr_engine_adapter import OCREngineAdapter
from plateguard.monitoring.metrics import detections_total

logger = logging.getLogger(__name__)

DetectionOutcome = Union[DetectionResult, DetectionFailure]
StatusListener = Callable[[DetectionStatus, Optional[str]], None]


class DetectionOrchestrator:
    """
    Sequences capture -> recognize -> validate -> report and exposes the
    visible status: IDLE -> DETECTING -> (SUCCESS | ERROR) -> IDLE.

    SUCCESS and ERROR revert to IDLE on their own after a delay. The revert
    is a single cancellable timer; starting a new detection cancels it.
    A detection requested while one is in flight is dropped (BUSY), never queued.
    """

    def __init__(
        self,
        camera: CameraLifecycleManager,
        engine: OCREngineAdapter,
        validator: PlateTextValidator,
        min_confidence: Optional[float] = None,
        min_length: Optional[int] = None,
        success_revert: Optional[float] = None,
        error_revert: Optional[float] = None,
    ):
        self.camera = camera
        self.engine = engine
        self.validator = validator

        self.min_confidence = min_confidence if min_confidence is not None else settings.ocr_min_confidence
        self.min_length = min_length if min_length is not None else settings.plate_min_length
        self.success_revert = success_revert if success_revert is not None else settings.success_revert_seconds
        self.error_revert = error_revert if error_revert is not None else settings.error_revert_seconds

        self.status = DetectionStatus.IDLE
        self.message: Optional[str] = None
        self.last_result: Optional[DetectionResult] = None

        self._revert_handle: Optional[asyncio.TimerHandle] = None
        self._listeners: List[StatusListener] = []

    # ---------------------------------------------------------
    # STATUS
    # ---------------------------------------------------------
    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _set_status(self, status: DetectionStatus, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message
        for listener in list(self._listeners):
            try:
                listener(status, message)
            except Exception:
                logger.exception("Status listener failed")

    def _cancel_revert(self) -> None:
        if self._revert_handle is not None:
            self._revert_handle.cancel()
            self._revert_handle = None

    def _schedule_revert(self, delay: float) -> None:
        self._cancel_revert()
        loop = asyncio.get_running_loop()
        self._revert_handle = loop.call_later(delay, self._revert_to_idle)

    def _revert_to_idle(self) -> None:
        self._revert_handle = None
        if self.status in (DetectionStatus.SUCCESS, DetectionStatus.ERROR):
            self._set_status(DetectionStatus.IDLE)

    # ---------------------------------------------------------
    # DETECT
    # ---------------------------------------------------------
    async def detect_once(self, frame: Optional[CaptureFrame] = None) -> DetectionOutcome:
        """
        One full detection cycle. Never raises: every failure comes back as
        a DetectionFailure and leaves the status in ERROR.
        """
        if self.status is DetectionStatus.DETECTING:
            logger.debug("Detection already in progress, trigger dropped")
            detections_total.labels(outcome=FailureReason.BUSY.value).inc()
            return DetectionFailure.of(FailureReason.BUSY)

        self._cancel_revert()
        self._set_status(DetectionStatus.DETECTING)

        try:
            outcome = await self._run_cycle(frame)
        except asyncio.CancelledError:
            self._set_status(DetectionStatus.IDLE)
            raise
        except Exception:
            # _run_cycle maps known errors; anything else still ends in ERROR
            logger.exception("Unexpected error during detection")
            outcome = DetectionFailure.of(FailureReason.PROCESS_ERROR)

        if isinstance(outcome, DetectionResult):
            self.last_result = outcome
            self._set_status(DetectionStatus.SUCCESS)
            self._schedule_revert(self.success_revert)
            detections_total.labels(outcome="success").inc()
            logger.info(f"✅ Plate {outcome.plate_number} ({outcome.confidence:.0f}%)")
        else:
            self._set_status(DetectionStatus.ERROR, outcome.message)
            self._schedule_revert(self.error_revert)
            detections_total.labels(outcome=outcome.reason.value).inc()
            logger.info(f"⚠️ Detection rejected: {outcome.reason.value}")

        return outcome

    async def _run_cycle(self, frame: Optional[CaptureFrame]) -> DetectionOutcome:
        # 1) capture
        if frame is None:
            frame = self.camera.capture_frame()
        if frame is None:
            return DetectionFailure.of(FailureReason.NO_FRAME)

        # 2) engine (lazy init)
        try:
            await self.engine.initialize()
        except OCREngineInitError:
            return DetectionFailure.of(FailureReason.ENGINE_INIT)

        # 3) recognize
        try:
            output = await self.engine.process(frame)
        except OCRProcessError as exc:
            logger.warning(f"Recognition failed: {exc}")
            return DetectionFailure.of(FailureReason.PROCESS_ERROR)

        # 4) validate + gates
        candidate = self.validator.validate(output)
        logger.debug(
            f"Candidate {candidate.normalized_text!r} @ {candidate.confidence} "
            f"from {len(output.words)} words"
        )
        rejection = check_acceptance(candidate, self.min_length, self.min_confidence)
        if rejection is not None:
            return DetectionFailure.of(rejection)

        # 5) report
        return DetectionResult(
            plate_number=candidate.normalized_text,
            confidence=candidate.confidence,
            timestamp=datetime.now().astimezone(),
            image_data=frame.to_data_url(),
        )

    # ---------------------------------------------------------
    # SCOPE
    # ---------------------------------------------------------
    async def close(self) -> None:
        """Cancels the revert timer and releases camera and engine."""
        self._cancel_revert()
        try:
            await self.camera.stop()
        finally:
            await self.engine.terminate()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()
