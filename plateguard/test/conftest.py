import threading
import time
from typing import List, Optional

import numpy as np
import pytest

from plateguard.application.camera_lifecycle_manager import CameraLifecycleManager
from plateguard.application.detection_orchestrator import DetectionOrchestrator
from plateguard.application.ocr_engine_adapter import OCREngineAdapter
from plateguard.domain.exceptions import CameraAccessError, DeviceEnumerationError
from plateguard.domain.Interfaces.camera_platform import ICameraPlatform
from plateguard.domain.Interfaces.camera_stream import ICameraStream
from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker
from plateguard.domain.Models.camera import DeviceDescriptor
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import RecognitionOutput, RecognizedWord
from plateguard.domain.Services.plate_text_validator import PlateTextValidator
from plateguard.infrastructure.Normalizer.plate_normalizer import PlateNormalizer


class FakeStream(ICameraStream):
    def __init__(self, platform: "FakePlatform", device_id: str, shape=(480, 640, 3)):
        self.platform = platform
        self.device_id = device_id
        self.shape = shape
        self.connected = False

    def connect(self) -> None:
        if self.platform.fail_open:
            raise CameraAccessError("permission denied")
        if any(s.connected for s in self.platform.streams):
            self.platform.overlaps += 1
        self.connected = True

    def read_frame(self, timeout: float = 0.0):
        if not self.connected or self.platform.no_frames:
            return None
        return np.full(self.shape, 127, dtype=np.uint8)

    def disconnect(self) -> None:
        self.connected = False
        self.platform.disconnects += 1


class FakePlatform(ICameraPlatform):
    def __init__(self, devices: Optional[List[DeviceDescriptor]] = None):
        self.devices = devices if devices is not None else [DeviceDescriptor("0", "Integrated Webcam")]
        self.fail_list = False
        self.fail_open = False
        self.no_frames = False
        self.streams: List[FakeStream] = []
        self.open_calls = []
        self.overlaps = 0
        self.disconnects = 0

    def list_devices(self):
        if self.fail_list:
            raise DeviceEnumerationError("enumeration denied")
        return list(self.devices)

    def open_stream(self, device_id, width, height, facing="environment"):
        self.open_calls.append((device_id, width, height, facing))
        stream = FakeStream(self, device_id if device_id is not None else "default")
        self.streams.append(stream)
        return stream


class FakeWorker(IRecognitionWorker):
    """Returns a preset output; can fail or block until released."""

    def __init__(self, output: Optional[RecognitionOutput] = None):
        self.output = output or RecognitionOutput("AB12CD", 92.0, [RecognizedWord("AB12CD", 92.0)])
        self.error: Optional[Exception] = None
        self.gate: Optional[threading.Event] = None
        self.calls = 0
        self.closed = False
        self._active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def recognize(self, frame: CaptureFrame) -> RecognitionOutput:
        with self._lock:
            self.calls += 1
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.gate is not None:
                self.gate.wait(timeout=5)
            else:
                time.sleep(0.01)
            if self.error is not None:
                raise self.error
            return self.output
        finally:
            with self._lock:
                self._active -= 1

    def close(self) -> None:
        self.closed = True


def make_frame(width: int = 4, height: int = 4) -> CaptureFrame:
    import cv2
    ok, buf = cv2.imencode(".jpg", np.zeros((height, width, 3), dtype=np.uint8))
    assert ok
    return CaptureFrame(data=buf.tobytes(), width=width, height=height, timestamp=time.time(), source="test")


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def worker() -> FakeWorker:
    return FakeWorker()


@pytest.fixture
def validator() -> PlateTextValidator:
    return PlateTextValidator(PlateNormalizer(), word_min_confidence=60, min_length=3)


@pytest.fixture
def build_orchestrator(platform, worker, validator):
    """Factory so each test can pick revert delays; objects are built inside the test's loop."""
    def _build(success_revert=0.05, error_revert=0.1, timeout=2.0) -> DetectionOrchestrator:
        camera = CameraLifecycleManager(platform, resolution=(1280, 720), jpeg_quality=80)
        engine = OCREngineAdapter(lambda: worker, timeout=timeout)
        return DetectionOrchestrator(
            camera=camera,
            engine=engine,
            validator=validator,
            min_confidence=70,
            min_length=3,
            success_revert=success_revert,
            error_revert=error_revert,
        )
    return _build
