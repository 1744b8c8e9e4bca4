import cv2
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from plateguard.domain.exceptions import CameraAccessError, DeviceEnumerationError
from plateguard.domain.Interfaces.camera_platform import ICameraPlatform
from plateguard.domain.Interfaces.camera_stream import ICameraStream
from plateguard.domain.Models.camera import DeviceDescriptor

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}


class FakeCameraStream(ICameraStream):
    """
    Simulates a camera from a file: a still image, or a video played in a loop.
    """

    def __init__(self, path: str, device_id: str):
        self.path = path
        self.device_id = device_id

        self.cap = None
        self._still: Optional[np.ndarray] = None

    # ==========================================================
    # CONNECT
    # ==========================================================
    def connect(self):
        if Path(self.path).suffix.lower() in IMAGE_SUFFIXES:
            self._still = cv2.imread(self.path)
            if self._still is None:
                raise CameraAccessError(f"Could not open image {self.path}")
            return

        self.cap = cv2.VideoCapture(self.path)
        if not self.cap.isOpened():
            self.cap = None
            raise CameraAccessError(f"Could not open video {self.path}")

    # ==========================================================
    # READ FRAME
    # ==========================================================
    def read_frame(self, timeout: float = 0.0) -> Optional[np.ndarray]:
        """
        Returns the still image, or the next video frame.
        Restarts the video when it reaches the end.
        """
        if self._still is not None:
            return self._still
        if self.cap is None:
            return None

        ok, frame = self.cap.read()
        if ok:
            return frame

        self._restart_video()
        ok, frame = self.cap.read()
        return frame if ok else None

    # ==========================================================
    # INTERNAL: RESTART VIDEO
    # ==========================================================
    def _restart_video(self):
        if self.cap:
            self.cap.release()
        self.cap = cv2.VideoCapture(self.path)

    # ==========================================================
    # DISCONNECT
    # ==========================================================
    def disconnect(self):
        self._still = None
        if self.cap:
            self.cap.release()
            self.cap = None


class FakeCameraPlatform(ICameraPlatform):
    """
    Every configured file path is exposed as one capture device.
    """

    def __init__(self, sources: List[str]):
        self.sources = list(sources)

    def list_devices(self) -> List[DeviceDescriptor]:
        if not self.sources:
            raise DeviceEnumerationError("No fake camera sources configured (FAKE_CAM_SOURCES)")
        return [
            DeviceDescriptor(device_id=str(i), label=Path(p).stem)
            for i, p in enumerate(self.sources)
        ]

    def open_stream(self, device_id, width, height, facing="environment") -> FakeCameraStream:
        index = int(device_id) if device_id is not None else 0
        if not 0 <= index < len(self.sources):
            raise CameraAccessError(f"Unknown fake camera {device_id}")
        logger.debug(f"Fake camera {index} -> {self.sources[index]} (resolution request ignored)")
        return FakeCameraStream(self.sources[index], device_id=str(index))
