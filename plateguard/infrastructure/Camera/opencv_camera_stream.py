import cv2
import time
import logging
import threading
from typing import Optional

import numpy as np

from plateguard.domain.exceptions import CameraAccessError
from plateguard.domain.Interfaces.camera_stream import ICameraStream

logger = logging.getLogger(__name__)


class OpenCVCameraStream(ICameraStream):
    """
    ICameraStream over cv2.VideoCapture with a reader thread.
    - An internal thread (_update_frames) reads continuously and keeps ONLY the latest frame.
    - read_frame(timeout=...) returns that frame without blocking on the device.
    """

    def __init__(
        self,
        source: int | str,
        device_id: str,
        width: int = 1280,
        height: int = 720,
        first_frame_timeout: float = 3.0,
    ):
        """
        :param source: OpenCV capture index (USB/V4L2) or URL.
        :param device_id: id reported to the camera manager.
        :param width: requested frame width (the driver may pick another).
        :param height: requested frame height.
        :param first_frame_timeout: seconds connect() waits for the first frame.
        """
        self.source = source
        self.device_id = device_id
        self.width = width
        self.height = height
        self.first_frame_timeout = first_frame_timeout

        self.cap = None

        # reader thread state
        self._frame_lock = threading.Lock()
        self._latest_frame: Optional[np.ndarray] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

    # ==========================================================
    # CONNECT
    # ==========================================================
    def connect(self) -> None:
        cap = cv2.VideoCapture(self.source)

        if not cap or not cap.isOpened():
            if cap is not None:
                cap.release()
            raise CameraAccessError(
                f"Failed to access camera {self.device_id}. "
                "Please ensure camera permissions are granted."
            )

        # ideal resolution; drivers fall back to the closest supported mode
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        try:
            cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        except Exception:
            # not every build supports CAP_PROP_BUFFERSIZE
            pass

        self.cap = cap
        self._running = True
        self._thread = threading.Thread(
            target=self._update_frames,
            name=f"camera-{self.device_id}",
            daemon=True,
        )
        self._thread.start()

        if self.read_frame(timeout=self.first_frame_timeout) is None:
            self.disconnect()
            raise CameraAccessError(f"Camera {self.device_id} opened but delivered no frames")

        logger.info(f"🎥 Connected to camera {self.device_id} ({self.source})")

    # ==========================================================
    # READER THREAD
    # ==========================================================
    def _update_frames(self):
        """ Keeps reading frames, storing only the newest one. """
        while self._running:
            cap = self.cap
            if cap is None:
                break

            ret, frame = cap.read()
            if not ret:
                logger.warning(f"[{self.device_id}] Frame read failed")
                time.sleep(0.05)
                continue

            with self._frame_lock:
                self._latest_frame = frame

    # ==========================================================
    # READ FRAME
    # ==========================================================
    def read_frame(self, timeout: float = 0.0) -> Optional[np.ndarray]:
        """
        Latest buffered frame. Waits up to `timeout` seconds for one to arrive.
        """
        deadline = time.time() + timeout

        while True:
            with self._frame_lock:
                frame = self._latest_frame
            if frame is not None or not self._running or time.time() >= deadline:
                return frame
            time.sleep(0.01)

    # ==========================================================
    # DISCONNECT
    # ==========================================================
    def disconnect(self) -> None:
        self._running = False

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None

        if self.cap:
            try:
                self.cap.release()
            except Exception:
                logger.exception(f"[{self.device_id}] Error releasing capture")
            self.cap = None

        with self._frame_lock:
            self._latest_frame = None

        logger.info(f"🔌 Camera closed ({self.device_id}).")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()
