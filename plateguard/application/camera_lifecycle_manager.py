import asyncio
import logging
import time
from typing import List, Optional

import cv2

from plateguard.core.config import settings
from plateguard.domain.exceptions import CameraAccessError, DeviceEnumerationError
from plateguard.domain.Interfaces.camera_platform import ICameraPlatform
from plateguard.domain.Interfaces.camera_stream import ICameraStream
from plateguard.domain.Models.camera import CameraState, DeviceDescriptor
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.monitoring.metrics import camera_active, camera_errors_total, camera_starts_total

logger = logging.getLogger(__name__)


class CameraLifecycleManager:
    """
    Owns device discovery, the single open stream, device switching and
    still capture.

    - start/stop/switch are serialized; a new stream is never opened before
      the previous one is released.
    - use it as `async with manager:`, exit always runs stop().
    """

    def __init__(
        self,
        platform: ICameraPlatform,
        resolution: Optional[tuple[int, int]] = None,
        jpeg_quality: Optional[int] = None,
    ):
        self.platform = platform
        self.width, self.height = resolution or settings.camera_size
        self.jpeg_quality = jpeg_quality if jpeg_quality is not None else settings.capture_jpeg_quality

        self.devices: List[DeviceDescriptor] = []
        self.current_device_id: Optional[str] = None
        self.state = CameraState.INACTIVE
        self.error: Optional[str] = None

        self._stream: Optional[ICameraStream] = None
        self._lock = asyncio.Lock()

    @property
    def is_active(self) -> bool:
        return self.state is CameraState.ACTIVE

    # ---------------------------------------------------------
    # DISCOVERY
    # ---------------------------------------------------------
    async def enumerate_devices(self) -> List[DeviceDescriptor]:
        try:
            devices = await asyncio.to_thread(self.platform.list_devices)
        except DeviceEnumerationError as exc:
            self._record_error("enumeration", str(exc))
            raise
        except Exception as exc:
            self._record_error("enumeration", "Failed to enumerate camera devices")
            raise DeviceEnumerationError("Failed to enumerate camera devices") from exc

        self.devices = list(devices)
        if self.devices and self.current_device_id is None:
            preferred = next((d for d in self.devices if d.looks_rear_facing), self.devices[0])
            self.current_device_id = preferred.device_id
            logger.info(f"📷 Selected camera {preferred.device_id} ({preferred.label or 'no label'})")

        return list(self.devices)

    # ---------------------------------------------------------
    # START / STOP / SWITCH
    # ---------------------------------------------------------
    async def start(self) -> None:
        async with self._lock:
            if self._stream is not None:
                await self._release()
            await self._acquire()

    async def stop(self) -> None:
        async with self._lock:
            await self._release()

    async def switch_device(self) -> None:
        async with self._lock:
            if len(self.devices) < 2:
                return

            ids = [d.device_id for d in self.devices]
            # unknown current device -> index -1 -> first device
            index = ids.index(self.current_device_id) if self.current_device_id in ids else -1
            self.current_device_id = ids[(index + 1) % len(ids)]
            logger.info(f"🔄 Switching to camera {self.current_device_id}")

            if self.state is CameraState.ACTIVE:
                await self._release()
                await self._acquire()

    async def _acquire(self) -> None:
        self.error = None
        stream = None
        try:
            stream = self.platform.open_stream(
                self.current_device_id,
                self.width,
                self.height,
                facing="environment",
            )
            await asyncio.to_thread(stream.connect)
        except Exception as exc:
            message = str(exc) if isinstance(exc, CameraAccessError) else (
                "Failed to access camera. Please ensure camera permissions are granted."
            )
            self.state = CameraState.ERROR
            self._record_error("access", message)
            if isinstance(exc, CameraAccessError):
                raise
            raise CameraAccessError(message) from exc

        self._stream = stream
        self.state = CameraState.ACTIVE
        camera_active.set(1)
        camera_starts_total.inc()

    async def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                await asyncio.to_thread(stream.disconnect)
            except Exception:
                logger.exception("Error releasing camera stream")
        if stream is not None or self.state is CameraState.ERROR:
            self.state = CameraState.INACTIVE
        camera_active.set(0)

    # ---------------------------------------------------------
    # CAPTURE
    # ---------------------------------------------------------
    def capture_frame(self) -> Optional[CaptureFrame]:
        """
        Encodes the latest live frame at its native size (JPEG).
        None when inactive or when no frame is buffered yet.
        """
        if self.state is not CameraState.ACTIVE or self._stream is None:
            return None

        image = self._stream.read_frame()
        if image is None:
            logger.warning("Capture requested but no frame is buffered")
            return None

        ok, buf = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not ok:
            logger.error("JPEG encoding of the captured frame failed")
            return None

        height, width = image.shape[:2]
        return CaptureFrame(
            data=buf.tobytes(),
            width=width,
            height=height,
            timestamp=time.time(),
            source=self._stream.device_id,
        )

    # ---------------------------------------------------------
    # SCOPE
    # ---------------------------------------------------------
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.stop()

    def _record_error(self, kind: str, message: str) -> None:
        self.error = message
        camera_errors_total.labels(kind=kind).inc()
        logger.error(f"❌ Camera {kind} error: {message}")
