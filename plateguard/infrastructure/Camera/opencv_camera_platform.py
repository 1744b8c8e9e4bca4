import logging
from pathlib import Path
from typing import List, Optional

import cv2

from plateguard.domain.exceptions import DeviceEnumerationError
from plateguard.domain.Interfaces.camera_platform import ICameraPlatform
from plateguard.domain.Models.camera import DeviceDescriptor
from plateguard.infrastructure.Camera.opencv_camera_stream import OpenCVCameraStream

logger = logging.getLogger(__name__)

V4L2_SYSFS = Path("/sys/class/video4linux")


class OpenCVCameraPlatform(ICameraPlatform):
    """
    Local capture devices through OpenCV.

    OpenCV has no enumeration API, so indices 0..max_probe-1 are probed.
    Labels come from V4L2 sysfs when available.
    """

    def __init__(self, max_probe: int = 5, first_frame_timeout: float = 3.0):
        self.max_probe = max_probe
        self.first_frame_timeout = first_frame_timeout

    def list_devices(self) -> List[DeviceDescriptor]:
        devices = []
        try:
            for index in range(self.max_probe):
                cap = cv2.VideoCapture(index)
                try:
                    if cap is not None and cap.isOpened():
                        devices.append(DeviceDescriptor(str(index), self._label_for(index)))
                finally:
                    if cap is not None:
                        cap.release()
        except Exception as exc:
            raise DeviceEnumerationError("Failed to enumerate camera devices") from exc

        logger.debug(f"Probed {self.max_probe} capture indices, found {len(devices)}")
        return devices

    def open_stream(
        self,
        device_id: Optional[str],
        width: int,
        height: int,
        facing: str = "environment",
    ) -> OpenCVCameraStream:
        if device_id is None:
            # no facing-mode hint in OpenCV: the default device stands in for it
            logger.debug(f"No device selected, using default capture for facing={facing}")
            device_id = "0"

        source: int | str = int(device_id) if device_id.isdigit() else device_id
        return OpenCVCameraStream(
            source=source,
            device_id=device_id,
            width=width,
            height=height,
            first_frame_timeout=self.first_frame_timeout,
        )

    @staticmethod
    def _label_for(index: int) -> str:
        name_file = V4L2_SYSFS / f"video{index}" / "name"
        try:
            return name_file.read_text().strip()
        except OSError:
            return f"Camera {index}"
