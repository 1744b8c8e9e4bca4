from abc import ABC, abstractmethod
from typing import List, Optional

from plateguard.domain.Interfaces.camera_stream import ICameraStream
from plateguard.domain.Models.camera import DeviceDescriptor


class ICameraPlatform(ABC):
    """
    Platform access to capture devices: discovery and stream creation.
    """

    @abstractmethod
    def list_devices(self) -> List[DeviceDescriptor]:
        """Raises DeviceEnumerationError if the platform refuses."""
        pass

    @abstractmethod
    def open_stream(
        self,
        device_id: Optional[str],
        width: int,
        height: int,
        facing: str = "environment",
    ) -> ICameraStream:
        """
        Builds a stream for `device_id`; with no device, the platform picks
        its `facing` default. The returned stream is not connected yet.
        """
        pass
