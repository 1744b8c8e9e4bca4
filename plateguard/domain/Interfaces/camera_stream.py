from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class ICameraStream(ABC):
    """
    Abstraction over one open camera stream.
    """
    device_id: str

    @abstractmethod
    def connect(self) -> None:
        """Opens the stream. Raises CameraAccessError on failure."""
        pass

    @abstractmethod
    def read_frame(self, timeout: float = 0.0) -> Optional[np.ndarray]:
        """Latest live frame (BGR), or None if nothing is buffered yet."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Releases every resource held by the stream."""
        pass
