import base64
from dataclasses import dataclass

import cv2
import numpy as np


@dataclass(frozen=True)
class CaptureFrame:
    """
    Still image captured from the active camera, already encoded (JPEG).
    Ownership passes to the caller; the camera manager keeps no reference.
    """
    data: bytes          # encoded image payload
    width: int
    height: int
    timestamp: float     # capture time (epoch seconds)
    source: str          # device id
    mime_type: str = "image/jpeg"

    def decode(self) -> np.ndarray:
        """Decode back to a BGR array for recognition engines."""
        buf = np.frombuffer(self.data, dtype=np.uint8)
        image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        if image is None:
            raise ValueError("CaptureFrame payload is not a decodable image")
        return image

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def to_dict(self) -> dict:
        """
        Serializable summary without the image payload.
        Useful for logs and API responses.
        """
        return {
            "width": self.width,
            "height": self.height,
            "timestamp": self.timestamp,
            "source": self.source,
            "mime_type": self.mime_type,
            "size_bytes": len(self.data),
        }
