# plateguard/domain/Models/camera.py
from dataclasses import dataclass
from enum import Enum

BACK_CAMERA_HINTS = ("back", "rear")


@dataclass(frozen=True)
class DeviceDescriptor:
    """
    Capture device as reported by the platform.
    """
    device_id: str
    label: str = ""

    @property
    def looks_rear_facing(self) -> bool:
        label = self.label.lower()
        return any(hint in label for hint in BACK_CAMERA_HINTS)

    def to_dict(self) -> dict:
        return {"device_id": self.device_id, "label": self.label}


class CameraState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    ERROR = "error"
