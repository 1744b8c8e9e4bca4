# plateguard/domain/Models/detection_result.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class DetectionStatus(str, Enum):
    IDLE = "idle"
    DETECTING = "detecting"
    SUCCESS = "success"
    ERROR = "error"


class FailureReason(str, Enum):
    NO_FRAME = "no_frame"
    ENGINE_INIT = "engine_init"
    PROCESS_ERROR = "process_error"
    NO_PLATE_DETECTED = "no_plate_detected"
    LOW_CONFIDENCE = "low_confidence"
    BUSY = "busy"


FAILURE_MESSAGES = {
    FailureReason.NO_FRAME: "No frame available. Start the camera and try again.",
    FailureReason.ENGINE_INIT: "Failed to initialize OCR engine",
    FailureReason.PROCESS_ERROR: "Failed to process image. Please try again.",
    FailureReason.NO_PLATE_DETECTED: (
        "No license plate detected. Please ensure the plate is clearly visible and well-lit."
    ),
    FailureReason.LOW_CONFIDENCE: (
        "Low confidence detection. Please try again with better lighting or positioning."
    ),
    FailureReason.BUSY: "A detection is already in progress.",
}


@dataclass(frozen=True)
class DetectionResult:
    """
    Accepted detection. Immutable; handed to the caller, who may persist it.
    """
    plate_number: str
    confidence: float
    timestamp: datetime
    image_data: Optional[str] = None   # data URL of the captured frame

    def to_dict(self, include_image: bool = False) -> dict:
        """Serializable form; the image is left out unless asked for."""
        out = {
            "plate_number": self.plate_number,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
        }
        if include_image:
            out["image_data"] = self.image_data
        return out


@dataclass(frozen=True)
class DetectionFailure:
    reason: FailureReason
    message: str

    @classmethod
    def of(cls, reason: FailureReason) -> "DetectionFailure":
        return cls(reason=reason, message=FAILURE_MESSAGES[reason])

    def to_dict(self) -> dict:
        return {"reason": self.reason.value, "message": self.message}
