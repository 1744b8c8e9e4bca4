from abc import ABC, abstractmethod
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import RecognitionOutput

PLATE_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class IRecognitionWorker(ABC):
    """
    Long-lived OCR worker. Not reentrant: callers serialize `recognize`.
    """
    @abstractmethod
    def recognize(self, frame: CaptureFrame) -> RecognitionOutput:
        """Runs recognition over the whole frame."""
        pass

    def close(self) -> None:
        """Releases engine resources. Default: nothing to release."""
        pass
