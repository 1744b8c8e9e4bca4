from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import BoundingBox, RecognitionOutput, RecognizedWord


class DummyRecognitionWorker(IRecognitionWorker):
    """
    Dummy worker that always reads the same fixed plate.
    """

    def __init__(self, text: str = "FAKE123", confidence: float = 99.0):
        self.text = text
        self.confidence = confidence

    def recognize(self, frame: CaptureFrame) -> RecognitionOutput:
        word = RecognizedWord(
            text=self.text,
            confidence=self.confidence,
            bbox=BoundingBox(0, 0, frame.width, frame.height),
        )
        return RecognitionOutput(full_text=self.text, confidence=self.confidence, words=[word])
