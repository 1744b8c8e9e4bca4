import logging
from statistics import fmean

import easyocr

from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker, PLATE_CHARSET
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import BoundingBox, RecognitionOutput, RecognizedWord

logger = logging.getLogger(__name__)

# tesseract language codes -> easyocr codes
_LANG_CODES = {"eng": "en", "spa": "es", "deu": "de", "fra": "fr"}


class EasyOCR_RecognitionWorker(IRecognitionWorker):
    """
    EasyOCR reader, built once and reused (model load is the expensive part).
    - allowlist restricted to A-Z0-9
    - every detected text box becomes one word; confidences scaled to 0-100
    """

    def __init__(self, lang: str = "en", gpu: bool = False):
        self.lang = _LANG_CODES.get(lang, lang)
        self.reader = easyocr.Reader([self.lang], gpu=gpu)
        logger.info(f"🔤 EasyOCR reader ready (lang={self.lang}, gpu={gpu})")

    def recognize(self, frame: CaptureFrame) -> RecognitionOutput:
        results = self.reader.readtext(
            frame.decode(),
            allowlist=PLATE_CHARSET,
            detail=1,
            paragraph=False,
        )

        words = []
        for points, text, conf in results:
            xs = [int(p[0]) for p in points]
            ys = [int(p[1]) for p in points]
            words.append(RecognizedWord(
                text=text.strip(),
                confidence=float(conf) * 100.0,
                bbox=BoundingBox(min(xs), min(ys), max(xs), max(ys)),
            ))

        full_text = " ".join(w.text for w in words)
        overall = fmean(w.confidence for w in words) if words else 0.0
        return RecognitionOutput(full_text=full_text, confidence=overall, words=words)

    def close(self) -> None:
        self.reader = None
