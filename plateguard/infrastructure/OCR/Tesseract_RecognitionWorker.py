import logging
from statistics import fmean

import cv2
import pytesseract

from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker, PLATE_CHARSET
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import BoundingBox, RecognitionOutput, RecognizedWord

logger = logging.getLogger(__name__)

# page segmentation mode 6: assume a single uniform block of text
PSM_SINGLE_BLOCK = 6


class Tesseract_RecognitionWorker(IRecognitionWorker):
    """
    Tesseract via pytesseract, restricted to A-Z0-9 and single-block segmentation.
    Construction fails if the tesseract binary is missing.
    """

    def __init__(self, lang: str = "eng", psm: int = PSM_SINGLE_BLOCK):
        version = pytesseract.get_tesseract_version()
        self.lang = lang
        self.config = f"--psm {psm} -c tessedit_char_whitelist={PLATE_CHARSET}"
        logger.info(f"🔤 Tesseract {version} ready (lang={lang}, psm={psm})")

    def recognize(self, frame: CaptureFrame) -> RecognitionOutput:
        image = cv2.cvtColor(frame.decode(), cv2.COLOR_BGR2RGB)
        data = pytesseract.image_to_data(
            image,
            lang=self.lang,
            config=self.config,
            output_type=pytesseract.Output.DICT,
        )

        words = []
        lines: dict[tuple, list[str]] = {}
        for i, raw in enumerate(data["text"]):
            text = (raw or "").strip()
            conf = float(data["conf"][i])
            # conf == -1 marks layout rows (blocks, paragraphs, lines)
            if not text or conf < 0:
                continue

            left, top = int(data["left"][i]), int(data["top"][i])
            words.append(RecognizedWord(
                text=text,
                confidence=conf,
                bbox=BoundingBox(left, top, left + int(data["width"][i]), top + int(data["height"][i])),
            ))
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(text)

        full_text = "\n".join(" ".join(line) for line in lines.values())
        overall = fmean(w.confidence for w in words) if words else 0.0
        return RecognitionOutput(full_text=full_text, confidence=overall, words=words)
