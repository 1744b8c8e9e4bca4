# plateguard/domain/Services/plate_text_validator.py
from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from plateguard.domain.Interfaces.text_normalizer import ITextNormalizer
from plateguard.domain.Models.detection_result import FailureReason
from plateguard.domain.Models.plate import PlateCandidate
from plateguard.domain.Models.recognition import RecognitionOutput, RecognizedWord
from plateguard.core.config import settings


PLATE_SHAPES: Sequence[re.Pattern] = (
    re.compile(r"^[A-Z]{1,3}[0-9]{1,4}$"),          # ABC123
    re.compile(r"^[0-9]{1,3}[A-Z]{1,3}$"),          # 123ABC
    re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z]{2}$"),      # AB12CD
    re.compile(r"^[A-Z0-9]{5,8}$"),                 # generic alphanumeric
)


def _finite(value: Optional[float]) -> float:
    # NaN, inf and missing confidences count as 0
    if value is None or not math.isfinite(value):
        return 0.0
    return float(value)


def _round_percent(value: Optional[float]) -> float:
    # half-up, so 69.5 reports as 70
    return float(math.floor(_finite(value) + 0.5))


class PlateTextValidator:
    """
    Turns raw recognition output into a single plate candidate.

    Stateless and total: `validate` always returns a candidate, whatever the
    input looks like. Whether that candidate is good enough is decided
    separately by `check_acceptance`.

    Strategy:
    1) Drop words at or below `word_min_confidence`.
    2) Keep words whose normalized text is at least `min_length` long and
       matches one of PLATE_SHAPES.
    3) Highest confidence wins; equal confidences keep recognition order.
    4) With no surviving word, fall back to the normalized full text and the
       overall confidence, even if that text matches no shape.
    """

    def __init__(
        self,
        normalizer: ITextNormalizer,
        word_min_confidence: Optional[float] = None,
        min_length: Optional[int] = None,
    ):
        self.normalizer = normalizer
        self.word_min_confidence = (
            word_min_confidence
            if word_min_confidence is not None
            else settings.ocr_word_min_confidence
        )
        self.min_length = min_length if min_length is not None else settings.plate_min_length

    # ---------------------------------------------------------
    #  PUBLIC API
    # ---------------------------------------------------------
    def validate(self, output: RecognitionOutput) -> PlateCandidate:
        ranked = self.rank_words(output.words)

        if ranked:
            best = ranked[0]
            return PlateCandidate(
                normalized_text=self.normalizer.normalize(best.text),
                confidence=_round_percent(best.confidence),
            )

        # lenient fallback: full text, no shape check
        return PlateCandidate(
            normalized_text=self.normalizer.normalize(output.full_text or ""),
            confidence=_round_percent(output.confidence),
        )

    def rank_words(self, words: Sequence[RecognizedWord]) -> list[RecognizedWord]:
        confident = [w for w in words if _finite(w.confidence) > self.word_min_confidence]
        shaped = [w for w in confident if self.is_plate_shaped(w.text)]
        # sorted() is stable: ties keep recognition order
        return sorted(shaped, key=lambda w: -_finite(w.confidence))

    def is_plate_shaped(self, text: str) -> bool:
        cleaned = self.normalizer.normalize(text or "")
        if len(cleaned) < self.min_length:
            return False
        return any(p.match(cleaned) for p in PLATE_SHAPES)


def check_acceptance(
    candidate: PlateCandidate,
    min_length: Optional[int] = None,
    min_confidence: Optional[float] = None,
) -> Optional[FailureReason]:
    """
    Acceptance gates, evaluated in order:
    - text shorter than `min_length`  -> NO_PLATE_DETECTED
    - confidence below `min_confidence` -> LOW_CONFIDENCE
    Returns None when the candidate is accepted.
    """
    min_length = min_length if min_length is not None else settings.plate_min_length
    min_confidence = min_confidence if min_confidence is not None else settings.ocr_min_confidence

    if len(candidate.normalized_text) < min_length:
        return FailureReason.NO_PLATE_DETECTED
    if candidate.confidence < min_confidence:
        return FailureReason.LOW_CONFIDENCE
    return None
