# plateguard/domain/Models/recognition.py
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class BoundingBox:
    x0: int
    y0: int
    x1: int
    y1: int


@dataclass(frozen=True)
class RecognizedWord:
    text: str
    confidence: float                 # 0-100
    bbox: BoundingBox = BoundingBox(0, 0, 0, 0)


@dataclass(frozen=True)
class RecognitionOutput:
    """
    Result of one recognition pass over a frame. Never cached.
    """
    full_text: str
    confidence: float                 # overall 0-100
    words: List[RecognizedWord] = field(default_factory=list)
