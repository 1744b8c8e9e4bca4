from dataclasses import dataclass


@dataclass(frozen=True)
class PlateCandidate:
    """
    Normalized plate text proposed by the validator, before acceptance gating.
    """
    normalized_text: str       # only A-Z0-9
    confidence: float          # 0-100, rounded to an integer percent
