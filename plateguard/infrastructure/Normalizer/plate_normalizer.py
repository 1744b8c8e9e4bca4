# plateguard/infrastructure/Normalizer/plate_normalizer.py
import re
from plateguard.domain.Interfaces.text_normalizer import ITextNormalizer


class PlateNormalizer(ITextNormalizer):
    """
    Plate text normalization:
    - Uppercase
    - Keep only A-Z0-9 (separators, whitespace and punctuation dropped)

    Length and shape are not judged here; that is the validator's job.
    """
    _NON_ALNUM = re.compile(r"[^A-Z0-9]")

    def normalize(self, text: str) -> str:
        if not text:
            return ""
        return self._NON_ALNUM.sub("", text.strip().upper())
