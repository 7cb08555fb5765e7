import re
from typing import Iterable, Mapping

from pantrycart.tables import INGREDIENT_SYNONYMS, UNIT_WORDS

LEADING_FRACTION_RE = re.compile(r"^\d+\s*/\s*\d+\s*")
LEADING_NUMBER_RE = re.compile(r"^\d+(?:\.\d*)?\s*")
PAREN_RE = re.compile(r"\s*\([^)]*\)\s*")
SPACE_RE = re.compile(r"\s+")


class IngredientNormalizer:
    """Reduce ingredient text to a comparable name.

    `normalize` drops amounts, units and asides; `canonical` folds the result
    through the synonym table so "green onion" and "scallions" compare equal.
    """

    def __init__(
        self,
        synonyms: Mapping[str, str] = INGREDIENT_SYNONYMS,
        unit_words: Iterable[str] = UNIT_WORDS,
    ):
        self.synonyms = synonyms
        units = "|".join(sorted((re.escape(u) for u in unit_words), key=len, reverse=True))
        self._unit_re = re.compile(rf"\s*\b(?:{units})\b\.?\s*(?:of\s+)?")

    def _reduce_once(self, text: str) -> str:
        out = text.lower().strip()
        out = LEADING_FRACTION_RE.sub("", out, count=1)
        out = LEADING_NUMBER_RE.sub("", out, count=1)
        out = self._unit_re.sub(" ", out)
        out = PAREN_RE.sub(" ", out)
        return SPACE_RE.sub(" ", out).strip()

    def normalize(self, text: str) -> str:
        # "1 1/2 cups" needs two passes; run to a fixed point so the result is stable
        current = text or ""
        while True:
            reduced = self._reduce_once(current)
            if reduced == current:
                return reduced
            current = reduced

    def canonical(self, normalized: str) -> str:
        hit = self.synonyms.get(normalized)
        if hit is not None:
            return hit
        # "scallions, chopped" -> "scallions"
        head = normalized.split(",", 1)[0].strip()
        if head != normalized:
            hit = self.synonyms.get(head)
            if hit is not None:
                return hit
        return normalized


default_normalizer = IngredientNormalizer()


def normalize(text: str) -> str:
    return default_normalizer.normalize(text)


def canonical(normalized: str) -> str:
    return default_normalizer.canonical(normalized)
