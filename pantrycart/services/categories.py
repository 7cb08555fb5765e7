from typing import Iterable, List, Mapping, Sequence, Tuple

from pantrycart.schemas.dto import Aisle, GroceryByAisle
from pantrycart.tables import AISLE_KEYWORDS


class AisleCategorizer:
    """Keyword fallback for assigning an ingredient to a supermarket aisle."""

    def __init__(self, keywords: Mapping[str, Sequence[str]] = AISLE_KEYWORDS):
        self.keywords = keywords

    def categorize(self, name: str) -> Aisle:
        lower = (name or "").lower()
        for aisle, words in self.keywords.items():
            if any(w in lower for w in words):
                return Aisle.coerce(aisle) or Aisle.OTHER
        return Aisle.OTHER

    def resolve(self, name: str, suggested=None) -> Aisle:
        """Use the model's aisle when it names a real one, keywords otherwise."""
        return Aisle.coerce(suggested) or self.categorize(name)


default_categorizer = AisleCategorizer()


def categorize(name: str) -> Aisle:
    return default_categorizer.categorize(name)


def group_by_aisle(items: Iterable[Tuple[str, Aisle]]) -> List[GroceryByAisle]:
    """Group (name, aisle) pairs in aisle order, skipping repeated names."""
    by_aisle = {aisle: [] for aisle in Aisle}
    seen = set()
    for name, aisle in items:
        key = name.lower().strip()
        if not key or key in seen:
            continue
        seen.add(key)
        by_aisle[Aisle.coerce(aisle) or Aisle.OTHER].append(name)
    return [
        GroceryByAisle(aisle=aisle.value, items=names)
        for aisle, names in by_aisle.items()
        if names
    ]
