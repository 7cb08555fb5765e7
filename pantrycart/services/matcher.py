from typing import Dict, List, Sequence, Set

from pantrycart.schemas.dto import KitchenInventoryItem, MatchLevel, RecipeMatch, RecipeSummary
from pantrycart.services.normalizer import IngredientNormalizer, default_normalizer

ALMOST_THRESHOLD = 0.8

_LEVEL_ORDER = {MatchLevel.CAN_MAKE: 0, MatchLevel.ALMOST: 1, MatchLevel.NEED_MORE: 2}


def _tokens(normalized: str) -> Set[str]:
    return {t for t in normalized.split() if len(t) > 1 and not t.isdigit()}


class PantryLookup:
    def __init__(self, items: Sequence[KitchenInventoryItem], normalizer: IngredientNormalizer):
        self.names: Set[str] = set()
        self.tokens: Dict[str, Set[str]] = {}
        for item in items:
            norm = normalizer.normalize(item.name)
            if not norm:
                continue
            self.names.add(norm)
            self.names.add(normalizer.canonical(norm))
            self.tokens[norm] = _tokens(norm)


class FridgeMatcher:
    """Score saved recipes against what the user has on hand."""

    def __init__(
        self,
        normalizer: IngredientNormalizer = default_normalizer,
        almost_threshold: float = ALMOST_THRESHOLD,
    ):
        self.normalizer = normalizer
        self.almost_threshold = almost_threshold

    def covers(self, ingredient: str, pantry: PantryLookup) -> bool:
        norm = self.normalizer.normalize(ingredient)
        if not norm:
            return False
        if norm in pantry.names or self.normalizer.canonical(norm) in pantry.names:
            return True

        # substring either way; "oil" also hits "broiler", kept as-is
        for name in pantry.names:
            if name in norm or norm in name:
                return True

        recipe_tokens = _tokens(norm)
        for tokens in pantry.tokens.values():
            if any(len(t) > 2 and t in tokens for t in recipe_tokens):
                return True
        return False

    def level_for(self, score: float) -> MatchLevel:
        if score >= 1.0:
            return MatchLevel.CAN_MAKE
        if score >= self.almost_threshold:
            return MatchLevel.ALMOST
        return MatchLevel.NEED_MORE

    def match(
        self,
        recipes: Sequence[RecipeSummary],
        pantry_items: Sequence[KitchenInventoryItem],
    ) -> List[RecipeMatch]:
        pantry = PantryLookup(pantry_items, self.normalizer)
        results = []

        for recipe in recipes:
            ingredients = recipe.ingredients or []
            if not ingredients:
                results.append(RecipeMatch(
                    recipe=recipe,
                    level=MatchLevel.NEED_MORE,
                    matched_count=0,
                    total_ingredients=0,
                    missing_ingredients=[],
                    score=0.0,
                ))
                continue

            missing = []
            matched = 0
            for ing in ingredients:
                if self.covers(ing, pantry):
                    matched += 1
                else:
                    missing.append(ing.strip())

            score = matched / len(ingredients)
            results.append(RecipeMatch(
                recipe=recipe,
                level=self.level_for(score),
                matched_count=matched,
                total_ingredients=len(ingredients),
                missing_ingredients=missing,
                score=score,
            ))

        return results

    @staticmethod
    def sort(matches: Sequence[RecipeMatch]) -> List[RecipeMatch]:
        """can_make first, then almost, then need_more; best score first within a level."""
        return sorted(matches, key=lambda m: (_LEVEL_ORDER[m.level], -m.score))


default_matcher = FridgeMatcher()


def match_recipes(recipes, pantry_items) -> List[RecipeMatch]:
    return default_matcher.match(recipes, pantry_items)


def sort_matches(matches) -> List[RecipeMatch]:
    return FridgeMatcher.sort(matches)
