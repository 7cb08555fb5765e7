import uuid
from typing import Dict, Iterable, List, Sequence

from pantrycart.schemas.dto import GroceryItem, ParsedRecipe
from pantrycart.services.categories import AisleCategorizer, default_categorizer
from pantrycart.tables import GROCERY_DISPLAY_ORDER


def ingredient_to_item(line: str, categorizer: AisleCategorizer = default_categorizer) -> GroceryItem:
    return GroceryItem(
        id=uuid.uuid4().hex,
        name=line.strip(),
        category=categorizer.categorize(line).value,
        checked=False,
    )


def items_by_category(items: Sequence[GroceryItem]) -> Dict[str, List[GroceryItem]]:
    """Bucket items in display order; unknown categories land in Other."""
    by_cat = {cat: [i for i in items if i.category == cat] for cat in GROCERY_DISPLAY_ORDER}
    stray = [i for i in items if i.category not in GROCERY_DISPLAY_ORDER]
    if stray:
        by_cat["Other"] = by_cat["Other"] + stray
    return by_cat


def merge_into_list(existing: Sequence[GroceryItem], lines: Iterable[str]) -> List[GroceryItem]:
    """Append new ingredient lines whose names are not on the list yet."""
    merged = list(existing)
    names = {i.name.lower() for i in merged}
    for line in lines:
        if not line.strip():
            continue
        item = ingredient_to_item(line)
        if item.name.lower() in names:
            continue
        names.add(item.name.lower())
        merged.append(item)
    return merged


def toggle_item(items: Sequence[GroceryItem], item_id: str) -> List[GroceryItem]:
    return [i.model_copy(update={"checked": not i.checked}) if i.id == item_id else i for i in items]


def merge_ingredients(recipes: Iterable[ParsedRecipe]) -> List[str]:
    """Union of ingredient lines across several recipes, first spelling kept."""
    seen = set()
    out = []
    for recipe in recipes:
        for ing in recipe.ingredients:
            key = ing.strip().lower()
            if key and key not in seen:
                seen.add(key)
                out.append(ing.strip())
    return out
