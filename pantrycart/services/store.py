"""Read/write helpers over the persisted rows. Callers run inside an app context."""
from typing import List, Optional

from pantrycart.models import GroceryList, KitchenItem, Recipe, _now, db
from pantrycart.schemas.dto import GroceryItem, KitchenInventoryItem, RecipeSummary, SaveRecipeRequest
from pantrycart.services.grocery import merge_into_list, toggle_item


# ---------------- recipes ----------------

def list_recipes(user_id: str) -> List[Recipe]:
    return (
        Recipe.query.filter_by(user_id=user_id)
        .order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .all()
    )


def recipe_summaries(user_id: str) -> List[RecipeSummary]:
    return [RecipeSummary.model_validate(r) for r in list_recipes(user_id)]


def save_recipe(user_id: str, payload: SaveRecipeRequest) -> Recipe:
    recipe = Recipe(
        user_id=user_id,
        source_url=payload.source_url,
        title=payload.title.strip(),
        image_url=payload.image_url,
        ingredients=payload.ingredients,
        steps=payload.steps,
        servings=payload.servings,
    )
    db.session.add(recipe)
    db.session.commit()
    return recipe


def mark_recipe_cooked(user_id: str, recipe_id: int) -> Optional[Recipe]:
    recipe = Recipe.query.filter_by(id=recipe_id, user_id=user_id).first()
    if recipe is None:
        return None
    recipe.cooked_at = _now()
    db.session.commit()
    return recipe


def delete_recipe(user_id: str, recipe_id: int) -> bool:
    recipe = Recipe.query.filter_by(id=recipe_id, user_id=user_id).first()
    if recipe is None:
        return False
    GroceryList.query.filter_by(recipe_id=recipe_id).update({"recipe_id": None})
    db.session.delete(recipe)
    db.session.commit()
    return True


# ---------------- kitchen inventory ----------------

def list_inventory(user_id: str) -> List[KitchenInventoryItem]:
    rows = KitchenItem.query.filter_by(user_id=user_id).order_by(KitchenItem.id).all()
    return [KitchenInventoryItem(id=str(r.id), name=r.name) for r in rows]


def add_inventory_items(user_id: str, names: List[str]) -> List[KitchenInventoryItem]:
    """Add names not already stocked (case-insensitive); returns the new rows."""
    existing = {i.name.lower() for i in list_inventory(user_id)}
    added = []
    for name in names:
        if name.lower() in existing:
            continue
        existing.add(name.lower())
        row = KitchenItem(user_id=user_id, name=name)
        db.session.add(row)
        added.append(row)
    db.session.commit()
    return [KitchenInventoryItem(id=str(r.id), name=r.name) for r in added]


def remove_inventory_item(user_id: str, item_id: int) -> bool:
    row = KitchenItem.query.filter_by(id=item_id, user_id=user_id).first()
    if row is None:
        return False
    db.session.delete(row)
    db.session.commit()
    return True


# ---------------- grocery lists ----------------

def latest_grocery_list(user_id: str) -> Optional[GroceryList]:
    return (
        GroceryList.query.filter_by(user_id=user_id)
        .order_by(GroceryList.created_at.desc(), GroceryList.id.desc())
        .first()
    )


def list_items(grocery_list: GroceryList) -> List[GroceryItem]:
    return [GroceryItem.model_validate(i) for i in (grocery_list.items or [])]


def create_or_update_grocery_list(user_id: str, ingredients: List[str], recipe_id: Optional[int] = None) -> GroceryList:
    """Merge ingredient lines into the user's latest list, or start a new one."""
    current = latest_grocery_list(user_id)
    if current is None:
        current = GroceryList(user_id=user_id, recipe_id=recipe_id, items=[])
        db.session.add(current)
    elif recipe_id is not None:
        current.recipe_id = recipe_id

    merged = merge_into_list(list_items(current), ingredients)
    # reassign so the JSON column is flagged dirty
    current.items = [i.model_dump() for i in merged]
    db.session.commit()
    return current


def toggle_grocery_item(user_id: str, list_id: int, item_id: str) -> Optional[GroceryList]:
    current = GroceryList.query.filter_by(id=list_id, user_id=user_id).first()
    if current is None:
        return None
    current.items = [i.model_dump() for i in toggle_item(list_items(current), item_id)]
    db.session.commit()
    return current
