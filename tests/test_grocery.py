from pantrycart.schemas.dto import GroceryItem, ParsedRecipe
from pantrycart.services.grocery import (
    ingredient_to_item,
    items_by_category,
    merge_ingredients,
    merge_into_list,
    toggle_item,
)
from pantrycart.tables import GROCERY_DISPLAY_ORDER


def grocery(id, name, category, checked=False):
    return GroceryItem(id=id, name=name, category=category, checked=checked)


def test_ingredient_line_becomes_unchecked_item():
    item = ingredient_to_item(" 2 cups milk ")
    assert item.name == "2 cups milk"
    assert item.category == "Dairy"
    assert item.checked is False
    assert item.id


def test_items_are_bucketed_in_display_order():
    items = [
        grocery("1", "bread", "Bakery"),
        grocery("2", "onion", "Produce"),
        grocery("3", "chips", "Snacks"),
        grocery("4", "sponge", "Other"),
    ]
    by_cat = items_by_category(items)
    assert list(by_cat) == list(GROCERY_DISPLAY_ORDER)
    assert [i.id for i in by_cat["Produce"]] == ["2"]
    assert [i.id for i in by_cat["Bakery"]] == ["1"]
    assert [i.id for i in by_cat["Other"]] == ["4", "3"]
    assert by_cat["Dairy"] == []


def test_merge_skips_names_already_on_the_list():
    existing = [grocery("a", "Milk", "Dairy", checked=True)]
    merged = merge_into_list(existing, ["milk", "2 onions", "", "2 Onions"])
    assert [i.name for i in merged] == ["Milk", "2 onions"]
    assert merged[0].checked is True
    assert merged[1].category == "Produce"


def test_toggle_flips_one_item_only():
    items = [grocery("a", "eggs", "Dairy"), grocery("b", "rice", "Pantry", checked=True)]
    toggled = toggle_item(items, "b")
    assert [i.checked for i in toggled] == [False, False]
    assert items[1].checked is True
    assert toggle_item(items, "missing") == items


def test_merge_ingredients_across_recipes():
    a = ParsedRecipe(title="A", ingredients=["1 onion", "Salt"])
    b = ParsedRecipe(title="B", ingredients=["salt ", "2 carrots", ""])
    assert merge_ingredients([a, b]) == ["1 onion", "Salt", "2 carrots"]
