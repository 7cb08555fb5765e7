from pantrycart.schemas.dto import KitchenInventoryItem, MatchLevel, RecipeSummary
from pantrycart.services.matcher import FridgeMatcher, match_recipes, sort_matches


def pantry(*names):
    return [KitchenInventoryItem(id=str(i), name=n) for i, n in enumerate(names)]


def recipe(title, *ingredients, id=None):
    return RecipeSummary(id=id, title=title, ingredients=list(ingredients))


def test_scallion_matches_green_onion_by_canonical_name():
    [m] = match_recipes([recipe("Scallion pancakes", "2 scallions, chopped")], pantry("green onion"))
    assert m.matched_count == 1
    assert m.level == MatchLevel.CAN_MAKE
    assert m.missing_ingredients == []


def test_levels_and_missing_list():
    r = recipe(
        "Omelette",
        "3 eggs", "1 tbsp butter", "1/4 cup milk", "salt", "1 cup spinach",
    )
    [m] = match_recipes([r], pantry("eggs", "butter", "whole milk", "table salt"))
    assert m.total_ingredients == 5
    assert m.matched_count == 4
    assert m.score == 0.8
    assert m.level == MatchLevel.ALMOST
    assert m.missing_ingredients == ["1 cup spinach"]


def test_token_overlap_counts_as_a_match():
    [m] = match_recipes([recipe("Soup", "1 lb smoked bacon lardons")], pantry("streaky bacon"))
    assert m.matched_count == 1


def test_short_tokens_do_not_overlap():
    [m] = match_recipes([recipe("Dip", "2 tbsp za spice")], pantry("za mix"))
    assert m.matched_count == 0


def test_substring_match_is_loose():
    # "oil" is contained in "broiler": accepted as a known imprecision
    [m] = match_recipes([recipe("Roast", "1 broiler chicken")], pantry("oil"))
    assert m.matched_count == 1


def test_recipe_without_ingredients_needs_more():
    [m] = match_recipes([recipe("Empty")], pantry("eggs"))
    assert m.level == MatchLevel.NEED_MORE
    assert m.score == 0
    assert m.total_ingredients == 0
    assert m.missing_ingredients == []


def test_empty_pantry_matches_nothing():
    [m] = match_recipes([recipe("Toast", "2 slices bread", "butter")], [])
    assert m.matched_count == 0
    assert m.level == MatchLevel.NEED_MORE
    assert m.missing_ingredients == ["2 slices bread", "butter"]


def test_matched_plus_missing_is_total():
    recipes = [
        recipe("A", "1 cup rice", "2 eggs", "soy sauce", "3 scallions"),
        recipe("B", "1 lb beef", "1 onion"),
        recipe("C", "salt"),
    ]
    for m in match_recipes(recipes, pantry("rice", "spring onions", "salt")):
        assert 0 <= m.score <= 1
        assert m.matched_count + len(m.missing_ingredients) == m.total_ingredients


def test_adding_a_missing_item_never_lowers_the_score():
    r = recipe("Pasta", "200 g spaghetti", "2 cloves garlic", "olive oil", "parmesan")
    before = match_recipes([r], pantry("garlic"))[0]
    assert "parmesan" in before.missing_ingredients
    after = match_recipes([r], pantry("garlic", "parmesan"))[0]
    assert after.score >= before.score
    assert after.matched_count == before.matched_count + 1


def test_threshold_is_tunable():
    r = recipe("Salad", "lettuce", "tomato", "cucumber", "feta")
    strict = FridgeMatcher(almost_threshold=0.9)
    [m] = strict.match([r], pantry("lettuce", "tomato", "cucumber"))
    assert m.score == 0.75
    assert m.level == MatchLevel.NEED_MORE
    [m] = FridgeMatcher(almost_threshold=0.7).match([r], pantry("lettuce", "tomato", "cucumber"))
    assert m.level == MatchLevel.ALMOST


def test_sort_orders_by_level_then_score():
    recipes = [
        recipe("need-low", "a1x", "b2x", "c3x", "d4x", id=1),
        recipe("can", "rice", id=2),
        recipe("need-high", "rice", "zzz1", "zzz2", id=3),
        recipe("almost", "rice", "eggs", "milk", "salt", "qqq", id=4),
    ]
    matches = match_recipes(recipes, pantry("rice", "eggs", "milk", "salt"))
    ordered = [m.recipe.title for m in sort_matches(matches)]
    assert ordered == ["can", "almost", "need-high", "need-low"]
