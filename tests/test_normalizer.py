import pytest

from pantrycart.services.normalizer import IngredientNormalizer, canonical, normalize


def test_quantity_and_unit_are_stripped():
    assert normalize("2 cups all-purpose flour") == "all-purpose flour"
    assert canonical(normalize("2 cups all-purpose flour")) == "flour"


@pytest.mark.parametrize("text,expected", [
    ("1/2 tsp Salt", "salt"),
    ("1 1/2 cups milk", "milk"),
    ("2.5 oz cheddar (grated)", "cheddar"),
    ("1 can of tomatoes", "tomatoes"),
    ("3 cloves garlic", "garlic"),
    ("  Olive   Oil ", "olive oil"),
    ("200 g sugar", "sugar"),
    ("2 eggs", "eggs"),
])
def test_normalize_examples(text, expected):
    assert normalize(text) == expected


def test_unit_words_only_match_whole_words():
    assert normalize("1 pecan pie crust") == "pecan pie crust"
    assert normalize("eggplant") == "eggplant"


@pytest.mark.parametrize("text", [
    "2 cups all-purpose flour",
    "1 1/2 cups of milk (warm)",
    "1 2 3 cups cups of rice",
    "3 slices bread, toasted",
    "",
    "pinch of pinch of salt",
    "1/2 (heaped) tbsp paprika",
])
def test_normalize_is_idempotent(text):
    once = normalize(text)
    assert normalize(once) == once


def test_synonyms_fold_to_one_name():
    assert canonical("green onion") == "scallion"
    assert canonical("spring onions") == "scallion"
    assert canonical("cilantro") == "coriander"
    assert canonical("eggs") == "egg"


def test_preparation_note_after_comma_is_ignored_for_lookup():
    assert canonical(normalize("2 scallions, chopped")) == "scallion"


def test_unknown_names_pass_through():
    assert canonical("gochujang") == "gochujang"
    assert canonical("gochujang, heaped") == "gochujang, heaped"


def test_custom_tables_are_used():
    n = IngredientNormalizer(synonyms={"aubergine": "eggplant"}, unit_words=("handful",))
    assert n.normalize("1 handful of aubergine") == "aubergine"
    assert n.canonical("aubergine") == "eggplant"
    assert n.normalize("2 cups rice") == "cups rice"
