from pantrycart.services.text_parser import parse_manual_ingredients, parse_text

PASTED = """Lemon Pasta
Ingredients
- 200 g spaghetti
- 1 lemon
2 tbsp butter
Instructions
Boil the pasta until al dente.
Stir.
Toss with lemon and butter.
"""


def test_sections_split_ingredients_and_steps():
    recipe = parse_text(PASTED)
    assert recipe.title == "Lemon Pasta"
    assert recipe.ingredients == ["200 g spaghetti", "1 lemon", "2 tbsp butter"]
    # very short lines in the steps section are noise
    assert recipe.steps == ["Boil the pasta until al dente.", "Toss with lemon and butter."]
    assert recipe.servings == 4


def test_without_headers_only_ingredient_like_lines_are_kept():
    recipe = parse_text("Quick Salad\n1 cup lettuce\nWash everything well\n2 tomatoes, diced")
    assert recipe.ingredients == ["1 cup lettuce", "2 tomatoes, diced"]
    assert recipe.steps == []


def test_blank_text_is_nothing():
    assert parse_text("") is None
    assert parse_text("  \n\n  ") is None


def test_title_only():
    recipe = parse_text("Toast\n")
    assert recipe.title == "Toast"
    assert recipe.ingredients == []


def test_manual_ingredients_split_on_separators():
    assert parse_manual_ingredients("eggs, milk\n- flour; ; sugar") == ["eggs", "milk", "flour", "sugar"]
    assert parse_manual_ingredients("") == []
