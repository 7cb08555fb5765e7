import json

import pytest

from pantrycart.schemas.dto import Aisle, DetectedGroceryItem
from pantrycart.services.ai_interpreter import (
    AiResponseInterpreter,
    extract_json_text,
    load_json_payload,
    merge_detections,
    parse_servings,
)

interpreter = AiResponseInterpreter()


def test_prose_and_code_fence_are_discarded():
    raw = 'Here you go:\n```json\n{"ingredients":[{"name":"tomato","aisle":"Produce"}]}\n```'
    ingredients, steps = interpreter.interpret_page_vision_response(raw)
    assert [(i.name, i.aisle) for i in ingredients] == [("tomato", Aisle.PRODUCE)]
    assert steps == []


def test_matching_brace_is_found_through_nesting():
    payload = {"a": {"b": [1, {"c": "}"}]}, "d": "x{y"}
    raw = "noise " + json.dumps(payload) + " trailing } junk {"
    assert json.loads(extract_json_text(raw)) == payload


def test_array_payload_is_extracted():
    assert extract_json_text('list: ["a", ["b"]] done') == '["a", ["b"]]'


def test_unparseable_text_gives_empty_results():
    for raw in ["", "no json here", '{"ingredients": [', "{'single': 'quotes'}"]:
        assert load_json_payload(raw) is None
        assert interpreter.interpret_vision_response(raw) == []
        assert interpreter.interpret_page_vision_response(raw) == ([], [])
        recipe = interpreter.interpret_video_recipe_response(raw, fallback_title="From video")
        assert recipe.title == "From video"
        assert recipe.ingredients == []
        assert recipe.steps == []


def test_unknown_shape_is_empty():
    assert interpreter.interpret_vision_response('{"items": [{"name": "egg"}]}') == []
    assert interpreter.interpret_vision_response('{"ingredients": "egg, milk"}') == []
    assert interpreter.interpret_vision_response("42") == []


def test_video_recipe_lines_and_dedupe():
    raw = json.dumps({
        "title": "  Garlic Noodles ",
        "servings": "serves 3 people",
        "cookingTime": "20 minutes",
        "ingredients": [
            {"name": "spaghetti", "quantity": "200 g"},
            {"name": "garlic", "quantity": "4 cloves", "notes": "minced"},
            "butter",
            {"name": "Spaghetti", "quantity": "200 G"},
            {"name": "", "quantity": "1 cup"},
            {"quantity": "2 tbsp"},
            {"name": "parmesan", "notes": "grated"},
        ],
        "instructions": ["Boil pasta.", 7, "Toss with garlic butter."],
        "equipment": ["pot", None, "pan"],
    })
    recipe = interpreter.interpret_video_recipe_response(raw, fallback_image_url="https://img/x.jpg")
    assert recipe.title == "Garlic Noodles"
    assert recipe.ingredients == [
        "200 g spaghetti",
        "4 cloves garlic (minced)",
        "butter",
        "parmesan (grated)",
    ]
    assert recipe.steps == ["Boil pasta.", "Toss with garlic butter."]
    assert recipe.servings == 3
    assert recipe.image_url == "https://img/x.jpg"
    assert recipe.cooking_time == "20 minutes"
    assert recipe.equipment == ["pot", "pan"]


def test_dedupe_uses_full_line_not_bare_name():
    raw = json.dumps({"ingredients": [
        {"name": "sugar", "quantity": "1 cup"},
        {"name": "sugar", "quantity": "2 tbsp"},
    ]})
    recipe = interpreter.interpret_video_recipe_response(raw)
    assert recipe.ingredients == ["1 cup sugar", "2 tbsp sugar"]


def test_steps_fall_back_to_steps_field_and_are_capped():
    raw = json.dumps({"ingredients": ["egg"], "steps": [f"step {i}" for i in range(80)]})
    assert len(interpreter.interpret_video_recipe_response(raw).steps) == 50
    _, steps = interpreter.interpret_page_vision_response(raw)
    assert len(steps) == 30


@pytest.mark.parametrize("value,expected", [
    ("4 servings", 4),
    ("makes 12 cookies", 12),
    (6, 6),
    ("0", 4),
    ("a few", 4),
    (None, 4),
])
def test_parse_servings(value, expected):
    assert parse_servings(value) == expected


def test_vision_items_use_model_aisle_or_keywords():
    raw = json.dumps({"ingredients": [
        {"name": "tofu", "aisle": "dairy"},
        {"name": "chicken breast", "category": "Poultry"},
        {"name": "olive oil", "quantity": "2 tbsp"},
    ]})
    items = interpreter.interpret_vision_response(raw)
    assert [(i.name, i.category) for i in items] == [
        ("tofu", Aisle.DAIRY),
        ("chicken breast", Aisle.MEAT),
        ("2 tbsp olive oil", Aisle.PANTRY),
    ]
    assert all(i.confidence == 0.9 and not i.checked for i in items)
    assert len({i.id for i in items}) == 3


def test_legacy_array_with_confidence():
    raw = '[{"name": "Lemon", "confidence": 0.55}, {"name": "basil", "confidence": 7}, {"name": "lemon"}]'
    items = interpreter.interpret_vision_response(raw)
    assert [(i.name, i.confidence) for i in items] == [("Lemon", 0.55), ("basil", 0.8)]


def item(name, confidence):
    return DetectedGroceryItem(id=name + str(confidence), name=name, category=Aisle.OTHER, confidence=confidence)


def test_merge_keeps_highest_confidence():
    merged = merge_detections([
        [item("Egg", 0.6), item("milk", 0.9)],
        [item(" egg ", 0.8), item("Milk", 0.5)],
    ])
    assert [(m.name, m.confidence) for m in merged] == [(" egg ", 0.8), ("milk", 0.9)]


def test_merge_prefers_entry_with_confidence():
    merged = merge_detections([[item("salt", None)], [item("Salt", 0.3)], [item("SALT", None)]])
    assert [(m.name, m.confidence) for m in merged] == [("Salt", 0.3)]


def test_merge_first_seen_wins_without_confidence():
    merged = merge_detections([[item("pepper", None)], [item("Pepper", None)], [item("  ", 0.9)]])
    assert [m.name for m in merged] == ["pepper"]


def test_deeply_nested_answer_is_treated_as_unparseable():
    nested = "[" * 100000 + "]" * 100000
    assert load_json_payload(nested) is None
    assert interpreter.interpret_vision_response(nested) == []
    recipe = interpreter.interpret_video_recipe_response('{"ingredients": ' + nested + "}", fallback_title="Clip")
    assert recipe.title == "Clip"
    assert recipe.ingredients == []


def test_backticks_inside_values_survive():
    raw = '```json\n{"ingredients": [{"name": "rice", "notes": "rinse ```twice```"}]}\n```\nEnjoy!'
    recipe = interpreter.interpret_video_recipe_response(raw)
    assert recipe.ingredients == ["rice (rinse ```twice```)"]


def test_trailing_fence_after_unterminated_payload_is_dropped():
    assert extract_json_text('```json\n{"ingredients": ["egg"]\n```') == '{"ingredients": ["egg"]'
