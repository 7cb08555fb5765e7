import re
from typing import List, Optional

from pantrycart.schemas.dto import ParsedRecipe

BULLET_RE = re.compile(r"^[-*•]\s*")
QTY_UNIT_RE = re.compile(r"^\d+\s*(cup|tbsp|tsp|oz|lb)")
SPLIT_RE = re.compile(r"[\n,;]")

INGREDIENT_HINTS = (
    "cup", "tbsp", "tsp", "oz", "lb", "clove", "can", "pinch", "slice",
    "chopped", "diced", "minced",
)
STEP_HEADERS = ("instruction", "direction", "step")

MAX_INGREDIENT_LINE = 80
MIN_STEP_LINE = 10


def _looks_like_ingredient(line: str) -> bool:
    lower = line.lower()
    return (
        any(k in lower for k in INGREDIENT_HINTS)
        or bool(QTY_UNIT_RE.match(lower))
        or bool(BULLET_RE.match(line))
    )


def parse_text(text: str) -> Optional[ParsedRecipe]:
    """Best-effort split of pasted recipe text into title, ingredients and steps.

    The first line is the title. A line mentioning "ingredient" starts the
    ingredient section; "instruction", "direction" or "step" starts the steps.
    Outside any section only lines that look like ingredients are kept.
    """
    lines = [s.strip() for s in (text or "").split("\n")]
    lines = [s for s in lines if s]
    if not lines:
        return None

    ingredients: List[str] = []
    steps: List[str] = []
    section = None

    for line in lines[1:]:
        lower = line.lower()
        if "ingredient" in lower:
            section = "ingredients"
            continue
        if any(h in lower for h in STEP_HEADERS):
            section = "steps"
            continue

        looks = _looks_like_ingredient(line)
        if section == "ingredients" and (looks or len(line) < MAX_INGREDIENT_LINE):
            item = BULLET_RE.sub("", line).strip()
            if len(item) > 1:
                ingredients.append(item)
        elif section == "steps" and len(line) > MIN_STEP_LINE:
            steps.append(line)
        elif section is None and looks:
            ingredients.append(BULLET_RE.sub("", line).strip())

    return ParsedRecipe(title=lines[0], ingredients=ingredients, steps=steps, servings=4)


def parse_manual_ingredients(text: str) -> List[str]:
    """Split a typed list on newlines, commas or semicolons."""
    out = []
    for part in SPLIT_RE.split(text or ""):
        item = BULLET_RE.sub("", part.strip())
        if item:
            out.append(item)
    return out
