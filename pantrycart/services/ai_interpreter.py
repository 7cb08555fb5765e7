"""
Turn free-text model output into recipes and grocery items. Unparseable
answers give empty results, never exceptions.
"""
import json
import logging
import re
import uuid
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pantrycart.schemas.dto import AisleIngredient, DetectedGroceryItem, ParsedRecipe
from pantrycart.services.categories import AisleCategorizer, default_categorizer

logger = logging.getLogger(__name__)

MAX_VISION_STEPS = 30
MAX_VIDEO_STEPS = 50
DEFAULT_SERVINGS = 4
RECIPE_OBJECT_CONFIDENCE = 0.9
LEGACY_DEFAULT_CONFIDENCE = 0.8

TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")
DIGITS_RE = re.compile(r"\d+")

_CLOSERS = {"{": "}", "[": "]"}


def extract_json_text(raw: str) -> Optional[str]:
    """Cut the first balanced JSON object or array out of `raw`.

    Depth is tracked across both brace kinds and string literals are skipped,
    so nested payloads and "}" or ``` inside values are handled. Prose and
    fences outside the payload are dropped; an unterminated payload runs to
    the end of the text.
    """
    if not raw:
        return None
    text = raw
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)

    stack = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in "}]":
            if not stack or stack[-1] != ch:
                break
            stack.pop()
            if not stack:
                return text[start:i + 1]
    return TRAILING_FENCE_RE.sub("", text[start:]).strip()


def load_json_payload(raw: str) -> Any:
    fragment = extract_json_text(raw)
    if fragment is None:
        return None
    try:
        return json.loads(fragment)
    except (ValueError, RecursionError) as exc:
        logger.warning("model returned unparseable JSON: %s", exc)
        return None


# ---------------- ingredient entries ----------------

def _text(value) -> str:
    if value is None or isinstance(value, (dict, list, bool)):
        return ""
    return str(value).strip()


def ingredient_line(entry) -> Tuple[str, str]:
    """Return (display line, bare name); both empty when the entry has no name."""
    if isinstance(entry, str):
        name = entry.strip()
        return name, name
    if not isinstance(entry, dict):
        return "", ""
    name = _text(entry.get("name"))
    if not name:
        return "", ""
    quantity = _text(entry.get("quantity"))
    notes = _text(entry.get("notes"))
    line = " ".join(p for p in (quantity, name) if p)
    if notes:
        line += f" ({notes})"
    return line, name


def _confidence(entry, default: float) -> float:
    value = entry.get("confidence") if isinstance(entry, dict) else None
    if isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 1:
        return float(value)
    return default


def _suggested_aisle(entry):
    if not isinstance(entry, dict):
        return None
    return entry.get("aisle") or entry.get("category")


def _dedupe(entries: Iterable[Tuple[str, Any]]) -> List[Tuple[str, Any]]:
    seen = set()
    out = []
    for line, extra in entries:
        key = line.lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append((line, extra))
    return out


def _string_steps(payload: dict, cap: int) -> List[str]:
    for field in ("instructions", "steps"):
        value = payload.get(field)
        if isinstance(value, list):
            return [s for s in value if isinstance(s, str)][:cap]
    return []


def parse_servings(value) -> int:
    if value is None or isinstance(value, bool):
        return DEFAULT_SERVINGS
    m = DIGITS_RE.search(str(value))
    if not m:
        return DEFAULT_SERVINGS
    n = int(m.group(0))
    return n if n > 0 else DEFAULT_SERVINGS


# ---------------- payload variants ----------------
#
# Each decoder returns None when the payload is not its shape. They are tried
# in order and the first hit wins; a payload no decoder recognizes is empty.

def _decode_recipe_object(payload) -> Optional[Tuple[list, dict]]:
    if isinstance(payload, dict) and isinstance(payload.get("ingredients"), list):
        return payload["ingredients"], payload
    return None


def _decode_ingredient_array(payload) -> Optional[Tuple[list, dict]]:
    if isinstance(payload, list):
        return payload, {}
    return None


VARIANTS = (
    ("recipe_object", _decode_recipe_object),
    ("ingredient_array", _decode_ingredient_array),
)


def decode_payload(payload) -> Tuple[Optional[str], list, dict]:
    for name, decoder in VARIANTS:
        hit = decoder(payload)
        if hit is not None:
            return name, hit[0], hit[1]
    return None, [], {}


class AiResponseInterpreter:
    def __init__(self, categorizer: AisleCategorizer = default_categorizer):
        self.categorizer = categorizer

    def interpret_vision_response(self, raw_text: str) -> List[DetectedGroceryItem]:
        """Grocery items detected in one image or video frame."""
        variant, entries, _ = decode_payload(load_json_payload(raw_text))
        if variant is None:
            return []
        default_conf = RECIPE_OBJECT_CONFIDENCE if variant == "recipe_object" else LEGACY_DEFAULT_CONFIDENCE

        rows = []
        for entry in entries:
            line, name = ingredient_line(entry)
            if not line:
                continue
            rows.append((line, (name, _suggested_aisle(entry), _confidence(entry, default_conf))))

        return [
            DetectedGroceryItem(
                id=uuid.uuid4().hex,
                name=line,
                category=self.categorizer.resolve(name, suggested),
                checked=False,
                confidence=conf,
            )
            for line, (name, suggested, conf) in _dedupe(rows)
        ]

    def interpret_page_vision_response(self, raw_text: str) -> Tuple[List[AisleIngredient], List[str]]:
        """Ingredients (with aisle) and steps read from a page preview image."""
        variant, entries, payload = decode_payload(load_json_payload(raw_text))
        if variant is None:
            return [], []

        rows = []
        for entry in entries:
            line, name = ingredient_line(entry)
            if not line:
                continue
            rows.append((line, self.categorizer.resolve(name, _suggested_aisle(entry))))

        ingredients = [AisleIngredient(name=line, aisle=aisle) for line, aisle in _dedupe(rows)]
        return ingredients, _string_steps(payload, MAX_VISION_STEPS)

    def interpret_video_recipe_response(
        self,
        raw_text: str,
        fallback_title: str = "Untitled Recipe",
        fallback_image_url: Optional[str] = None,
    ) -> ParsedRecipe:
        payload = load_json_payload(raw_text)
        variant, entries, fields = decode_payload(payload)
        if variant is None:
            return ParsedRecipe(title=fallback_title, image_url=fallback_image_url)

        lines = _dedupe((ingredient_line(e)[0], None) for e in entries)
        equipment = fields.get("equipment")
        if isinstance(equipment, list):
            equipment = [e for e in equipment if isinstance(e, str)] or None
        else:
            equipment = None
        return ParsedRecipe(
            title=_text(fields.get("title")) or fallback_title,
            image_url=fallback_image_url,
            ingredients=[line for line, _ in lines],
            steps=_string_steps(fields, MAX_VIDEO_STEPS),
            servings=parse_servings(fields.get("servings")),
            grocery_by_aisle=[],
            cooking_time=_text(fields.get("cookingTime")) or None,
            prep_time=_text(fields.get("prepTime")) or None,
            temperature=_text(fields.get("temperature")) or None,
            notes=_text(fields.get("notes")) or None,
            equipment=equipment,
        )


def merge_detections(lists: Sequence[Sequence[DetectedGroceryItem]]) -> List[DetectedGroceryItem]:
    """Combine per-frame detections, keeping the most confident entry per name.

    An entry with a confidence replaces one without; when neither or only the
    incumbent has one, the first seen stays.
    """
    by_key = {}
    for items in lists:
        for item in items:
            key = item.name.lower().strip()
            if not key:
                continue
            current = by_key.get(key)
            if current is None:
                by_key[key] = item
            elif item.confidence is not None and (
                current.confidence is None or item.confidence > current.confidence
            ):
                by_key[key] = item
    return list(by_key.values())


default_interpreter = AiResponseInterpreter()
