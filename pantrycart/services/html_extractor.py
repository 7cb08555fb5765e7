"""Scrape a recipe out of raw HTML. No I/O happens here."""
import json
import logging
import math
import re
from typing import Callable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from pantrycart.schemas.dto import ParsedRecipe

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Recipe"
DEFAULT_SERVINGS = 4
PLACEHOLDER_TITLES = {"youtube", "- youtube"}
MAX_TITLE_LEN = 300
MAX_DESCRIPTION_LEN = 2000

MIN_LIST_ITEMS = 2
MAX_LIST_ITEMS = 50
MIN_ITEM_LEN = 3
MAX_ITEM_LEN = 199

LEADING_INT_RE = re.compile(r"\s*(\d+)")


def clean(s):
    return re.sub(r"\s+", " ", s or "").strip()


def _meta_content(soup: BeautifulSoup, prop: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"property": prop}) or soup.find("meta", attrs={"name": prop})
    if tag and tag.get("content"):
        return tag["content"]
    return None


def og_title(soup: BeautifulSoup) -> Optional[str]:
    raw = clean(_meta_content(soup, "og:title"))
    return raw[:MAX_TITLE_LEN] or None


def og_image(soup: BeautifulSoup) -> Optional[str]:
    raw = (_meta_content(soup, "og:image") or "").strip()
    return raw or None


def og_description(html: str) -> Optional[str]:
    soup = BeautifulSoup(html or "", "html.parser")
    raw = clean(_meta_content(soup, "og:description"))
    return raw[:MAX_DESCRIPTION_LEN] or None


# ---------------- structured data ----------------

def _is_recipe(node) -> bool:
    if not isinstance(node, dict):
        return False
    node_type = node.get("@type")
    if isinstance(node_type, str):
        types = [node_type]
    elif isinstance(node_type, list):
        types = node_type
    else:
        return False
    return any(str(t).lower() == "recipe" for t in types)


def _find_recipe_node(data):
    candidates = []
    if isinstance(data, dict):
        candidates.append(data)
        graph = data.get("@graph")
        if isinstance(graph, list):
            candidates.extend(graph)
    elif isinstance(data, list):
        candidates.extend(data)
    for node in candidates:
        if _is_recipe(node):
            return node
    return None


def _image_from_ld(value) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _ingredients_from_ld(value) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [clean(v) for v in value if isinstance(v, str) and clean(v)]


def _steps_from_ld(value) -> List[str]:
    if isinstance(value, str):
        return [clean(value)] if clean(value) else []
    if not isinstance(value, list):
        return []
    steps = []
    for entry in value:
        if isinstance(entry, str):
            text = clean(entry)
        elif isinstance(entry, dict):
            # HowToSection nests its HowToSteps
            if isinstance(entry.get("itemListElement"), list):
                steps.extend(_steps_from_ld(entry["itemListElement"]))
                continue
            text = clean(entry.get("text") if isinstance(entry.get("text"), str) else "")
        else:
            continue
        if text:
            steps.append(text)
    return steps


def _servings_from_ld(value) -> int:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, bool):
        return DEFAULT_SERVINGS
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return DEFAULT_SERVINGS
        n = int(value)
        return n if n > 0 else DEFAULT_SERVINGS
    if isinstance(value, str):
        m = LEADING_INT_RE.match(value)
        if m and int(m.group(1)) > 0:
            return int(m.group(1))
    return DEFAULT_SERVINGS


def structured_data(soup: BeautifulSoup, fallback_title: str, fallback_image: Optional[str]) -> Optional[ParsedRecipe]:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw.strip())
        except (ValueError, RecursionError):
            logger.debug("skipping malformed ld+json block")
            continue
        node = _find_recipe_node(data)
        if node is None:
            continue
        name = node.get("name")
        return ParsedRecipe(
            title=clean(name) if isinstance(name, str) and clean(name) else fallback_title,
            image_url=_image_from_ld(node.get("image")) or fallback_image,
            ingredients=_ingredients_from_ld(node.get("recipeIngredient")),
            steps=_steps_from_ld(node.get("recipeInstructions")),
            servings=_servings_from_ld(node.get("recipeYield")),
        )
    return None


# ---------------- page metadata ----------------

def page_title(soup: BeautifulSoup) -> str:
    title = clean(soup.title.get_text()) if soup.title else ""
    social = og_title(soup)
    if social and (not title or title.lower() in PLACEHOLDER_TITLES or len(title) < 3):
        title = social
    return title or DEFAULT_TITLE


# ---------------- list heuristic ----------------

def list_items(soup: BeautifulSoup) -> List[str]:
    for ul in soup.find_all("ul"):
        items = ul.find_all("li", recursive=False)
        if not (MIN_LIST_ITEMS <= len(items) <= MAX_LIST_ITEMS):
            continue
        texts = [clean(li.get_text()) for li in items]
        kept = [t for t in texts if MIN_ITEM_LEN <= len(t) <= MAX_ITEM_LEN]
        if kept:
            return kept
    return []


Strategy = Tuple[str, Callable[..., Optional[ParsedRecipe]]]


class HtmlRecipeExtractor:
    def extract(self, html: str, is_video_or_social: bool = False) -> ParsedRecipe:
        soup = BeautifulSoup(html or "", "html.parser")
        title = page_title(soup)
        image = og_image(soup)

        for name, strategy in self.strategies(is_video_or_social):
            recipe = strategy(soup, title, image)
            if recipe is not None:
                logger.debug("html strategy %s matched", name)
                return recipe

        return ParsedRecipe(title=title, image_url=image, servings=DEFAULT_SERVINGS)

    def strategies(self, is_video_or_social: bool) -> Sequence[Strategy]:
        chain: List[Strategy] = [("structured_data", structured_data)]
        if not is_video_or_social:
            chain.append(("list_heuristic", self._from_lists))
        return chain

    @staticmethod
    def _from_lists(soup, title, image) -> Optional[ParsedRecipe]:
        ingredients = list_items(soup)
        if not ingredients:
            return None
        return ParsedRecipe(title=title, image_url=image, ingredients=ingredients, servings=DEFAULT_SERVINGS)


default_extractor = HtmlRecipeExtractor()


def extract(html: str, is_video_or_social: bool = False) -> ParsedRecipe:
    return default_extractor.extract(html, is_video_or_social)
