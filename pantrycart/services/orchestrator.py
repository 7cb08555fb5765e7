"""
Resolve a recipe URL: fetch and scrape the page, then try the AI strategies
in order. Only the page fetch itself is fatal.
"""
import base64
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from pantrycart.config import Settings, get_settings
from pantrycart.errors import (
    AiNotConfiguredError,
    AiRateLimitError,
    AiTransportError,
    ExtractionCancelled,
    PageFetchError,
)
from pantrycart.prompts import PAGE_VISION_PROMPT, VIDEO_PROMPT
from pantrycart.schemas.dto import ParsedRecipe
from pantrycart.services.ai_client import AiClient
from pantrycart.services.ai_interpreter import AiResponseInterpreter, default_interpreter
from pantrycart.services.categories import group_by_aisle
from pantrycart.services.html_extractor import HtmlRecipeExtractor, default_extractor, og_description
from pantrycart.tables import BROWSER_HEADERS, VIDEO_SOCIAL_DOMAINS

logger = logging.getLogger(__name__)

# below this many scraped ingredients the preview image is worth a look
MIN_INGREDIENTS = 5

YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com"}


class CancelToken:
    """Lets a caller abandon a resolve between strategies."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise ExtractionCancelled("extraction cancelled by caller")


def _host(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_video_or_social_url(url: str, domains: Sequence[str] = VIDEO_SOCIAL_DOMAINS) -> bool:
    host = _host(url)
    return any(host == d or host.endswith("." + d) for d in domains)


def is_youtube_url(url: str) -> bool:
    """True for public watch, shorts and youtu.be links, which Gemini accepts as video input."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    host = (parsed.hostname or "").lower()
    if host in YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            return bool(parse_qs(parsed.query).get("v"))
        return parsed.path.startswith("/shorts/") and len(parsed.path) > len("/shorts/")
    if host == "youtu.be":
        return len(parsed.path) > 1
    return False


@dataclass
class PageContext:
    url: str
    html: str
    is_video_or_social: bool
    scraped: ParsedRecipe


@dataclass
class ExtractionResult:
    recipe: ParsedRecipe
    strategy: str
    warnings: List[str] = field(default_factory=list)
    rate_limited: bool = False


Strategy = Tuple[str, Callable[[PageContext], Optional[ParsedRecipe]]]


class ExtractionOrchestrator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        extractor: HtmlRecipeExtractor = default_extractor,
        interpreter: AiResponseInterpreter = default_interpreter,
        ai_client: Optional[AiClient] = None,
        headers: Mapping[str, str] = BROWSER_HEADERS,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.extractor = extractor
        self.interpreter = interpreter
        self.ai_client = ai_client or AiClient(self.settings, session=self.session)
        self.headers = dict(headers)

    # ---------- network ----------

    def fetch_page(self, url: str) -> str:
        try:
            resp = self.session.get(url, headers=self.headers, timeout=self.settings.http_timeout)
        except requests.RequestException as e:
            raise PageFetchError(url, str(e)) from e
        if not resp.ok:
            raise PageFetchError(url, f"HTTP {resp.status_code}")
        return resp.text

    def fetch_image(self, image_url: str) -> Optional[Tuple[str, str]]:
        """Download an image and return (base64, mime type), or None on any failure."""
        try:
            resp = self.session.get(image_url, headers=self.headers, timeout=self.settings.http_timeout)
        except requests.RequestException as e:
            logger.warning("could not fetch preview image %s: %s", image_url[:80], e)
            return None
        if not resp.ok or not resp.content:
            logger.warning("could not fetch preview image %s: HTTP %s", image_url[:80], resp.status_code)
            return None
        mime = (resp.headers.get("Content-Type") or "").split(";")[0].strip()
        if not mime.startswith("image/"):
            mime = "image/jpeg"
        return base64.b64encode(resp.content).decode("ascii"), mime

    # ---------- strategies ----------

    def strategies(self) -> Sequence[Strategy]:
        return (
            ("youtube_video", self._from_video),
            ("preview_image", self._from_preview_image),
        )

    def _from_video(self, page: PageContext) -> Optional[ParsedRecipe]:
        if not self.ai_client.video_configured or not is_youtube_url(page.url):
            return None
        raw = self.ai_client.generate_from_video_url(page.url, VIDEO_PROMPT)
        recipe = self.interpreter.interpret_video_recipe_response(
            raw, fallback_title=page.scraped.title, fallback_image_url=page.scraped.image_url,
        )
        if not recipe.ingredients:
            logger.warning("video analysis returned no ingredients for %s", page.url)
            return None
        return recipe

    def _from_preview_image(self, page: PageContext) -> Optional[ParsedRecipe]:
        scraped = page.scraped
        image_url = scraped.image_url or ""
        if not self.ai_client.configured or not image_url.startswith("http"):
            return None
        if not page.is_video_or_social and len(scraped.ingredients) >= MIN_INGREDIENTS:
            return None

        image = self.fetch_image(image_url)
        if image is None:
            return None
        b64, mime = image
        raw = self.ai_client.generate_from_image(b64, mime, PAGE_VISION_PROMPT, context=og_description(page.html))
        ingredients, steps = self.interpreter.interpret_page_vision_response(raw)
        if not ingredients:
            logger.warning("preview image analysis returned no ingredients for %s", page.url)
            return None

        return scraped.model_copy(update={
            "ingredients": [i.name for i in ingredients],
            "steps": steps or scraped.steps,
            "grocery_by_aisle": group_by_aisle((i.name, i.aisle) for i in ingredients),
        })

    # ---------- entry points ----------

    def resolve(self, url: str, cancel_token: Optional[CancelToken] = None) -> ParsedRecipe:
        return self.resolve_detailed(url, cancel_token).recipe

    def resolve_detailed(self, url: str, cancel_token: Optional[CancelToken] = None) -> ExtractionResult:
        token = cancel_token or CancelToken()
        token.raise_if_cancelled()

        is_video = is_video_or_social_url(url)
        html = self.fetch_page(url)
        scraped = self.extractor.extract(html, is_video)
        page = PageContext(url=url, html=html, is_video_or_social=is_video, scraped=scraped)
        result = ExtractionResult(recipe=scraped, strategy="html")

        for name, strategy in self.strategies():
            token.raise_if_cancelled()
            try:
                recipe = strategy(page)
            except AiNotConfiguredError as e:
                logger.info("strategy %s skipped: %s", name, e)
                continue
            except AiRateLimitError as e:
                logger.warning("strategy %s rate limited: %s", name, e)
                result.rate_limited = True
                result.warnings.append(f"{name}: {AiRateLimitError.user_message}")
                continue
            except AiTransportError as e:
                logger.warning("strategy %s failed: %s", name, e)
                result.warnings.append(f"{name}: {e}")
                continue
            if recipe is not None:
                result.recipe = recipe
                result.strategy = name
                return result

        return result
