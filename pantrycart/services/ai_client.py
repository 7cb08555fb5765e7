import logging
from typing import Any, Dict, List, Optional

import openai
import requests
from openai import OpenAI

from pantrycart.config import Settings, get_settings
from pantrycart.errors import AiNotConfiguredError, AiRateLimitError, AiTransportError
from pantrycart.prompts import page_context

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def _gemini_text(data: Dict[str, Any]) -> str:
    try:
        return (data["candidates"][0]["content"]["parts"][0].get("text") or "").strip()
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


class AiClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        openai_client: Optional[OpenAI] = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self._openai = openai_client

    @property
    def configured(self) -> bool:
        return self.settings.ai_configured

    @property
    def video_configured(self) -> bool:
        return bool(self.settings.gemini_api_key)

    # ---------- public ----------

    def generate_from_image(
        self,
        image_b64: str,
        mime_type: str,
        prompt: str,
        context: Optional[str] = None,
    ) -> str:
        if self.settings.vision_provider == "openai":
            return self._openai_image(image_b64, mime_type, prompt, context)

        parts: List[Dict[str, Any]] = [{"inline_data": {"mime_type": mime_type, "data": image_b64}}]
        if context and context.strip():
            parts.append({"text": page_context(context)})
        parts.append({"text": prompt})
        return self._gemini(self.settings.gemini_vision_model, parts, max_tokens=4096)

    def generate_from_video_url(self, video_url: str, prompt: str) -> str:
        # the video part goes first, then the prompt
        parts = [
            {"file_data": {"file_uri": video_url}},
            {"text": prompt},
        ]
        return self._gemini(self.settings.gemini_video_model, parts, max_tokens=4096)

    # ---------- providers ----------

    def _gemini(self, model: str, parts: List[Dict[str, Any]], max_tokens: int) -> str:
        key = self.settings.gemini_api_key
        if not key:
            raise AiNotConfiguredError("GEMINI_API_KEY is not set")

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": 0.2,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            },
        }
        try:
            resp = self.session.post(
                GEMINI_URL.format(model=model),
                params={"key": key},
                json=body,
                timeout=self.settings.ai_timeout,
            )
        except requests.RequestException as e:
            raise AiTransportError(f"Gemini request failed: {e}") from e

        if resp.status_code == 429:
            raise AiRateLimitError(f"Gemini quota exceeded ({model})")
        if not resp.ok:
            raise AiTransportError(f"Gemini API error: {resp.status_code} {resp.text[:200]}", resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise AiTransportError("Gemini returned a non-JSON body") from e

        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            raise AiTransportError(f"Gemini API error: {data['error'].get('message', 'unknown')}")

        text = _gemini_text(data)
        if not text:
            finish = None
            if isinstance(data, dict) and data.get("candidates"):
                finish = data["candidates"][0].get("finishReason")
            logger.warning("Gemini returned empty text (model=%s, finishReason=%s)", model, finish)
        return text

    def _openai_client(self) -> OpenAI:
        if self._openai is None:
            if not self.settings.openai_api_key:
                raise AiNotConfiguredError("OPENAI_API_KEY is not set")
            self._openai = OpenAI(api_key=self.settings.openai_api_key, timeout=self.settings.ai_timeout)
        return self._openai

    def _openai_image(self, image_b64: str, mime_type: str, prompt: str, context: Optional[str]) -> str:
        client = self._openai_client()
        content: List[Dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{image_b64}", "detail": "low"}},
        ]
        if context and context.strip():
            content.append({"type": "text", "text": page_context(context)})
        content.append({"type": "text", "text": prompt})

        try:
            completion = client.chat.completions.create(
                model=self.settings.openai_vision_model,
                max_tokens=1024,
                messages=[{"role": "user", "content": content}],
            )
        except openai.RateLimitError as e:
            raise AiRateLimitError(f"OpenAI quota exceeded: {e}") from e
        except openai.APIError as e:
            raise AiTransportError(f"OpenAI API error: {e}", getattr(e, "status_code", None)) from e

        return (completion.choices[0].message.content or "").strip()
