import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    openai_api_key: str = ""

    # "gemini" or "openai"; video analysis always goes through Gemini
    vision_provider: str = "gemini"
    gemini_video_model: str = "gemini-2.5-flash"
    gemini_vision_model: str = "gemini-2.5-flash-lite"
    openai_vision_model: str = "gpt-4o-mini"

    # seconds
    http_timeout: float = 25.0
    ai_timeout: float = 90.0

    database_url: str = "sqlite:///pantrycart.db"
    port: int = 5001

    @property
    def ai_configured(self) -> bool:
        if self.vision_provider == "openai":
            return bool(self.openai_api_key)
        return bool(self.gemini_api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache
def get_settings() -> Settings:
    """Build the cached `Settings` from environment variables."""
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        vision_provider=os.getenv("VISION_PROVIDER", "gemini").strip().lower() or "gemini",
        gemini_video_model=os.getenv("GEMINI_VIDEO_MODEL", "gemini-2.5-flash"),
        gemini_vision_model=os.getenv("GEMINI_VISION_MODEL", "gemini-2.5-flash-lite"),
        openai_vision_model=os.getenv("OPENAI_VISION_MODEL", "gpt-4o-mini"),
        http_timeout=_float_env("HTTP_TIMEOUT", 25.0),
        ai_timeout=_float_env("AI_TIMEOUT", 90.0),
        database_url=os.getenv("DATABASE_URL", "sqlite:///pantrycart.db"),
        port=int(os.getenv("PORT", "5001")),
    )
