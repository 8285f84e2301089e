import os
from dataclasses import dataclass, field
from typing import List, Optional

BRIEFING_VERSION = "briefing-v1.2"

CATEGORIES = ["politics", "technology", "lifestyle", "business", "cricket"]
RANDOM_CATEGORY = "random"

DEFAULT_MODELS = "gemini-2.0-flash,gemini-1.5-flash,gemini-1.5-flash-8b,gemini-pro"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

TEMPERATURE = 1.0
MAX_OUTPUT_TOKENS = 2048
DEFAULT_COUNT = 3
MAX_COUNT = 10

FEED_PATH = "/rss"
FEED_ITEM_LIMIT = 20


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name) or default
    return [part.strip() for part in raw.split(",") if part.strip()]


def _env_timeout(name: str, default: str) -> Optional[float]:
    val = float(os.getenv(name, default))
    return val if val > 0 else None


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    models: List[str] = field(default_factory=lambda: DEFAULT_MODELS.split(","))
    api_base: str = DEFAULT_API_BASE
    timeout_sec: Optional[float] = 30.0
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    public_base_url: Optional[str] = None
    static_dir: str = "public"
    log_level: str = "INFO"
    sentry_dsn: Optional[str] = None
    debug: bool = False

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)


def load_settings() -> Settings:
    """
    Read settings from the environment. Missing values fall back to defaults,
    a missing GEMINI_API_KEY is allowed here and only fails generation.
    """
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        models=_env_list("GEMINI_MODELS", DEFAULT_MODELS),
        api_base=os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        timeout_sec=_env_timeout("GEMINI_TIMEOUT_SEC", "30"),
        port=int(os.getenv("PORT", "3000")),
        cors_origins=_env_list("CORS_ORIGINS", "*"),
        public_base_url=(os.getenv("PUBLIC_BASE_URL") or "").rstrip("/") or None,
        static_dir=os.getenv("STATIC_DIR", "public"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
        debug=_env_bool("FLASK_DEBUG", False),
    )
