"""
gemini_client.py — satirical news generation against Gemini with model fallback.

One prompt is built per request and sent to each model in the configured
order until one returns text that contains a JSON article array. Attempts
are strictly sequential and each model is tried once.

Usage:
    client = GeminiClient(api_key=settings.gemini_api_key, models=settings.models)
    result = client.generate("random", count=3)
    result.articles  # list of dicts with synthetic ids
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from config import (
    CATEGORIES,
    DEFAULT_API_BASE,
    DEFAULT_COUNT,
    MAX_OUTPUT_TOKENS,
    RANDOM_CATEGORY,
    TEMPERATURE,
)
from errors import AggregateFailure, ConfigurationError, ExtractionError, UpstreamCallError
from news_extractor import extract_articles

log = logging.getLogger("briefing.gemini")

PROMPT_TEMPLATE = """Generate {count} satirical news headlines in The Onion style, focused on India.
Category: {category}

Each article should be absurd, funny, and exaggerated but grounded in Indian context (cities, culture, work life, etc.).

Return ONLY a JSON array with this exact structure:
[
  {{
    "category": "{category}",
    "headline": "Funny satirical headline",
    "summary": "One sentence summary of the absurd story",
    "author": "Indian name",
    "date": "{date}"
  }}
]

Make sure headlines are witty and reference Indian culture, cities, daily life, or current trends. Be creative and absurd!"""


def resolve_category(category: Optional[str], rng: Any = random) -> str:
    """Map the 'random' sentinel onto one of the fixed categories."""
    if category == RANDOM_CATEGORY:
        return rng.choice(CATEGORIES)
    return category


def build_prompt(category: str, count: int, date_label: Optional[str] = None) -> str:
    if date_label is None:
        date_label = time.strftime("%b %d, %Y")
    return PROMPT_TEMPLATE.format(count=count, category=category, date=date_label)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class GenerationResult:
    articles: List[Dict[str, Any]]
    model: str
    category: str
    failed_attempts: List[Dict[str, Any]] = field(default_factory=list)


class GeminiClient:
    """
    Thin requests-based client for the generateContent endpoint.

    `session` only needs a requests-compatible `post`; tests pass a fake.
    `timeout` is the per-attempt deadline, None waits indefinitely.
    """

    def __init__(
        self,
        api_key: Optional[str],
        models: Sequence[str],
        base_url: str = DEFAULT_API_BASE,
        timeout: Optional[float] = 30.0,
        session: Any = None,
        clock: Callable[[], int] = now_ms,
        rng: Any = random,
    ):
        self.api_key = api_key
        self.models = list(models)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.clock = clock
        self.rng = rng

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    def generate_content(self, model: str, prompt: str) -> str:
        """Single upstream call. Returns the first candidate's text."""
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }
        try:
            resp = self.session.post(
                self.endpoint(model),
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamCallError(model, f"transport error: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not resp.ok:
            message = None
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                message = data["error"].get("message")
            raise UpstreamCallError(model, message or f"Gemini API error (HTTP {resp.status_code})", status=resp.status_code)

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamCallError(model, f"response has no candidate text ({e!r})", status=resp.status_code) from e
        if not isinstance(text, str):
            raise UpstreamCallError(model, "candidate text is not a string", status=resp.status_code)
        return text

    def generate(
        self,
        category: Optional[str],
        count: int = DEFAULT_COUNT,
        models: Optional[Sequence[str]] = None,
    ) -> GenerationResult:
        if not self.configured:
            raise ConfigurationError("Gemini API key not configured")

        selected = resolve_category(category, self.rng)
        prompt = build_prompt(selected, count)
        model_list = list(models) if models is not None else self.models
        failed: List[Dict[str, Any]] = []

        for model in model_list:
            t0 = time.time()
            try:
                text = self.generate_content(model, prompt)
                parsed = extract_articles(text)
                articles = self._assign_ids(parsed)
            except (UpstreamCallError, ExtractionError) as e:
                reason = e.reason if isinstance(e, UpstreamCallError) else str(e)
                log.warning(f"[GEMINI] {model} failed after {int((time.time() - t0) * 1000)}ms: {reason}")
                failed.append({"model": model, "error": reason, "kind": type(e).__name__})
                continue

            log.info(f"[GEMINI] {model} produced {len(articles)} articles for '{selected}'"
                     f" ({len(failed)} earlier attempts failed)")
            return GenerationResult(articles=articles, model=model, category=selected, failed_attempts=failed)

        log.error(f"[GEMINI] All {len(failed)} models failed for '{selected}'")
        raise AggregateFailure(failed)

    def _assign_ids(self, parsed: List[Any]) -> List[Dict[str, Any]]:
        base = self.clock()
        out = []
        for index, item in enumerate(parsed):
            if not isinstance(item, dict):
                raise ExtractionError(f"Array item {index} is not an object")
            out.append({**item, "id": base + index})
        return out
