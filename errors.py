from typing import Any, Dict, List, Optional


class BriefingError(Exception):
    """Base class for errors raised by the news generation core."""


class ConfigurationError(BriefingError):
    """Raised when the upstream credential is missing."""


class UpstreamCallError(BriefingError):
    """One attempt against one model failed: transport error, non-2xx, or an unusable body."""

    def __init__(self, model: str, reason: str, status: Optional[int] = None):
        super().__init__(f"{model}: {reason}")
        self.model = model
        self.reason = reason
        self.status = status


class ExtractionError(BriefingError):
    """Raised when generated text does not contain a JSON array."""


class AggregateFailure(BriefingError):
    """Every model in the fallback list failed."""

    def __init__(self, attempts: List[Dict[str, Any]]):
        models = ", ".join(a["model"] for a in attempts) or "none"
        super().__init__(f"All {len(attempts)} model attempts failed ({models})")
        self.attempts = attempts
