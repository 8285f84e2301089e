"""
observability.py — logging, error tracking and request timing
==============================================================
Covers: stdlib logging setup, Sentry error tracking (when SENTRY_DSN is set),
        per-request trace id + latency headers, slow request events.

Setup in app.py:
    from observability import init_observability
    init_observability(app, settings)
"""

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from flask import g, request

import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration

from config import BRIEFING_VERSION, Settings

SLOW_REQUEST_MS = 1000


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_event(event: str, payload: Dict[str, Any]) -> None:
    """One JSON line per event on stdout."""
    record = {"event": event, "ts": utc_now_iso(), **payload}
    print(json.dumps(record, ensure_ascii=False), flush=True)


def init_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s %(message)s")


def init_observability(app, settings: Settings) -> None:
    """Initialize logging, Sentry and timing hooks. Call once per app."""
    init_logging(settings.log_level)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            release=BRIEFING_VERSION,
        )
        logging.getLogger("briefing").info("[OBS] Sentry initialized")

    @app.before_request
    def _start_timer():
        g.start_time = time.time()
        g.trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4())[:16])

    @app.after_request
    def _record_timing(response):
        if hasattr(g, "start_time"):
            latency = (time.time() - g.start_time) * 1000
            response.headers["X-Response-Time-Ms"] = str(int(latency))
            response.headers["X-Trace-Id"] = getattr(g, "trace_id", "")

            if latency > SLOW_REQUEST_MS:
                log_event("slow_request", {
                    "path": request.path,
                    "method": request.method,
                    "latency_ms": int(latency),
                    "status": response.status_code,
                    "trace_id": getattr(g, "trace_id", ""),
                })
        return response
