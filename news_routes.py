"""
news_routes.py — The Briefing HTTP routes.

Routes:
  POST /api/generate-news  — generate a batch with Gemini (model fallback)
  POST /api/update-news    — replace the cached batch
  GET  /api/news           — read the cached batch
  GET  /rss                — RSS 2.0 feed of the first 20 cached articles
  GET  /health             — liveness + config summary

The cache, client and settings live in app.extensions["briefing"]; see
app.create_app.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from config import BRIEFING_VERSION, DEFAULT_COUNT, FEED_PATH, MAX_COUNT
from errors import AggregateFailure, ConfigurationError
from observability import log_event
from rss_feed import render_feed

log = logging.getLogger("briefing.routes")

news_bp = Blueprint("news", __name__)


def _state() -> Dict[str, Any]:
    return current_app.extensions["briefing"]


def _parse_count(raw: Any) -> Tuple[Optional[int], Optional[str]]:
    if raw is None:
        return DEFAULT_COUNT, None
    if isinstance(raw, bool):
        return None, "'count' must be a positive integer"
    if isinstance(raw, float) and not raw.is_integer():
        return None, "'count' must be a positive integer"
    try:
        count = int(raw)
    except (TypeError, ValueError):
        return None, "'count' must be a positive integer"
    if count < 1:
        return None, "'count' must be a positive integer"
    if count > MAX_COUNT:
        log.info(f"[GENERATE] count {count} capped at {MAX_COUNT}")
        return MAX_COUNT, None
    return count, None


def _feed_base_url() -> str:
    settings = _state()["settings"]
    return settings.public_base_url or request.host_url.rstrip("/")


@news_bp.route("/health")
def health():
    state = _state()
    return jsonify({
        "status": "ok",
        "version": BRIEFING_VERSION,
        "gemini_configured": state["client"].configured,
        "models": state["client"].models,
        "cached_articles": len(state["cache"]),
    })


@news_bp.route("/api/generate-news", methods=["POST"])
def generate_news():
    state = _state()
    client = state["client"]
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    count, err = _parse_count(payload.get("count"))
    if err:
        return jsonify({"error": err}), 400

    category = payload.get("category")
    if not isinstance(category, str) or not category.strip():
        return jsonify({"error": "Missing 'category' parameter"}), 400
    category = category.strip()

    t0 = time.time()
    try:
        result = client.generate(category, count)
    except ConfigurationError as e:
        log.error(f"[GENERATE] {e}")
        return jsonify({"error": "Gemini API key not configured"}), 503
    except AggregateFailure as e:
        log_event("generate_failed", {
            "category": category,
            "count": count,
            "attempts": e.attempts,
            "latency_ms": int((time.time() - t0) * 1000),
        })
        return jsonify({
            "error": "Failed to generate news",
            "details": str(e),
            "attempts": e.attempts,
        }), 500

    log_event("generate_ok", {
        "category": result.category,
        "count": len(result.articles),
        "model": result.model,
        "failed_attempts": len(result.failed_attempts),
        "latency_ms": int((time.time() - t0) * 1000),
    })
    return jsonify(result.articles)


@news_bp.route("/api/update-news", methods=["POST"])
def update_news():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    articles = payload.get("articles")

    if articles is not None:
        if not isinstance(articles, list):
            return jsonify({"error": "'articles' must be an array"}), 400
        if any(not isinstance(a, dict) for a in articles):
            return jsonify({"error": "Every article must be an object"}), 400

    count = _state()["cache"].replace(articles)
    log.info(f"[CACHE] Replaced cached batch ({count} articles)")
    return jsonify({"success": True, "count": count})


@news_bp.route("/api/news", methods=["GET"])
def get_news():
    return jsonify(_state()["cache"].read_all())


@news_bp.route(FEED_PATH, methods=["GET"])
def rss_feed():
    xml = render_feed(_state()["cache"].read_all(), _feed_base_url())
    return Response(xml, mimetype="application/rss+xml")
