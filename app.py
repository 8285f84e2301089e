import logging
import os
from typing import Optional

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS

from article_cache import ArticleCache
from config import FEED_PATH, Settings, load_settings
from gemini_client import GeminiClient
from news_routes import news_bp
from observability import init_observability

log = logging.getLogger("briefing")


# ==========================
# APP FACTORY
# ==========================
def create_app(
    settings: Optional[Settings] = None,
    cache: Optional[ArticleCache] = None,
    client: Optional[GeminiClient] = None,
) -> Flask:
    settings = settings or load_settings()
    static_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), settings.static_dir)

    app = Flask(__name__, static_folder=static_dir, static_url_path="")

    init_observability(app, settings)
    CORS(app, resources={
        r"/api/*": {"origins": settings.cors_origins},
        FEED_PATH: {"origins": settings.cors_origins},
    })

    app.extensions["briefing"] = {
        "settings": settings,
        "cache": cache if cache is not None else ArticleCache(),
        "client": client or GeminiClient(
            api_key=settings.gemini_api_key,
            models=settings.models,
            base_url=settings.api_base,
            timeout=settings.timeout_sec,
        ),
    }
    app.register_blueprint(news_bp)

    @app.route("/")
    def home():
        if not os.path.isfile(os.path.join(static_dir, "index.html")):
            return jsonify({"error": "index.html not found"}), 404
        return send_from_directory(static_dir, "index.html")

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.extensions["briefing"]["settings"]
    log.info(f"Server running on port {settings.port}")
    log.info(f"Gemini API key {'configured' if settings.gemini_configured else 'missing'}"
             f" (models: {', '.join(settings.models)})")
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)
