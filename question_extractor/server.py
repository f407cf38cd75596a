"""
HTTP Microservice
=================
Flask-based HTTP API for the question extraction engine.

The caller has already turned the binary upload into text and
authenticated the user; this service trusts a pre-validated bearer token
(checked by the configurable AUTH_VERIFIER) and returns structured
questions ready for review.

Endpoints:
    POST   /api/extract-questions   → Extract questions from document text
    GET    /api/health              → Health check
    GET    /api/info                → Extractor version info
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from . import __version__
from .engine import ExtractionEngine, ExtractorConfig
from .exceptions import AuthenticationError, ExtractionError, InputValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Erro na extração. Tente novamente."
TOO_LARGE_MESSAGE = "Texto muito grande. Máximo 2MB."

app = Flask(__name__)
CORS(app)


def _accept_any_token(token: str) -> bool:
    """Default verifier: the upstream gateway already validated the token."""
    return bool(token.strip())


def create_app(
    config: Optional[dict] = None,
    extractor_config: Optional[ExtractorConfig] = None,
) -> Flask:
    """Create and configure the Flask app."""
    if config:
        app.config.update(config)

    # Body holds up to 2M chars of text plus JSON framing
    if app.config.get("MAX_CONTENT_LENGTH") is None:
        app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024
    app.config["AUTH_VERIFIER"] = (config or {}).get(
        "AUTH_VERIFIER", _accept_any_token
    )

    app.extensions["question_extractor"] = ExtractionEngine(extractor_config)
    return app


def _get_engine() -> ExtractionEngine:
    engine = current_app.extensions.get("question_extractor")
    if engine is None:
        engine = ExtractionEngine()
        current_app.extensions["question_extractor"] = engine
    return engine


def _authenticate():
    """Require a bearer token accepted by the configured verifier."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError("Não autorizado - token ausente")

    verifier: Callable[[str], bool] = current_app.config.get(
        "AUTH_VERIFIER", _accept_any_token
    )
    if not verifier(header[len("Bearer "):]):
        raise AuthenticationError("Sessão inválida ou expirada")


# ─── Health Check ─────────────────────────────────────────────────────────────


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "question-extractor",
        "version": __version__,
    })


@app.route("/api/info", methods=["GET"])
def info():
    """Extractor version and capability info."""
    engine = _get_engine()
    return jsonify({
        "version": __version__,
        "strategies": [e.name for e in engine.chain.extractors],
        "limits": {
            "min_text_length": engine.config.min_text_length,
            "max_text_length": engine.config.max_text_length,
            "min_score": engine.config.min_score,
        },
        "supported_formats": ["txt"],
    })


# ─── Extract Endpoint ─────────────────────────────────────────────────────────


@app.route("/api/extract-questions", methods=["POST"])
def extract_questions():
    """
    Extract questions from document text.

    Expects a JSON body: {"text": "...", "fileName": "prova.pdf"}
    Returns {"success": true, "questions": [...], "stats": {...}} or
    {"success": false, "error": "..."} with a 4xx/5xx status.
    """
    try:
        _authenticate()

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InputValidationError("Corpo da requisição inválido")

        result = _get_engine().extract(data.get("text"), data.get("fileName"))
        return jsonify(result.model_dump(mode="json")), 200

    except RequestEntityTooLarge:
        return jsonify({"success": False, "error": TOO_LARGE_MESSAGE}), 400
    except ExtractionError as e:
        logger.info(f"Extraction rejected ({e.status_code}): {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        logger.exception("Unexpected extraction failure")
        return jsonify({"success": False, "error": GENERIC_ERROR_MESSAGE}), 500


# ─── Run Server ──────────────────────────────────────────────────────────────


def run_server(
    host: str = "0.0.0.0",
    port: int = 5000,
    debug: bool = False,
):
    """Start the microservice server."""
    create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server(debug=True)
