"""Flask REST API for kotoba."""

import logging

from flask import Flask, jsonify, request

from kotoba.config import INDEX_DIR, LOG_LEVEL, PAGE_SIZE, RESOURCES_DIR, SHOW_ENGLISH, SUGGESTION_DIR

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)
from flask_cors import CORS
from flasgger import Swagger
from pydantic import ValidationError

from kotoba.engine.index import indexes_initialized, init_indexes, load_indexes
from kotoba.engine.result import SearchResult
from kotoba.errors import KotobaError
from kotoba.languages import Language
from kotoba.query.parser import QueryParser
from kotoba.query.schemas import SearchTarget, UserSettings
from kotoba.search import search
from kotoba.storage.resources import ResourceStorage, init_resources, resources_initialized
from kotoba.suggestions.registry import init_suggestions, load_suggestions, suggestions_initialized
from kotoba.suggestions.schemas import SuggestionRequest
from kotoba.suggestions.service import suggestion

app = Flask(__name__)

# Enable CORS for browser requests
CORS(app, resources={r"/api/*": {"origins": "*"}})

# Swagger Configuration
app.config["SWAGGER"] = {
    "title": "kotoba API",
    "description": "REST API for the kotoba Japanese dictionary",
    "version": "0.1.0",
    "termsOfService": "",
    "specs_route": "/api/docs/",
}

swagger_template = {
    "swagger": "2.0",
    "info": {
        "title": "kotoba API",
        "description": "Search words, kanji and sentences; autocomplete search input",
        "version": "0.1.0",
    },
}

swagger = Swagger(app, template=swagger_template)


# =============================================================================
# Helpers
# =============================================================================


def _result_to_dict(result: SearchResult, page: int) -> dict:
    return {
        "items": [
            {
                "item": item.item.model_dump(mode="json"),
                "relevance": item.relevance,
                "language": item.language.value if item.language is not None else None,
            }
            for item in result.items
        ],
        "total": result.total,
        "page": page,
    }


# =============================================================================
# Routes
# =============================================================================


@app.route("/api/health", methods=["GET"])
def health_check():
    """
    Health check endpoint
    ---
    tags:
      - System
    responses:
      200:
        description: Service status
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            service:
              type: string
              example: kotoba
            version:
              type: string
              example: 0.1.0
            indexes_loaded:
              type: boolean
            resources_loaded:
              type: boolean
            suggestions_loaded:
              type: boolean
    """
    return jsonify(
        {
            "status": "ok",
            "service": "kotoba",
            "version": "0.1.0",
            "indexes_loaded": indexes_initialized(),
            "resources_loaded": resources_initialized(),
            "suggestions_loaded": suggestions_initialized(),
        }
    )


@app.route("/api/suggestion", methods=["POST"])
def get_suggestions():
    """
    Autocomplete suggestions for a partially typed query
    ---
    tags:
      - Search
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - input
          properties:
            input:
              type: string
              example: たべ
            lang:
              type: string
              example: en-US
    responses:
      200:
        description: Up to 10 suggestions, exact matches first
        schema:
          type: object
          properties:
            suggestions:
              type: array
              items:
                type: object
                properties:
                  primary:
                    type: string
                  secondary:
                    type: string
      400:
        description: Input empty, too long or unparsable
      408:
        description: Suggestion lookup timed out
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body is required"}), 400

    try:
        payload = SuggestionRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": f"Invalid request: {e.errors()[0]['msg']}"}), 400

    response = suggestion(payload)
    return jsonify(response.to_dict())


@app.route("/api/search/<target>", methods=["POST"])
def search_target(target: str):
    """
    Search words, kanji or sentences
    ---
    tags:
      - Search
    parameters:
      - in: path
        name: target
        type: string
        required: true
        enum: [words, kanji, sentences]
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - query
          properties:
            query:
              type: string
              example: "#n4 食べる"
            lang:
              type: string
              example: en-US
            page:
              type: integer
              example: 0
            show_english:
              type: boolean
    responses:
      200:
        description: One page of ranked results
      400:
        description: Invalid query or target
      500:
        description: Search index not loaded
    """
    try:
        search_type = SearchTarget(target)
    except ValueError:
        return jsonify({"error": f"Unknown search target: {target}"}), 400

    data = request.get_json(silent=True)
    if not data or not data.get("query"):
        return jsonify({"error": "Query is required"}), 400

    try:
        page = int(data.get("page", 0))
    except (TypeError, ValueError):
        return jsonify({"error": "Page must be an integer"}), 400

    settings = UserSettings(
        user_lang=Language.parse_or_default(data.get("lang")),
        show_english=bool(data.get("show_english", SHOW_ENGLISH)),
        page_size=PAGE_SIZE,
    )
    query = QueryParser(data["query"], search_type, settings, page).parse()
    if query is None:
        return jsonify({"error": "Unparsable query"}), 400

    result = search(query)
    body = _result_to_dict(result, query.page)
    body["target"] = query.target.value
    body["query"] = query.query_str
    body["tags"] = [str(tag) for tag in query.tags]
    return jsonify(body)


# =============================================================================
# Error Handlers
# =============================================================================


@app.errorhandler(KotobaError)
def kotoba_error(e: KotobaError):
    if e.status_code >= 500:
        logger.error("Request failed: %s", e.message)
    return jsonify({"error": e.message}), e.status_code


@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "Endpoint not found"}), 404


@app.errorhandler(500)
def server_error(e):
    return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# Application Factory
# =============================================================================


def load_data() -> None:
    """Load indexes, resources and suggestions unless already loaded."""
    if not indexes_initialized():
        init_indexes(load_indexes(INDEX_DIR))
    if not resources_initialized():
        init_resources(ResourceStorage.load(RESOURCES_DIR))
    if not suggestions_initialized():
        init_suggestions(load_suggestions(SUGGESTION_DIR))


def create_app():
    """Application factory for uWSGI/Gunicorn."""
    load_data()
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
