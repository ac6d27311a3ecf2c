"""Prefix based autocomplete suggestions."""

from .registry import (
    SuggestionSearch,
    TextSearch,
    get_suggestions_registry,
    init_suggestions,
    load_file,
    load_suggestions,
    suggestions_initialized,
)
from .schemas import SuggestionItem, SuggestionRequest, SuggestionResponse, WordPair
from .service import get_suggestion, suggestion

__all__ = [
    "SuggestionSearch",
    "TextSearch",
    "get_suggestions_registry",
    "init_suggestions",
    "load_file",
    "load_suggestions",
    "suggestions_initialized",
    "SuggestionItem",
    "SuggestionRequest",
    "SuggestionResponse",
    "WordPair",
    "get_suggestion",
    "suggestion",
]
