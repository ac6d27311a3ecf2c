"""Autocomplete suggestions for the search input."""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

from ..config import MAX_SUGGESTION_INPUT_LEN, MAX_SUGGESTIONS, SUGGESTION_TIMEOUT_MS, SUGGESTION_WORKERS
from ..errors import BadRequestError, SearchTimeoutError
from ..japanese import is_hiragana, is_roman_letter, real_string_len, to_katakana
from ..languages import Language
from ..query.parser import QueryParser, parse_language
from ..query.schemas import Query, QueryLang, SearchTarget, UserSettings
from ..storage.dictionary import DictStore, get_dict_store
from .registry import SuggestionSearch, get_suggestions_registry, suggestions_initialized
from .schemas import SuggestionRequest, SuggestionResponse, WordPair

logger = logging.getLogger(__name__)

# Suggestion work runs here so callers can stop waiting after the timeout.
# A timed out lookup is abandoned, not stopped: it keeps its worker busy
# until it finishes.
_executor = ThreadPoolExecutor(max_workers=SUGGESTION_WORKERS, thread_name_prefix="suggestion")


def suggestion(
    request: SuggestionRequest,
    timeout_ms: int = SUGGESTION_TIMEOUT_MS,
    dict_store: DictStore | None = None,
    registry: SuggestionSearch | None = None,
) -> SuggestionResponse:
    """Get suggestions for a partially typed query.

    Args:
        request: Input text and the user's language code
        timeout_ms: Deadline for the lookup
        dict_store: Dictionary used for Japanese input
        registry: Suggestion registry used for foreign input

    Raises:
        BadRequestError: If the input is empty, too long or unparsable
        SearchTimeoutError: If the lookup takes longer than `timeout_ms`
    """
    query = parse_request(request)

    future = _executor.submit(get_suggestion, query, dict_store, registry)
    try:
        return future.result(timeout=timeout_ms / 1000)
    except FuturesTimeoutError as e:
        # Only stops lookups that have not started yet
        future.cancel()
        logger.warning("Suggestion for %r timed out after %d ms", request.input, timeout_ms)
        raise SearchTimeoutError(f"Suggestion timed out after {timeout_ms} ms") from e


def parse_request(request: SuggestionRequest) -> Query:
    query_len = real_string_len(request.input)
    if query_len < 1 or query_len > MAX_SUGGESTION_INPUT_LEN:
        raise BadRequestError(f"Input must be 1 to {MAX_SUGGESTION_INPUT_LEN} characters long")

    query_str = request.input

    # Romanized IME input leaves the roman letter being typed at the end
    if query_len > 1 and is_roman_letter(query_str[-1]) and parse_language(query_str) == QueryLang.JAPANESE:
        query_str = query_str[:-1]

    settings = UserSettings(user_lang=Language.parse_or_default(request.lang))
    query = QueryParser(query_str, SearchTarget.WORDS, settings).parse()
    if query is None:
        raise BadRequestError("Unparsable query")
    return query


def get_suggestion(
    query: Query, dict_store: DictStore | None = None, registry: SuggestionSearch | None = None
) -> SuggestionResponse:
    """Suggestions for a parsed query, retrying hiragana input as katakana."""
    pairs = get_suggestion_by_query(query, query.query_str, dict_store, registry)

    if not pairs and is_hiragana(query.query_str):
        pairs = get_suggestion_by_query(query, to_katakana(query.query_str), dict_store, registry)

    return SuggestionResponse(suggestions=pairs)


def get_suggestion_by_query(
    query: Query,
    query_str: str,
    dict_store: DictStore | None = None,
    registry: SuggestionSearch | None = None,
) -> list[WordPair]:
    if not query_str:
        return []

    if query.language == QueryLang.JAPANESE:
        pairs = japanese_suggestions(query_str, dict_store or get_dict_store())
    else:
        pairs = foreign_suggestions(query_str, query.settings.user_lang, registry)

    # Exact matches first
    return sorted(pairs, key=lambda pair: not pair.has_reading(query_str))


def japanese_suggestions(query_str: str, dict_store: DictStore) -> list[WordPair]:
    sequences = dict_store.suggest_sequences(query_str, MAX_SUGGESTIONS)
    return [WordPair(primary=kana, secondary=kanji) for kana, kanji in dict_store.load_word_pairs(sequences)]


def foreign_suggestions(query_str: str, language: Language, registry: SuggestionSearch | None = None) -> list[WordPair]:
    if registry is None:
        if not suggestions_initialized():
            return []
        registry = get_suggestions_registry()

    items = registry.search(query_str, language, MAX_SUGGESTIONS) or []
    return [WordPair(primary=item.text) for item in items]
