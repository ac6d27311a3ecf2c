"""Kanji search and kun-reading compounds."""

import logging

from ..engine.index import IndexRegistry
from ..engine.kanji import KanjiLiteralEngine, KanjiMeaningEngine
from ..engine.result import SearchResult
from ..engine.task import SearchTask
from ..errors import NotFoundError
from ..japanese import kanji_literals
from ..languages import Language
from ..query.schemas import Query, QueryLang
from ..readings import find_kun_compounds
from ..storage.dictionary import DictStore, get_dict_store
from ..storage.kanji import KanjiStore, get_kanji_store
from ..storage.schemas import Dict, Kanji
from ..tokenizer import morpheme_count

logger = logging.getLogger(__name__)


def format_query(query: str) -> str:
    return query.replace(" ", "").replace(".", "").strip()


def by_literals_task(query: Query, registry: IndexRegistry | None = None, store: KanjiStore | None = None):
    """Task finding every kanji of the query, in order of first occurrence."""
    literals = kanji_literals(query.query_str)
    task = SearchTask(KanjiLiteralEngine(registry), store).add_query(query.query_str)

    # Similarity shrinks with the number of literals in the query
    task.set_threshold(0.0)
    task.set_order_fn(lambda kanji, _sim, _query, _lang: len(literals) - literals.index(kanji.literal))
    task.set_result_filter(lambda kanji: kanji.literal in literals)
    return task


def by_meaning_task(query: Query, registry: IndexRegistry | None = None, store: KanjiStore | None = None):
    settings = query.settings
    task = SearchTask.with_language(KanjiMeaningEngine(registry), query.query_str, settings.user_lang, store)
    if settings.show_english and settings.user_lang != Language.ENGLISH:
        task.add_language_query(query.query_str, Language.ENGLISH)
    return task


def search(query: Query, registry: IndexRegistry | None = None, store: KanjiStore | None = None) -> SearchResult[Kanji]:
    """Japanese queries find the kanji they contain, others find kanji by meaning."""
    if not format_query(query.query_str):
        return SearchResult()

    if query.language == QueryLang.JAPANESE:
        task = by_literals_task(query, registry, store)
    else:
        task = by_meaning_task(query, registry, store)

    task.set_limit(query.settings.page_size).set_offset(query.offset())
    result = task.find()
    logger.debug("Kanji search %r: %d of %d result(s)", query.query_str, len(result), result.total)
    return result


def kun_compounds(
    literal: str, kanji_store: KanjiStore | None = None, dict_store: DictStore | None = None
) -> list[int]:
    """Sequence ids of up to ten compounds reading `literal` with one of its kun readings.

    Raises:
        NotFoundError: If `literal` is not a known kanji
    """
    kanji_store = kanji_store or get_kanji_store()
    dict_store = dict_store or get_dict_store()

    kanji = kanji_store.by_literal(literal)
    if kanji is None:
        raise NotFoundError(f"Unknown kanji: {literal}")
    if not kanji.kunyomi:
        return []

    candidates = dict_store.candidates_for_literal(literal)
    return find_kun_compounds(literal, kanji.kunyomi, candidates, morpheme_count)


def load_kun_dicts(kanji: Kanji, dict_store: DictStore | None = None) -> list[Dict]:
    """Dictionary readings linked to the kun readings of `kanji`."""
    if not kanji.kun_dicts:
        return []
    dict_store = dict_store or get_dict_store()
    return dict_store.load_by_ids(kanji.kun_dicts)
