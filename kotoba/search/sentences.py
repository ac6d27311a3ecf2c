"""Sentence search."""

import logging

from ..engine.index import IndexRegistry
from ..engine.result import SearchResult
from ..engine.sentences import ForeignSentenceEngine, NativeSentenceEngine
from ..engine.task import SearchTask
from ..japanese import to_hiragana
from ..languages import Language
from ..query.schemas import KanjiReading, Query, QueryLang
from ..readings import format_reading
from ..storage.resources import ResourceStorage
from ..storage.schemas import Sentence

logger = logging.getLogger(__name__)

# Bonus for sentences translated into the user's language
USER_LANG_BONUS = 550


def filter_sentence(query: Query, sentence: Sentence) -> bool:
    """True if `sentence` should be shown for `query`."""
    settings = query.settings
    if not sentence.has_translation(settings.user_lang):
        if not (settings.show_english and sentence.has_translation(Language.ENGLISH)):
            return False

    jlpt = query.jlpt_tag()
    if jlpt is not None and sentence.jlpt != jlpt:
        return False

    return True


def sentence_matches_reading(sentence: Sentence, reading: KanjiReading) -> bool:
    """True if `sentence` uses `reading.literal` with the given reading.

    Readings with okurigana (`ふる.い`) must appear written out (`古い`);
    other readings are looked up in the sentence's furigana.
    """
    literal = reading.literal
    if literal not in sentence.japanese:
        return False

    if "." in reading.reading:
        okurigana = reading.reading.split(".")[1].replace("-", "")
        return f"{literal}{okurigana}" in sentence.japanese

    kana = to_hiragana(format_reading(reading.reading))
    return kana in to_hiragana(sentence.furigana)


def foreign_order(sentence: Sentence, similarity: float, user_lang: Language) -> int:
    relevance = int(similarity * 100000)
    if sentence.has_translation(user_lang):
        relevance += USER_LANG_BONUS
    return relevance


def native_task(
    query: Query, registry: IndexRegistry | None = None, storage: ResourceStorage | None = None
) -> SearchTask[Sentence]:
    reading = query.kanji_reading
    query_str = reading.literal if reading is not None else query.query_str
    task = SearchTask(NativeSentenceEngine(registry), storage).add_query(query_str)

    if reading is not None:
        task.set_result_filter(lambda s: filter_sentence(query, s) and sentence_matches_reading(s, reading))
    else:
        task.set_result_filter(lambda s: filter_sentence(query, s))
    return task


def foreign_task(
    query: Query, registry: IndexRegistry | None = None, storage: ResourceStorage | None = None
) -> SearchTask[Sentence]:
    settings = query.settings
    task = SearchTask.with_language(ForeignSentenceEngine(registry), query.query_str, settings.user_lang, storage)
    if settings.show_english and settings.user_lang != Language.ENGLISH:
        task.add_language_query(query.query_str, Language.ENGLISH)

    user_lang = settings.user_lang
    task.set_result_filter(lambda s: filter_sentence(query, s))
    task.set_order_fn(lambda sentence, similarity, _query, _lang: foreign_order(sentence, similarity, user_lang))
    return task


def search(
    query: Query, registry: IndexRegistry | None = None, storage: ResourceStorage | None = None
) -> SearchResult[Sentence]:
    if not query.query_str:
        return SearchResult()

    if query.language == QueryLang.JAPANESE:
        task = native_task(query, registry, storage)
    else:
        task = foreign_task(query, registry, storage)

    task.set_limit(query.settings.page_size).set_offset(query.offset())
    result = task.find()
    logger.debug("Sentence search %r: %d of %d result(s)", query.query_str, len(result), result.total)
    return result
