"""Word search: builds search tasks for Japanese and foreign queries."""

import logging

from ..engine.index import IndexRegistry
from ..engine.result import ResultItem, SearchResult
from ..engine.task import SearchTask
from ..engine.words import ForeignWordEngine, NativeWordEngine
from ..japanese import to_hiragana
from ..languages import Language
from ..query.schemas import Query, QueryForm, QueryLang, TagKind
from ..readings import format_reading
from ..storage.resources import ResourceStorage, get_resources
from ..storage.schemas import Word

logger = logging.getLogger(__name__)

# JMdict part of speech of godan verbs ending in る
_GODAN_RU = "v5r"

# Kana of the i- and e-rows; ichidan-looking verbs end in one of these + る
_I_ROW = set("いきぎしじちぢにひびぴみりゐ")
_E_ROW = set("えけげせぜてでねへべぺめれゑ")


class WordFilter:
    """Tag based word filter for a query."""

    def __init__(self, query: Query):
        self.query = query
        self.jlpt = query.jlpt_tag()
        self.genki = query.genki_tag()
        self.pos = query.pos_tags()
        self.misc = [m.value for m in query.misc_tags()]
        self.irregular_iru_eru = query.has_tag(TagKind.IRREGULAR_IRU_ERU)

    def keep(self, word: Word) -> bool:
        """True if `word` satisfies every tag of the query."""
        if self.jlpt is not None and word.jlpt_lvl != self.jlpt:
            return False

        if self.genki is not None and (word.genki_lesson is None or word.genki_lesson > self.genki):
            return False

        if self.pos:
            word_pos = {pos for sense in word.senses for pos in sense.simple_pos()}
            if not all(pos in word_pos for pos in self.pos):
                return False

        if self.misc:
            word_misc = {m for sense in word.senses for m in sense.misc}
            if not all(m in word_misc for m in self.misc):
                return False

        if self.irregular_iru_eru and not is_irregular_iru_eru(word):
            return False

        return True


def is_irregular_iru_eru(word: Word) -> bool:
    """Godan る verbs that look like ichidan verbs (帰る, 入る, 走る)."""
    if _GODAN_RU not in word.part_of_speech():
        return False
    kana = to_hiragana(word.reading.kana.reading)
    return len(kana) >= 2 and kana.endswith("る") and (kana[-2] in _I_ROW or kana[-2] in _E_ROW)


def japanese_search_order(word: Word, similarity: float, raw_query: str) -> float:
    """Rank native results: exact readings, then common and JLPT words."""
    score = similarity * 100

    readings = [word.reading.kana.reading] + [d.reading for d in word.reading.alternative]
    if word.reading.kanji is not None:
        readings.append(word.reading.kanji.reading)
    if raw_query in readings:
        score += 50

    if word.is_common():
        score += 20

    if word.jlpt_lvl is not None:
        score += (6 - word.jlpt_lvl) * 2

    return score


def foreign_search_order(
    word: Word, similarity: float, query_str: str, language: Language | None, user_lang: Language
) -> float:
    """Rank foreign results: exact glosses, then the user's language and common words."""
    score = similarity * 100

    query_lower = query_str.strip().lower()
    if any(gloss.lower() == query_lower for gloss in word.glosses(language)):
        score += 40

    if language == user_lang:
        score += 10

    if word.is_common():
        score += 10

    return score


def kanji_reading_matches(word: Word, literal: str, reading: str) -> bool:
    """True if `word` is written with `literal` and its kana contains `reading`."""
    if word.reading.kanji is None or literal not in word.reading.kanji.reading:
        return False
    return to_hiragana(format_reading(reading)) in to_hiragana(word.reading.kana.reading)


class NativeSearch:
    """Builds the search task for Japanese word queries."""

    def __init__(self, query: Query, query_str: str | None = None, registry: IndexRegistry | None = None):
        self.query = query
        self.query_str = query_str if query_str is not None else query.query_str
        self.registry = registry

    def task(self, storage: ResourceStorage | None = None) -> SearchTask[Word]:
        task = SearchTask(NativeWordEngine(self.registry), storage).add_query(self.query_str)

        raw_query = self.query.query_str
        task.set_order_fn(lambda word, similarity, _query, _lang: japanese_search_order(word, similarity, raw_query))

        word_filter = WordFilter(self.query)
        reading = self.query.kanji_reading
        if reading is not None:
            task.set_result_filter(
                lambda word: word_filter.keep(word) and kanji_reading_matches(word, reading.literal, reading.reading)
            )
        else:
            task.set_result_filter(word_filter.keep)
        return task

    @staticmethod
    def has_term(term: str, registry: IndexRegistry | None = None) -> bool:
        """Returns `True` if the native word index contains `term`."""
        return SearchTask(NativeWordEngine(registry)).add_query(term).has_term()


class ForeignSearch:
    """Builds the search task for foreign word queries.

    Searches the user's language and, if the user wants to see English
    glosses, English as well.
    """

    def __init__(self, query: Query, registry: IndexRegistry | None = None):
        self.query = query
        self.registry = registry

    def task(self, storage: ResourceStorage | None = None) -> SearchTask[Word]:
        settings = self.query.settings
        engine = ForeignWordEngine(self.registry)
        task = SearchTask.with_language(engine, self.query.query_str, settings.user_lang, storage)
        if settings.show_english and settings.user_lang != Language.ENGLISH:
            task.add_language_query(self.query.query_str, Language.ENGLISH)

        user_lang = settings.user_lang
        task.set_order_fn(
            lambda word, similarity, query_str, lang: foreign_search_order(word, similarity, query_str, lang, user_lang)
        )
        task.set_result_filter(WordFilter(self.query).keep)
        return task


def search(
    query: Query, registry: IndexRegistry | None = None, storage: ResourceStorage | None = None
) -> SearchResult[Word]:
    """Search words for `query`, returning the page `query.page`."""
    page_size = query.settings.page_size

    if query.form == QueryForm.TAG_ONLY:
        return tag_only_search(query, storage)

    if query.language == QueryLang.JAPANESE:
        query_str = query.kanji_reading.literal if query.kanji_reading is not None else query.query_str
        task = NativeSearch(query, query_str, registry).task(storage)
    else:
        task = ForeignSearch(query, registry).task(storage)

    task.set_limit(page_size).set_offset(query.offset())
    result = task.find()
    logger.debug("Word search %r: %d of %d result(s)", query.query_str, len(result), result.total)
    return _retain_languages(result, query)


def tag_only_search(query: Query, storage: ResourceStorage | None = None) -> SearchResult[Word]:
    """List all words matching the query's tags, e.g. `#n5 #verb`."""
    word_filter = WordFilter(query)
    if word_filter.jlpt is None and word_filter.genki is None and not word_filter.pos and not word_filter.misc:
        return SearchResult()

    storage = storage or get_resources()
    words = sorted((w for w in storage.words() if word_filter.keep(w)), key=lambda w: w.sequence)
    # Keep dictionary order: every item gets the same relevance
    items = [ResultItem(item=word, relevance=0) for word in words]
    result = SearchResult.from_items(items, query.offset(), query.settings.page_size)
    return _retain_languages(result, query)


def _retain_languages(result: SearchResult[Word], query: Query) -> SearchResult[Word]:
    settings = query.settings
    for item in result.items:
        item.item = item.item.retain_languages(settings.user_lang, settings.show_english)
    return result
