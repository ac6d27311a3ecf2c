"""Turns raw user input into an immutable `Query`."""

import logging
import re
import unicodedata

from ..japanese import (
    SENTENCE_PUNCTUATION,
    is_kana,
    is_kana_char,
    is_kanji_char,
    is_roman_letter,
)
from .schemas import (
    KanjiReading,
    Query,
    QueryForm,
    QueryLang,
    SearchTarget,
    Tag,
    TagKind,
    UserSettings,
)
from .tags import extract

logger = logging.getLogger(__name__)

# Japanese queries longer than this are treated as sentences
MAX_WORD_LEN = 10

# Foreign queries with more words than this are treated as sentences
MAX_WORD_COUNT = 3

_KANJI_READING_RE = re.compile(r"^(\S)\s+(\S+)$")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_language(text: str) -> QueryLang:
    """Detect whether `text` is written in Japanese or a foreign script."""
    japanese = 0
    foreign = 0
    for char in text:
        if is_kana_char(char) or is_kanji_char(char):
            japanese += 1
        elif is_roman_letter(char) or char.isalpha():
            foreign += 1

    if japanese > 0 and (foreign == 0 or japanese > foreign):
        return QueryLang.JAPANESE
    if foreign > 0:
        return QueryLang.FOREIGN
    return QueryLang.UNDETECTED


def parse_kanji_reading(text: str) -> KanjiReading | None:
    """Parse queries like `古 ふる` (a single kanji followed by a kana reading)."""
    match = _KANJI_READING_RE.match(text)
    if not match:
        return None
    literal, reading = match.groups()
    if not is_kanji_char(literal):
        return None
    if not is_kana(reading.replace(".", "").replace("-", "")):
        return None
    return KanjiReading(literal=literal, reading=reading)


def parse_form(text: str, language: QueryLang) -> QueryForm:
    if language == QueryLang.UNDETECTED:
        return QueryForm.UNDETECTED

    if language == QueryLang.JAPANESE:
        if any(c in SENTENCE_PUNCTUATION for c in text):
            return QueryForm.SENTENCE
        if " " in text or len(text) > MAX_WORD_LEN:
            return QueryForm.SENTENCE
        return QueryForm.WORD

    if len(text.split()) > MAX_WORD_COUNT:
        return QueryForm.SENTENCE
    return QueryForm.WORD


class QueryParser:
    """Parses a raw query string together with the user's settings."""

    def __init__(
        self,
        raw_query: str,
        target: SearchTarget = SearchTarget.WORDS,
        settings: UserSettings | None = None,
        page: int = 0,
    ):
        self.raw_query = raw_query
        self.target = target
        self.settings = settings or UserSettings()
        self.page = max(page, 0)

    def parse(self) -> Query | None:
        """Parse the query. Returns None if there is nothing to search for."""
        raw = unicodedata.normalize("NFC", self.raw_query).replace("　", " ").strip()
        if not raw:
            return None

        query_str, tags = extract(raw)
        query_str = _WHITESPACE_RE.sub(" ", query_str).strip()
        tags = list(dict.fromkeys(tags))
        target = self._target_from_tags(tags)

        if not query_str:
            if not tags:
                return None
            return Query(
                raw_query=raw,
                query_str="",
                form=QueryForm.TAG_ONLY,
                tags=tags,
                target=target,
                settings=self.settings,
                page=self.page,
            )

        language = parse_language(query_str)
        kanji_reading = parse_kanji_reading(query_str)
        if kanji_reading is not None:
            form = QueryForm.KANJI_READING
            language = QueryLang.JAPANESE
        else:
            form = parse_form(query_str, language)

        logger.debug("Parsed %r as %s/%s with %d tag(s)", raw, language.value, form.value, len(tags))

        return Query(
            raw_query=raw,
            query_str=query_str,
            language=language,
            form=form,
            tags=tags,
            target=target,
            settings=self.settings,
            page=self.page,
            kanji_reading=kanji_reading,
        )

    def _target_from_tags(self, tags: list[Tag]) -> SearchTarget:
        target = self.target
        for tag in tags:
            if tag.kind == TagKind.SEARCH_TYPE:
                target = tag.value
        return target
