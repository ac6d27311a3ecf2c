"""Data schemas for parsed queries and their tags."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..config import PAGE_SIZE, SHOW_ENGLISH
from ..languages import Language


class SearchTarget(str, Enum):
    """What kind of objects a search returns."""

    WORDS = "words"
    KANJI = "kanji"
    SENTENCES = "sentences"
    NAMES = "names"


class QueryLang(str, Enum):
    """Detected script of a query."""

    JAPANESE = "japanese"
    FOREIGN = "foreign"
    UNDETECTED = "undetected"


class QueryForm(str, Enum):
    """Shape of a query."""

    WORD = "word"
    SENTENCE = "sentence"
    KANJI_READING = "kanji_reading"  # e.g. "古 ふる"
    TAG_ONLY = "tag_only"
    UNDETECTED = "undetected"


class PosSimple(str, Enum):
    """Simplified part of speech usable as a query tag."""

    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    AUXILIARY = "auxiliary"
    CONJUNCTION = "conjunction"
    COUNTER = "counter"
    EXPRESSION = "expression"
    INTERJECTION = "interjection"
    NOUN = "noun"
    NUMERIC = "numeric"
    PRONOUN = "pronoun"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    PARTICLE = "particle"
    UNCLASSIFIED = "unclassified"
    VERB = "verb"

    @classmethod
    def parse(cls, value: str) -> "PosSimple | None":
        value = value.lower()
        try:
            return cls(value)
        except ValueError:
            return _POS_ALIASES.get(value)

    @classmethod
    def from_jmdict(cls, code: str) -> "PosSimple | None":
        """Map a JMdict part-of-speech code (n, v1, adj-i, ...) to its simple form."""
        if code in _JMDICT_EXACT:
            return _JMDICT_EXACT[code]
        for prefix, pos in _JMDICT_PREFIXES:
            if code.startswith(prefix):
                return pos
        return None


_POS_ALIASES = {
    "adj": PosSimple.ADJECTIVE,
    "adv": PosSimple.ADVERB,
    "aux": PosSimple.AUXILIARY,
    "auxilary": PosSimple.AUXILIARY,
    "conj": PosSimple.CONJUNCTION,
    "conjungation": PosSimple.CONJUNCTION,
    "ctr": PosSimple.COUNTER,
    "exp": PosSimple.EXPRESSION,
    "expr": PosSimple.EXPRESSION,
    "int": PosSimple.INTERJECTION,
    "num": PosSimple.NUMERIC,
    "pn": PosSimple.PRONOUN,
    "pref": PosSimple.PREFIX,
    "suf": PosSimple.SUFFIX,
    "prt": PosSimple.PARTICLE,
    "unc": PosSimple.UNCLASSIFIED,
}

_JMDICT_EXACT = {
    "n": PosSimple.NOUN,
    "adv": PosSimple.ADVERB,
    "conj": PosSimple.CONJUNCTION,
    "cop": PosSimple.AUXILIARY,
    "ctr": PosSimple.COUNTER,
    "exp": PosSimple.EXPRESSION,
    "int": PosSimple.INTERJECTION,
    "num": PosSimple.NUMERIC,
    "pn": PosSimple.PRONOUN,
    "pref": PosSimple.PREFIX,
    "suf": PosSimple.SUFFIX,
    "prt": PosSimple.PARTICLE,
    "unc": PosSimple.UNCLASSIFIED,
}

# Checked in order, so "n-suf" must come before "n"
_JMDICT_PREFIXES = (
    ("n-suf", PosSimple.SUFFIX),
    ("n-pref", PosSimple.PREFIX),
    ("n-", PosSimple.NOUN),
    ("adj-", PosSimple.ADJECTIVE),
    ("adv-", PosSimple.ADVERB),
    ("aux", PosSimple.AUXILIARY),
    ("v", PosSimple.VERB),
)


class Misc(str, Enum):
    """JMdict misc information usable as a query tag."""

    ABBREVIATION = "abbr"


class TagKind(str, Enum):
    HIDDEN = "hidden"
    IRREGULAR_IRU_ERU = "irregular_iru_eru"
    JLPT = "jlpt"
    GENKI_LESSON = "genki_lesson"
    SEARCH_TYPE = "search_type"
    PART_OF_SPEECH = "part_of_speech"
    MISC = "misc"


class Tag(BaseModel):
    """A directive parsed from a `#token` within a query."""

    model_config = ConfigDict(frozen=True)

    kind: TagKind
    value: int | SearchTarget | PosSimple | Misc | None = None

    @classmethod
    def hidden(cls) -> "Tag":
        return cls(kind=TagKind.HIDDEN)

    @classmethod
    def irregular_iru_eru(cls) -> "Tag":
        return cls(kind=TagKind.IRREGULAR_IRU_ERU)

    @classmethod
    def jlpt(cls, level: int) -> "Tag":
        return cls(kind=TagKind.JLPT, value=level)

    @classmethod
    def genki_lesson(cls, lesson: int) -> "Tag":
        return cls(kind=TagKind.GENKI_LESSON, value=lesson)

    @classmethod
    def search_type(cls, target: SearchTarget) -> "Tag":
        return cls(kind=TagKind.SEARCH_TYPE, value=target)

    @classmethod
    def part_of_speech(cls, pos: PosSimple) -> "Tag":
        return cls(kind=TagKind.PART_OF_SPEECH, value=pos)

    @classmethod
    def misc(cls, misc: Misc) -> "Tag":
        return cls(kind=TagKind.MISC, value=misc)

    def __str__(self) -> str:
        if self.value is None:
            return f"#{self.kind.value}"
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return f"#{self.kind.value}:{value}"


class KanjiReading(BaseModel):
    """A kanji literal paired with one of its readings."""

    model_config = ConfigDict(frozen=True)

    literal: str
    reading: str


class UserSettings(BaseModel):
    """Per-user search preferences."""

    user_lang: Language = Language.ENGLISH
    show_english: bool = SHOW_ENGLISH
    english_on_top: bool = False
    page_size: int = PAGE_SIZE


class Query(BaseModel):
    """A parsed, immutable search query."""

    model_config = ConfigDict(frozen=True)

    raw_query: str
    query_str: str  # raw query without stripped tags
    language: QueryLang = QueryLang.UNDETECTED
    form: QueryForm = QueryForm.UNDETECTED
    tags: list[Tag] = Field(default_factory=list)
    target: SearchTarget = SearchTarget.WORDS
    settings: UserSettings = Field(default_factory=UserSettings)
    page: int = 0
    kanji_reading: KanjiReading | None = None

    def has_tag(self, kind: TagKind) -> bool:
        return any(tag.kind == kind for tag in self.tags)

    def jlpt_tag(self) -> int | None:
        for tag in self.tags:
            if tag.kind == TagKind.JLPT:
                return tag.value
        return None

    def genki_tag(self) -> int | None:
        for tag in self.tags:
            if tag.kind == TagKind.GENKI_LESSON:
                return tag.value
        return None

    def pos_tags(self) -> list[PosSimple]:
        return [tag.value for tag in self.tags if tag.kind == TagKind.PART_OF_SPEECH]

    def misc_tags(self) -> list[Misc]:
        return [tag.value for tag in self.tags if tag.kind == TagKind.MISC]

    def offset(self, page_size: int | None = None) -> int:
        """Result offset of the current page."""
        return self.page * (page_size or self.settings.page_size)
