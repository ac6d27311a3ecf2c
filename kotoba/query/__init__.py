"""Query parsing and tag extraction."""

from .parser import QueryParser, parse_language
from .schemas import (
    KanjiReading,
    Misc,
    PosSimple,
    Query,
    QueryForm,
    QueryLang,
    SearchTarget,
    Tag,
    TagKind,
    UserSettings,
)
from .tags import extract, extract_parse, parse

__all__ = [
    "QueryParser",
    "parse_language",
    "KanjiReading",
    "Misc",
    "PosSimple",
    "Query",
    "QueryForm",
    "QueryLang",
    "SearchTarget",
    "Tag",
    "TagKind",
    "UserSettings",
    "extract",
    "extract_parse",
    "parse",
]
