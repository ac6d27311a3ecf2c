"""Storage collaborators: in-memory resources and the SQLite dictionary."""

from .cache import SharedCache
from .dictionary import DictStore, get_dict_store
from .kanji import KanjiStore, get_kanji_store
from .resources import (
    ResourceStorage,
    SentenceStorage,
    WordStorage,
    get_resources,
    init_resources,
    resources_initialized,
)
from .schemas import Dict, Kanji, Reading, ReadingType, Sense, Sentence, Word

__all__ = [
    "SharedCache",
    "DictStore",
    "get_dict_store",
    "KanjiStore",
    "get_kanji_store",
    "ResourceStorage",
    "SentenceStorage",
    "WordStorage",
    "get_resources",
    "init_resources",
    "resources_initialized",
    "Dict",
    "Kanji",
    "Reading",
    "ReadingType",
    "Sense",
    "Sentence",
    "Word",
]
