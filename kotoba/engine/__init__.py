"""Generic vector-space search engine."""

from .base import SearchEngine
from .documents import KanjiDocument, SentenceDocument, WordDocument
from .index import (
    Domain,
    Index,
    IndexRegistry,
    VectorStore,
    Vocabulary,
    get_indexes,
    indexes_initialized,
    init_indexes,
    load_indexes,
)
from .kanji import KanjiLiteralEngine, KanjiMeaningEngine
from .result import ResultItem, SearchResult
from .sentences import ForeignSentenceEngine, NativeSentenceEngine
from .task import SearchTask
from .vector import DocumentVector, SparseVector, cosine_similarity
from .words import ForeignWordEngine, NativeWordEngine

__all__ = [
    "SearchEngine",
    "KanjiDocument",
    "SentenceDocument",
    "WordDocument",
    "Domain",
    "Index",
    "IndexRegistry",
    "VectorStore",
    "Vocabulary",
    "get_indexes",
    "indexes_initialized",
    "init_indexes",
    "load_indexes",
    "KanjiLiteralEngine",
    "KanjiMeaningEngine",
    "ResultItem",
    "SearchResult",
    "ForeignSentenceEngine",
    "NativeSentenceEngine",
    "SearchTask",
    "DocumentVector",
    "SparseVector",
    "cosine_similarity",
    "ForeignWordEngine",
    "NativeWordEngine",
]
