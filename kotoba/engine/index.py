"""Static vector-space indices and the process-wide index registry.

An index artifact is a JSON file of the form::

    {
        "terms": ["食べる", "食", ...],
        "documents": [
            {"vector": {"0": 1.0, "1": 0.5}, "document": {"seq_ids": [1358280]}},
            ...
        ]
    }

Term positions in ``terms`` are the vector dimensions. Artifacts are
discovered by file name: ``<domain>.json`` for language-agnostic indices and
``<domain>.<lang>.json`` for per-language ones.
"""

import json
import logging
import math
import threading
from collections import defaultdict
from enum import Enum
from pathlib import Path
from typing import Any, Generic, Iterable, Iterator, TypeVar

from pydantic import BaseModel

from ..errors import AlreadyInitializedError, NotInitializedError
from ..languages import Language
from .documents import KanjiDocument, SentenceDocument, WordDocument
from .vector import DocumentVector, SparseVector

logger = logging.getLogger(__name__)

D = TypeVar("D")


class Domain(str, Enum):
    """Which kind of documents an index holds."""

    WORDS_NATIVE = "words_native"
    WORDS_FOREIGN = "words_foreign"
    SENTENCES_NATIVE = "sentences_native"
    SENTENCES_FOREIGN = "sentences_foreign"
    KANJI = "kanji"
    KANJI_MEANING = "kanji_meaning"


DOCUMENT_TYPES: dict[Domain, type[BaseModel]] = {
    Domain.WORDS_NATIVE: WordDocument,
    Domain.WORDS_FOREIGN: WordDocument,
    Domain.SENTENCES_NATIVE: SentenceDocument,
    Domain.SENTENCES_FOREIGN: SentenceDocument,
    Domain.KANJI: KanjiDocument,
    Domain.KANJI_MEANING: KanjiDocument,
}


class VectorStoreError(Exception):
    """The vector store could not produce the requested documents."""


class Vocabulary:
    """Maps index terms to vector dimensions."""

    def __init__(self, terms: Iterable[str]):
        self._dims: dict[str, int] = {}
        for term in terms:
            self._dims.setdefault(term, len(self._dims))

    def find_term(self, term: str) -> int | None:
        return self._dims.get(term)

    def has_term(self, term: str) -> bool:
        return term in self._dims

    def terms(self) -> list[str]:
        return list(self._dims)

    def build_vector(self, terms: Iterable[str]) -> SparseVector | None:
        """Build a query vector from `terms`. None if no term is known."""
        dims = {self._dims[t] for t in terms if t in self._dims}
        if not dims:
            return None
        return SparseVector.from_dimensions(dims)

    def __contains__(self, term: object) -> bool:
        return term in self._dims

    def __len__(self) -> int:
        return len(self._dims)


class VectorStore(Generic[D]):
    """Document vectors with an inverted dimension -> document postings list."""

    def __init__(self, documents: list[DocumentVector[D]]):
        self._documents = documents
        self._postings: dict[int, list[int]] = defaultdict(list)
        for position, doc in enumerate(documents):
            for dim in doc.vector.dimensions():
                self._postings[dim].append(position)

    def get_all_iter(self, dimensions: Iterable[int]) -> Iterator[DocumentVector[D]]:
        """Yield every document sharing at least one of `dimensions`, once, in store order."""
        positions: set[int] = set()
        for dim in dimensions:
            positions.update(self._postings.get(dim, ()))

        for position in sorted(positions):
            try:
                yield self._documents[position]
            except IndexError as e:
                raise VectorStoreError(f"Dangling posting for document {position}") from e

    def get_all(self, dimensions: Iterable[int], limit: int | None = None) -> list[DocumentVector[D]]:
        """Like `get_all_iter` but materialized and capped at `limit` documents."""
        out = []
        for doc in self.get_all_iter(dimensions):
            if limit is not None and len(out) >= limit:
                break
            out.append(doc)
        return out

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[DocumentVector[D]]:
        return iter(self._documents)


class Index(Generic[D]):
    """A read-only vocabulary + vector store pair."""

    def __init__(self, vocabulary: Vocabulary, store: VectorStore[D], metadata: dict[str, Any] | None = None):
        self.vocabulary = vocabulary
        self.store = store
        self.metadata = metadata or {}

    def get_vocabulary(self) -> Vocabulary:
        return self.vocabulary

    def get_vector_store(self) -> VectorStore[D]:
        return self.store

    def has_term(self, term: str) -> bool:
        return self.vocabulary.has_term(term)

    def build_vector(self, terms: Iterable[str]) -> SparseVector | None:
        return self.vocabulary.build_vector(terms)

    @classmethod
    def from_dict(cls, data: dict[str, Any], document_type: type[BaseModel] | None = None) -> "Index":
        """Build an index from its JSON representation.

        Args:
            data: Parsed artifact with ``terms`` and ``documents``
            document_type: Optional pydantic model each document payload is
                validated into; payloads stay plain dicts without one

        Raises:
            ValueError: If a vector references an unknown dimension
        """
        vocabulary = Vocabulary(data.get("terms", []))
        size = len(vocabulary)

        documents = []
        for entry in data.get("documents", []):
            vector = SparseVector(entry.get("vector", {}))
            if any(dim < 0 or dim >= size for dim in vector.weights):
                raise ValueError(f"Vector dimension out of range (vocabulary size {size})")
            payload = entry.get("document", {})
            if document_type is not None:
                payload = document_type.model_validate(payload)
            documents.append(DocumentVector(vector=vector, document=payload))

        return cls(vocabulary, VectorStore(documents), metadata=data.get("metadata"))

    @classmethod
    def load(cls, path: Path, document_type: type[BaseModel] | None = None) -> "Index":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data, document_type)

    @classmethod
    def build(cls, entries: Iterable[tuple[Iterable[str], D]]) -> "Index[D]":
        """Build an index from (terms, document) pairs.

        Each document term is weighted by its inverse document frequency so
        rare terms dominate the similarity.
        """
        entries = [(list(dict.fromkeys(terms)), doc) for terms, doc in entries]
        vocabulary = Vocabulary(t for terms, _ in entries for t in terms)

        doc_freq: dict[int, int] = defaultdict(int)
        for terms, _ in entries:
            for term in terms:
                doc_freq[vocabulary.find_term(term)] += 1

        total = len(entries)
        documents = []
        for terms, doc in entries:
            weights = {}
            for term in terms:
                dim = vocabulary.find_term(term)
                weights[dim] = 1.0 + math.log(total / doc_freq[dim])
            documents.append(DocumentVector(vector=SparseVector(weights), document=doc))

        return cls(vocabulary, VectorStore(documents))

    def __len__(self) -> int:
        return len(self.store)


class IndexRegistry:
    """All loaded indices, keyed by domain and language."""

    def __init__(self):
        self._indexes: dict[tuple[Domain, Language | None], Index] = {}

    def add(self, domain: Domain, index: Index, language: Language | None = None) -> None:
        self._indexes[(domain, language)] = index

    def get(self, domain: Domain, language: Language | None = None) -> Index | None:
        return self._indexes.get((domain, language))

    def languages(self, domain: Domain) -> list[Language]:
        return [lang for (dom, lang) in self._indexes if dom == domain and lang is not None]

    def __contains__(self, key: tuple[Domain, Language | None]) -> bool:
        return key in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)


def load_indexes(index_dir: Path) -> IndexRegistry:
    """Load every index artifact found in `index_dir`.

    Files whose name does not resolve to a known domain (and language) are
    skipped with a warning.
    """
    registry = IndexRegistry()
    index_dir = Path(index_dir)
    if not index_dir.exists():
        logger.warning("Index directory %s does not exist", index_dir)
        return registry

    for path in sorted(index_dir.glob("*.json")):
        domain_name, _, lang_code = path.stem.partition(".")
        try:
            domain = Domain(domain_name)
        except ValueError:
            logger.warning("Skipping %s: unknown index domain %r", path.name, domain_name)
            continue

        language = None
        if lang_code:
            language = Language.parse(lang_code)
            if language is None:
                logger.warning("Skipping %s: unknown language %r", path.name, lang_code)
                continue

        index = Index.load(path, DOCUMENT_TYPES[domain])
        registry.add(domain, index, language)
        logger.info("Loaded index %s (%d documents, %d terms)", path.name, len(index), len(index.vocabulary))

    return registry


_registry: IndexRegistry | None = None
_registry_lock = threading.Lock()


def init_indexes(registry: IndexRegistry) -> None:
    """Publish `registry` for all searches. May only be called once."""
    global _registry
    with _registry_lock:
        if _registry is not None:
            raise AlreadyInitializedError("Indexes already initialized")
        _registry = registry


def get_indexes() -> IndexRegistry:
    if _registry is None:
        raise NotInitializedError("Indexes not initialized")
    return _registry


def indexes_initialized() -> bool:
    return _registry is not None
