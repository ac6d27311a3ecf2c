"""A single logical search over one engine."""

import logging
from typing import Any, Callable, Generic, Iterator, TypeVar

from ..config import SEARCH_LIMIT, SEARCH_THRESHOLD, VECTOR_LIMIT
from ..errors import NotFoundError, UnexpectedError
from ..languages import Language
from .base import SearchEngine
from .index import Index, VectorStoreError
from .result import ResultItem, SearchResult

logger = logging.getLogger(__name__)

O = TypeVar("O")

VectorFilter = Callable[[Any], bool]
ResultFilter = Callable[[Any], bool]
OrderFn = Callable[[Any, float, str, Language | None], int | float]


class SearchTask(Generic[O]):
    """Runs one or more (query, language) pairs against an engine.

    Results of all pairs are merged, deduplicated (first match wins),
    ranked and paginated. Filters and the order function are optional::

        task = SearchTask(NativeWordEngine()).add_query("食べる")
        task.set_result_filter(lambda word: word.jlpt_lvl == 4)
        result = task.find()
    """

    def __init__(self, engine: SearchEngine[Any, O], storage: Any = None):
        self.engine = engine
        self.storage = storage
        self.queries: list[tuple[str, Language | None]] = []
        self.vector_filter: VectorFilter | None = None
        self.result_filter: ResultFilter | None = None
        self.order_fn: OrderFn | None = None
        self.threshold = SEARCH_THRESHOLD
        self.limit = SEARCH_LIMIT
        self.vector_limit = VECTOR_LIMIT
        self.offset = 0
        self.allow_align = True

    @classmethod
    def with_language(
        cls, engine: SearchEngine[Any, O], query: str, language: Language, storage: Any = None
    ) -> "SearchTask[O]":
        return cls(engine, storage).add_language_query(query, language)

    def add_query(self, query: str) -> "SearchTask[O]":
        self.queries.append((query, None))
        return self

    def add_language_query(self, query: str, language: Language) -> "SearchTask[O]":
        self.queries.append((query, language))
        return self

    def query_count(self) -> int:
        return len(self.queries)

    def set_threshold(self, threshold: float) -> "SearchTask[O]":
        self.threshold = threshold
        return self

    def set_limit(self, limit: int) -> "SearchTask[O]":
        self.limit = limit
        return self

    def set_offset(self, offset: int) -> "SearchTask[O]":
        self.offset = offset
        return self

    def set_vector_limit(self, vector_limit: int) -> "SearchTask[O]":
        self.vector_limit = vector_limit
        return self

    def set_align(self, allow_align: bool) -> "SearchTask[O]":
        self.allow_align = allow_align
        return self

    def set_vector_filter(self, vector_filter: VectorFilter) -> "SearchTask[O]":
        """Reject documents before their similarity is computed."""
        self.vector_filter = vector_filter
        return self

    def set_result_filter(self, result_filter: ResultFilter) -> "SearchTask[O]":
        """Reject individual outputs."""
        self.result_filter = result_filter
        return self

    def set_order_fn(self, order_fn: OrderFn) -> "SearchTask[O]":
        """Score outputs with `order_fn(output, similarity, query, language)`."""
        self.order_fn = order_fn
        return self

    def has_term(self) -> bool:
        """True if any query string is literally a term of its index."""
        for query, language in self.queries:
            if self._get_index(language).has_term(query):
                return True
        return False

    def find(self) -> SearchResult[O]:
        storage = self.storage if self.storage is not None else self.engine.get_storage()

        items: list[ResultItem[O]] = []
        seen = set()
        for query, language in self.queries:
            for item in self._find_by_query(query, language, storage):
                key = self.engine.output_key(item.item)
                if key in seen:
                    continue
                seen.add(key)
                items.append(item)

        return SearchResult.from_items(items, self.offset, self.limit)

    def _find_by_query(self, query: str, language: Language | None, storage: Any) -> Iterator[ResultItem[O]]:
        index = self._get_index(language)

        built = self.engine.gen_query_vector(index, query, language, self.allow_align)
        if built is None:
            return
        query_vec, query = built

        try:
            candidates = index.get_vector_store().get_all(query_vec.dimensions(), self.vector_limit)
        except VectorStoreError as e:
            raise NotFoundError(f"Vector store lookup failed: {e}") from e

        for candidate in candidates:
            if self.vector_filter is not None and not self.vector_filter(candidate.document):
                continue

            similarity = candidate.similarity(query_vec)
            if similarity <= self.threshold:
                continue

            for output in self.engine.doc_to_output(storage, candidate.document) or []:
                if self.result_filter is not None and not self.result_filter(output):
                    continue
                yield ResultItem(item=output, relevance=self._score(output, similarity, query, language), language=language)

    def _score(self, output: O, similarity: float, query: str, language: Language | None) -> int | float:
        if self.order_fn is not None:
            return self.order_fn(output, similarity, query, language)
        return round(similarity * 100)

    def _get_index(self, language: Language | None) -> Index:
        index = self.engine.get_index(language)
        if index is None:
            logger.error("Failed to retrieve %s index with language %s", self.engine.domain.value, language)
            raise UnexpectedError(f"No {self.engine.domain.value} index loaded for language {language}")
        return index
