"""The search engine capability each searchable domain implements."""

from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, TypeVar

from ..languages import Language
from .index import Domain, Index, IndexRegistry, get_indexes
from .vector import SparseVector

D = TypeVar("D")
O = TypeVar("O")


class SearchEngine(ABC, Generic[D, O]):
    """Adapter between a vector-space index and the outputs a search returns.

    Subclasses set `domain` and, for indices built per language,
    `per_language = True`.
    """

    domain: Domain
    per_language: bool = False

    def __init__(self, registry: IndexRegistry | None = None):
        self._registry = registry

    @property
    def registry(self) -> IndexRegistry:
        return self._registry if self._registry is not None else get_indexes()

    def get_index(self, language: Language | None) -> Index | None:
        """The index to search for `language`, or None if none is loaded."""
        return self.registry.get(self.domain, language if self.per_language else None)

    def query_terms(self, query: str, language: Language | None) -> list[str]:
        """Terms the query vector is built from."""
        return [query]

    def align_query(self, query: str, index: Index, language: Language | None) -> str | None:
        """An alternative spelling of `query` known to the index, if any."""
        return None

    def gen_query_vector(
        self, index: Index, query: str, language: Language | None, allow_align: bool = True
    ) -> tuple[SparseVector, str] | None:
        """Build the query vector.

        Returns the vector together with the (possibly aligned) query string
        it was built from, or None if no term of the query is indexed.
        """
        if allow_align:
            aligned = self.align_query(query, index, language)
            if aligned:
                query = aligned

        vector = index.build_vector(self.query_terms(query, language))
        if vector is None:
            return None
        return vector, query

    def get_storage(self) -> Any:
        """Storage handed to `doc_to_output` when a task has none set."""
        return None

    @abstractmethod
    def doc_to_output(self, storage: Any, document: D) -> list[O] | None:
        """Map a matched document to the outputs it stands for."""

    def output_key(self, output: O) -> Hashable:
        """Identity used to deduplicate outputs."""
        return output
