"""Search producers for words, kanji and sentences."""

from ..engine.index import IndexRegistry
from ..engine.result import SearchResult
from ..errors import BadRequestError
from ..query.schemas import Query, SearchTarget
from . import kanji, sentences, words


def search(query: Query, registry: IndexRegistry | None = None) -> SearchResult:
    """Run the search for `query.target` and return the requested page."""
    if query.target == SearchTarget.WORDS:
        return words.search(query, registry)
    if query.target == SearchTarget.KANJI:
        return kanji.search(query, registry)
    if query.target == SearchTarget.SENTENCES:
        return sentences.search(query, registry)
    raise BadRequestError(f"Unsupported search target: {query.target.value}")


__all__ = ["search", "kanji", "sentences", "words"]
