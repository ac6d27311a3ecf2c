"""Kanji engines: by literal and by meaning."""

from ..japanese import kanji_literals
from ..storage.kanji import KanjiStore, get_kanji_store
from ..storage.schemas import Kanji
from .base import SearchEngine
from .documents import KanjiDocument
from .index import Domain
from .terms import foreign_terms


class KanjiEngine(SearchEngine[KanjiDocument, Kanji]):
    def get_storage(self) -> KanjiStore:
        return get_kanji_store()

    def doc_to_output(self, storage: KanjiStore, document: KanjiDocument) -> list[Kanji] | None:
        kanji = storage.by_literal(document.literal)
        return [kanji] if kanji is not None else None

    def output_key(self, output: Kanji) -> str:
        return output.literal


class KanjiLiteralEngine(KanjiEngine):
    """Finds kanji contained in a Japanese query."""

    domain = Domain.KANJI

    def query_terms(self, query, language):
        return kanji_literals(query)


class KanjiMeaningEngine(KanjiEngine):
    """Finds kanji by their meaning in one language."""

    domain = Domain.KANJI_MEANING
    per_language = True

    def query_terms(self, query, language):
        return foreign_terms(query)
