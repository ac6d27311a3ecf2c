"""Sentence engines: Japanese text and translations."""

from ..storage.resources import ResourceStorage, get_resources
from ..storage.schemas import Sentence
from ..tokenizer import tokenize
from .base import SearchEngine
from .documents import SentenceDocument
from .index import Domain
from .terms import foreign_terms


class SentenceEngine(SearchEngine[SentenceDocument, Sentence]):
    def get_storage(self) -> ResourceStorage:
        return get_resources()

    def doc_to_output(self, storage: ResourceStorage, document: SentenceDocument) -> list[Sentence] | None:
        sentence = storage.sentences().by_id(document.seq_id)
        return [sentence] if sentence is not None else None

    def output_key(self, output: Sentence) -> int:
        return output.id


class NativeSentenceEngine(SentenceEngine):
    domain = Domain.SENTENCES_NATIVE

    def query_terms(self, query, language):
        return list(dict.fromkeys([query, *tokenize(query)]))


class ForeignSentenceEngine(SentenceEngine):
    domain = Domain.SENTENCES_FOREIGN
    per_language = True

    def query_terms(self, query, language):
        return foreign_terms(query)
