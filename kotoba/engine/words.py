"""Word engines: Japanese readings and foreign glosses."""

import difflib

from ..storage.resources import ResourceStorage, get_resources
from ..storage.schemas import Word
from ..tokenizer import tokenize
from .base import SearchEngine
from .documents import WordDocument
from .index import Domain, Index
from .terms import foreign_terms

# Minimum difflib ratio for a vocabulary term to replace a misspelled query
ALIGN_CUTOFF = 0.8


class WordEngine(SearchEngine[WordDocument, Word]):
    def get_storage(self) -> ResourceStorage:
        return get_resources()

    def doc_to_output(self, storage: ResourceStorage, document: WordDocument) -> list[Word]:
        return storage.words().by_sequences(document.seq_ids)

    def output_key(self, output: Word) -> int:
        return output.sequence


class NativeWordEngine(WordEngine):
    """Searches words by their Japanese writing."""

    domain = Domain.WORDS_NATIVE

    def query_terms(self, query, language):
        return list(dict.fromkeys([query, *tokenize(query)]))


class ForeignWordEngine(WordEngine):
    """Searches words by their glosses in one language."""

    domain = Domain.WORDS_FOREIGN
    per_language = True

    def query_terms(self, query, language):
        return foreign_terms(query)

    def align_query(self, query: str, index: Index, language) -> str | None:
        term = query.strip().lower()
        if not term or index.has_term(term):
            return None
        matches = difflib.get_close_matches(term, index.get_vocabulary().terms(), n=1, cutoff=ALIGN_CUTOFF)
        return matches[0] if matches else None
