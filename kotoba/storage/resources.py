"""In-memory word and sentence resources."""

import json
import logging
import threading
from pathlib import Path
from typing import Iterable

from ..errors import AlreadyInitializedError, NotInitializedError
from .schemas import Sentence, Word

logger = logging.getLogger(__name__)

WORDS_FILE = "words.json"
SENTENCES_FILE = "sentences.json"


class WordStorage:
    """Words keyed by sequence id."""

    def __init__(self, words: Iterable[Word] = ()):
        self._words = {word.sequence: word for word in words}

    def by_sequence(self, sequence: int) -> Word | None:
        return self._words.get(sequence)

    def by_sequences(self, sequences: Iterable[int]) -> list[Word]:
        """Words for `sequences` in the given order, skipping unknown ids."""
        return [self._words[seq] for seq in sequences if seq in self._words]

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self):
        return iter(self._words.values())


class SentenceStorage:
    """Sentences keyed by id."""

    def __init__(self, sentences: Iterable[Sentence] = ()):
        self._sentences = {sentence.id: sentence for sentence in sentences}

    def by_id(self, sentence_id: int) -> Sentence | None:
        return self._sentences.get(sentence_id)

    def __len__(self) -> int:
        return len(self._sentences)

    def __iter__(self):
        return iter(self._sentences.values())


class ResourceStorage:
    """Read-only words and sentences shared by all searches."""

    def __init__(self, words: WordStorage | None = None, sentences: SentenceStorage | None = None):
        self._words = words or WordStorage()
        self._sentences = sentences or SentenceStorage()

    def words(self) -> WordStorage:
        return self._words

    def sentences(self) -> SentenceStorage:
        return self._sentences

    @classmethod
    def load(cls, resources_dir: Path) -> "ResourceStorage":
        """Load `words.json` and `sentences.json` from `resources_dir`.

        A missing file yields an empty storage for that kind.
        """
        resources_dir = Path(resources_dir)
        words = [Word.model_validate(w) for w in _read_list(resources_dir / WORDS_FILE)]
        sentences = [Sentence.model_validate(s) for s in _read_list(resources_dir / SENTENCES_FILE)]
        logger.info("Loaded %d words and %d sentences from %s", len(words), len(sentences), resources_dir)
        return cls(WordStorage(words), SentenceStorage(sentences))


def _read_list(path: Path) -> list[dict]:
    if not path.exists():
        logger.warning("Resource file %s not found", path)
        return []
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return data


_resources: ResourceStorage | None = None
_resources_lock = threading.Lock()


def init_resources(resources: ResourceStorage) -> None:
    global _resources
    with _resources_lock:
        if _resources is not None:
            raise AlreadyInitializedError("Resources already initialized")
        _resources = resources


def get_resources() -> ResourceStorage:
    if _resources is None:
        raise NotInitializedError("Resources not initialized")
    return _resources


def resources_initialized() -> bool:
    return _resources is not None
