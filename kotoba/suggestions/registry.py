"""Per-language prefix search over suggestion source files.

A source file is named after its language (``en-US``, ``de-DE``, ...) and
holds one entry per line: ``<text>,<sequence id>``. The text may itself
contain commas; the sequence id is the last field.
"""

import logging
import threading
from pathlib import Path
from typing import Iterable

import marisa_trie

from ..errors import AlreadyInitializedError, NotInitializedError
from ..languages import Language
from .schemas import SuggestionItem

logger = logging.getLogger(__name__)


def parse_line(line: str) -> SuggestionItem:
    """Parse `text,sequence`.

    Raises:
        ValueError: If the line has no integer sequence id
    """
    text, sep, number = line.rpartition(",")
    if not sep:
        raise ValueError(f"Missing sequence id: {line!r}")
    return SuggestionItem(text=text, sequence=int(number.strip()))


def load_file(path: Path) -> list[SuggestionItem]:
    """Load all entries of a suggestion file.

    Blank lines are ignored. A single malformed line fails the whole file.

    Raises:
        ValueError: If any line is malformed
    """
    items = []
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                items.append(parse_line(line))
            except ValueError as e:
                raise ValueError(f"{path.name}:{lineno}: {e}") from e
    return items


class TextSearch:
    """Case-insensitive prefix search over suggestion items."""

    def __init__(self, items: Iterable[SuggestionItem]):
        self.items = list(items)
        self._trie = marisa_trie.RecordTrie("<I", ((item.text.lower(), (pos,)) for pos, item in enumerate(self.items)))

    def search(self, prefix: str, limit: int | None = None) -> list[SuggestionItem]:
        """Items starting with `prefix`, in source file order."""
        prefix = prefix.lower()
        if not prefix:
            return []
        positions = sorted(pos for _, (pos,) in self._trie.items(prefix))
        if limit is not None:
            positions = positions[:limit]
        return [self.items[pos] for pos in positions]

    def __len__(self) -> int:
        return len(self.items)


class SuggestionSearch:
    """Text searches keyed by language."""

    def __init__(self, searches: dict[Language, TextSearch] | None = None):
        self._searches = searches or {}

    def search(self, query: str, language: Language, limit: int | None = None) -> list[SuggestionItem] | None:
        """Prefix matches for `query`; None if no suggestions exist for `language`."""
        text_search = self._searches.get(language)
        if text_search is None:
            return None
        return text_search.search(query, limit)

    def languages(self) -> list[Language]:
        return list(self._searches)

    def __len__(self) -> int:
        return len(self._searches)


def load_suggestions(suggestion_dir: Path) -> SuggestionSearch:
    """Load one suggestion file per language from `suggestion_dir`."""
    searches: dict[Language, TextSearch] = {}
    suggestion_dir = Path(suggestion_dir)
    if not suggestion_dir.is_dir():
        logger.warning("Suggestion directory %s does not exist", suggestion_dir)
        return SuggestionSearch(searches)

    for path in sorted(suggestion_dir.iterdir()):
        if not path.is_file():
            continue
        language = Language.parse(path.name) or Language.parse(path.stem)
        if language is None:
            logger.debug("Skipping %s: not a language", path.name)
            continue

        try:
            items = load_file(path)
        except (OSError, ValueError) as e:
            logger.warning("Skipping suggestion file %s: %s", path.name, e)
            continue

        searches[language] = TextSearch(items)
        logger.info("Loaded %s suggestion file (%d entries)", language.value, len(items))

    return SuggestionSearch(searches)


_suggestions: SuggestionSearch | None = None
_suggestions_lock = threading.Lock()


def init_suggestions(suggestions: SuggestionSearch) -> None:
    """Publish the suggestion registry. May only be called once."""
    global _suggestions
    with _suggestions_lock:
        if _suggestions is not None:
            raise AlreadyInitializedError("Suggestions already initialized")
        _suggestions = suggestions


def get_suggestions_registry() -> SuggestionSearch:
    if _suggestions is None:
        raise NotInitializedError("Suggestions not initialized")
    return _suggestions


def suggestions_initialized() -> bool:
    return _suggestions is not None
