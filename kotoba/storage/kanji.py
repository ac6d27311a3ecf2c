"""Cache-backed kanji lookups."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from ..config import KANJI_CACHE_SIZE
from .cache import SharedCache
from .database import ReadOnlyDatabase, json_list
from .schemas import Kanji

logger = logging.getLogger(__name__)


class KanjiStore(ReadOnlyDatabase):
    """Kanji by literal or id.

    Every lookup batch holds the cache lock while it collects cache hits,
    loads the misses from the database and writes them back. The cache is
    keyed by id; `_literal_ids` maps the literals of cached kanji to their
    ids and is kept in step with evictions.
    """

    REQUIRED_TABLES = {"kanji"}

    def __init__(self, db_path: Path | None = None, cache: SharedCache[int, Kanji] | None = None):
        super().__init__(db_path)
        self.cache = cache if cache is not None else SharedCache(KANJI_CACHE_SIZE)
        self.cache.on_evict = self._forget
        self._literal_ids: dict[str, int] = {}

    def by_literal(self, literal: str) -> Kanji | None:
        with self.cache.lock:
            kanji = self._cached_by_literal(literal)
            if kanji is not None:
                return kanji

            rows = self._select("literal = ?", [literal])
            if not rows:
                return None
            kanji = _row_to_kanji(rows[0])
            self._remember([kanji])
            return kanji

    def by_id(self, kanji_id: int) -> Kanji | None:
        found = self.load_by_ids([kanji_id])
        return found[0] if found else None

    def find_by_literals(self, literals: Iterable[str]) -> list[Kanji]:
        """Kanji for all known `literals`: cached ones first, then freshly loaded ones."""
        wanted = list(dict.fromkeys(literals))
        if not wanted:
            return []

        with self.cache.lock:
            cached = []
            missing = []
            for literal in wanted:
                kanji = self._cached_by_literal(literal)
                if kanji is not None:
                    cached.append(kanji)
                else:
                    missing.append(literal)

            loaded = self._load_where_in("literal", missing)
            self._remember(loaded)

        logger.debug("Kanji lookup: %d cached, %d loaded", len(cached), len(loaded))
        return cached + loaded

    def load_by_ids(self, ids: Iterable[int]) -> list[Kanji]:
        """Kanji for all known `ids`: freshly loaded ones first, then cached ones."""
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []

        with self.cache.lock:
            cached = self.cache.get_values(wanted)
            cached_ids = {k.id for k in cached}
            missing = [kanji_id for kanji_id in wanted if kanji_id not in cached_ids]

            loaded = self._load_where_in("id", missing)
            self._remember(loaded)

        return loaded + cached

    def _cached_by_literal(self, literal: str) -> Kanji | None:
        kanji_id = self._literal_ids.get(literal)
        if kanji_id is None:
            return None
        kanji = self.cache.get(kanji_id)
        if kanji is None:
            # Cache was cleared
            del self._literal_ids[literal]
        return kanji

    def _remember(self, kanji_list: list[Kanji]) -> None:
        for kanji in kanji_list:
            self.cache.set(kanji.id, kanji)
            self._literal_ids[kanji.literal] = kanji.id

    def _forget(self, kanji_id: int, kanji: Kanji) -> None:
        if self._literal_ids.get(kanji.literal) == kanji_id:
            del self._literal_ids[kanji.literal]

    def _load_where_in(self, column: str, values: list) -> list[Kanji]:
        if not values:
            return []
        placeholders = ", ".join("?" for _ in values)
        rows = self._select(f"{column} IN ({placeholders})", values)
        return [_row_to_kanji(row) for row in rows]

    def _select(self, where: str, params: list) -> list[sqlite3.Row]:
        conn = self._get_conn()
        cursor = conn.execute(f"SELECT * FROM kanji WHERE {where} ORDER BY id", params)
        return cursor.fetchall()


def _row_to_kanji(row: sqlite3.Row) -> Kanji:
    return Kanji(
        id=row["id"],
        literal=row["literal"],
        meaning=json_list(row["meaning"]),
        grade=row["grade"],
        stroke_count=row["stroke_count"],
        frequency=row["frequency"],
        jlpt=row["jlpt"],
        onyomi=json_list(row["onyomi"]),
        kunyomi=json_list(row["kunyomi"]),
        kun_dicts=json_list(row["kun_dicts"]),
    )


_kanji_store: KanjiStore | None = None


def get_kanji_store() -> KanjiStore:
    """Lazy load the process-wide kanji store."""
    global _kanji_store
    if _kanji_store is None:
        _kanji_store = KanjiStore()
    return _kanji_store
