"""Dictionary reading lookups used by suggestions and kanji compounds."""

import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from ..config import MAX_SUGGESTIONS, SUGGESTION_WORKERS
from .database import ReadOnlyDatabase, json_list
from .schemas import Dict, Reading

logger = logging.getLogger(__name__)

SUGGEST_SEQUENCES_SQL = """
    SELECT sequence FROM dict
    WHERE reading LIKE ? ESCAPE '\\'
    ORDER BY jlpt_lvl DESC NULLS LAST,
             json_array_length(priorities) DESC NULLS LAST,
             LENGTH(reading)
    LIMIT ?
"""

# Kana readings plus the main kanji writing of one entry
WORD_READINGS_SQL = "SELECT reading, kanji FROM dict WHERE sequence = ? AND (is_main = 1 OR kanji = 0) ORDER BY id"


def like_prefix(prefix: str) -> str:
    """LIKE pattern matching everything starting with `prefix`."""
    escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"{escaped}%"


class DictStore(ReadOnlyDatabase):
    """Read-only queries against the `dict` reading table."""

    REQUIRED_TABLES = {"dict"}

    def __init__(self, db_path: Path | None = None, workers: int = SUGGESTION_WORKERS):
        super().__init__(db_path)
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dict-store")

    def suggest_sequences(self, prefix: str, limit: int = MAX_SUGGESTIONS) -> list[int]:
        """Sequence ids of entries with a reading starting with `prefix`.

        Ordered by JLPT level (descending), number of priority markers
        (descending) and reading length. Duplicates are removed, so fewer
        than `limit` ids may be returned.
        """
        conn = self._get_conn()
        rows = conn.execute(SUGGEST_SEQUENCES_SQL, (like_prefix(prefix), limit)).fetchall()
        return list(dict.fromkeys(row["sequence"] for row in rows))

    def load_word_pairs(self, sequences: Iterable[int]) -> list[tuple[str, str | None]]:
        """(kana, kanji) reading pairs for `sequences`, in the given order.

        Each sequence is looked up concurrently; entries without a kana
        reading are dropped.
        """
        pairs = []
        for rows in self._executor.map(self._word_readings, list(sequences)):
            kana = next((row["reading"] for row in rows if not row["kanji"]), None)
            if kana is None:
                continue
            kanji = next((row["reading"] for row in rows if row["kanji"]), None)
            pairs.append((kana, kanji))
        return pairs

    def _word_readings(self, sequence: int) -> list[sqlite3.Row]:
        return self._get_conn().execute(WORD_READINGS_SQL, (sequence,)).fetchall()

    def candidates_for_literal(self, literal: str) -> list[Reading]:
        """Entries with a kanji writing starting with `literal`.

        Returns one (first kana, first kanji) reading pair per entry, in
        order of the entries' first appearance.
        """
        conn = self._get_conn()
        seq_rows = conn.execute(
            "SELECT DISTINCT sequence FROM dict WHERE reading LIKE ? ESCAPE '\\' AND kanji = 1",
            (like_prefix(literal),),
        ).fetchall()
        sequences = [row["sequence"] for row in seq_rows]
        if not sequences:
            return []

        placeholders = ", ".join("?" for _ in sequences)
        rows = conn.execute(
            f"SELECT * FROM dict WHERE sequence IN ({placeholders}) ORDER BY id",
            sequences,
        ).fetchall()

        grouped: dict[int, list[Dict]] = {}
        for row in rows:
            grouped.setdefault(row["sequence"], []).append(_row_to_dict(row))

        candidates = []
        for dicts in grouped.values():
            kana = next((d for d in dicts if not d.kanji), None)
            kanji = next((d for d in dicts if d.kanji), None)
            if kana is None or kanji is None:
                continue
            candidates.append(Reading(kana=kana, kanji=kanji))
        return candidates

    def load_by_ids(self, ids: Iterable[int]) -> list[Dict]:
        ids = list(ids)
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        rows = self._get_conn().execute(f"SELECT * FROM dict WHERE id IN ({placeholders}) ORDER BY id", ids).fetchall()
        return [_row_to_dict(row) for row in rows]

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
        self.close()


def _row_to_dict(row: sqlite3.Row) -> Dict:
    priorities = json_list(row["priorities"])
    return Dict(
        id=row["id"],
        sequence=row["sequence"],
        reading=row["reading"],
        kanji=bool(row["kanji"]),
        is_main=bool(row["is_main"]),
        priorities=priorities or None,
        jlpt_lvl=row["jlpt_lvl"],
    )


_dict_store: DictStore | None = None


def get_dict_store() -> DictStore:
    """Lazy load the process-wide dictionary store."""
    global _dict_store
    if _dict_store is None:
        _dict_store = DictStore()
    return _dict_store
