"""Matching kanji kun readings against dictionary compounds.

Kun readings use two markers: ``.`` separates the stem from its okurigana
(``ふる.い``) and ``-`` marks a side where more characters may follow
(``ふる-``) or precede (``-ふる``).
"""

import functools
from enum import Enum
from typing import Callable

from .japanese import real_string_len
from .storage.schemas import Dict, Reading

# At most this many compounds are kept per kanji
MAX_KUN_COMPOUNDS = 10

MorphemeCounter = Callable[[str], int | None]


class MatchMode(str, Enum):
    EXACT = "exact"
    LEFT_VARIABLE = "left_variable"  # text may continue after the pattern
    RIGHT_VARIABLE = "right_variable"  # text may start before the pattern

    def str_eq(self, text: str, pattern: str) -> bool:
        if self == MatchMode.LEFT_VARIABLE:
            return text.startswith(pattern)
        if self == MatchMode.RIGHT_VARIABLE:
            return text.endswith(pattern)
        return text == pattern


def format_reading(reading: str) -> str:
    """Plain kana of a kun/on reading, e.g. `ふる.い` -> `ふるい`."""
    return reading.replace("-", "").replace(".", "")


def kun_len(kun: str) -> int:
    return real_string_len(format_reading(kun))


def kun_literal_reading(kun: str) -> str:
    """The part of a kun reading written by the kanji itself, e.g. `ふる.い` -> `ふる`."""
    return kun.replace("-", "").split(".")[0]


def kun_matches_kanji(literal: str, kun: str, kana_reading: str, kanji_reading: str) -> bool:
    """Whether an entry (`kana_reading` / `kanji_reading`) reads `literal` as `kun`."""
    if kun.startswith("-"):
        mode = MatchMode.RIGHT_VARIABLE
    elif kun.endswith("-") or kanji_reading.startswith(literal):
        mode = MatchMode.LEFT_VARIABLE
    else:
        mode = MatchMode.EXACT

    kanji_out = kun.replace("-", "")
    if "." in kun:
        stem = kun.split(".")[0]
        kanji_out = kanji_out.replace(f"{stem}.", literal)
    else:
        kanji_out = literal

    expected = kanji_out.replace(literal, kun_literal_reading(kun))
    return mode.str_eq(kana_reading, expected)


def _item_order(items: list[str], a: str, b: str) -> int | None:
    if a not in items or b not in items:
        return None
    return items.index(a) - items.index(b)


def _compare(a: Dict, b: Dict, clean_kuns: list[str], count_morphemes: MorphemeCounter | None) -> int:
    a_kun = a.reading in clean_kuns
    b_kun = b.reading in clean_kuns
    if a_kun and b_kun:
        order = _item_order(clean_kuns, a.reading, b.reading)
        if order is not None:
            return order
    elif a_kun:
        return -1
    elif b_kun:
        return 1

    if count_morphemes is not None:
        a_parsed = count_morphemes(a.reading)
        b_parsed = count_morphemes(b.reading)
        if a_parsed is not None and b_parsed is not None:
            if a_parsed == 1 and b_parsed > 0:
                return -1
            if a_parsed > 1 and b_parsed == 0:
                return 1

    a_prio = bool(a.priorities)
    b_prio = bool(b.priorities)
    if a_prio != b_prio:
        return -1 if a_prio else 1

    if (a.jlpt_lvl is None) != (b.jlpt_lvl is None):
        return -1 if a.jlpt_lvl is not None else 1
    if a.jlpt_lvl is not None and b.jlpt_lvl is not None:
        # Easier (higher N) levels first
        return b.jlpt_lvl - a.jlpt_lvl

    return 0


def find_kun_compounds(
    literal: str,
    kuns: list[str],
    candidates: list[Reading],
    count_morphemes: MorphemeCounter | None = None,
) -> list[int]:
    """Sequence ids of the compounds among `candidates` that use a kun reading of `literal`.

    Args:
        literal: The kanji
        kuns: Its kun readings, most important first
        candidates: Entries whose kanji writing starts with `literal`
        count_morphemes: Optional tokenizer callback; without it compounds
            are not ranked by how many morphemes they consist of

    Returns:
        At most ten sequence ids. Only when more than ten compounds qualify
        are they ranked (kun-reading text first, then single morphemes,
        common words, JLPT words) before truncating.
    """
    matches: list[Dict] = []
    for candidate in candidates:
        if candidate.kanji is None:
            continue
        kana = candidate.kana
        for kun in kuns:
            if kun_matches_kanji(literal, kun, kana.reading, candidate.kanji.reading) and kun_len(kun) <= len(kana):
                matches.append(candidate.kanji)
                break

    if len(matches) > MAX_KUN_COMPOUNDS:
        clean_kuns = [kun_literal_reading(kun) for kun in kuns]
        key = functools.cmp_to_key(lambda a, b: _compare(a, b, clean_kuns, count_morphemes))
        matches.sort(key=key)
        matches = matches[:MAX_KUN_COMPOUNDS]

    return [match.sequence for match in matches]
