"""Script detection and kana conversion helpers."""

_HIRAGANA_START = 0x3041
_HIRAGANA_END = 0x3096
_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6

SENTENCE_PUNCTUATION = frozenset("。、！？「」『』")


def is_hiragana_char(char: str) -> bool:
    code = ord(char)
    return _HIRAGANA_START <= code <= _HIRAGANA_END or char in ("ゝ", "ゞ")


def is_katakana_char(char: str) -> bool:
    code = ord(char)
    return _KATAKANA_START <= code <= _KATAKANA_END or char in ("ー", "ヽ", "ヾ")


def is_kana_char(char: str) -> bool:
    return is_hiragana_char(char) or is_katakana_char(char)


def is_kanji_char(char: str) -> bool:
    """Check if a single character is a CJK ideograph (incl. 々)."""
    code = ord(char)
    return (
        0x4E00 <= code <= 0x9FFF
        or 0x3400 <= code <= 0x4DBF
        or 0xF900 <= code <= 0xFAFF
        or 0x20000 <= code <= 0x2A6DF
        or char == "々"
    )


def is_japanese_char(char: str) -> bool:
    return is_kana_char(char) or is_kanji_char(char) or char in SENTENCE_PUNCTUATION


def is_roman_letter(char: str) -> bool:
    """True for ASCII and full-width latin letters."""
    return ("a" <= char.lower() <= "z") or ("ａ" <= char.lower() <= "ｚ")


def is_hiragana(text: str) -> bool:
    return bool(text) and all(is_hiragana_char(c) for c in text)


def is_katakana(text: str) -> bool:
    return bool(text) and all(is_katakana_char(c) for c in text)


def is_kana(text: str) -> bool:
    return bool(text) and all(is_kana_char(c) for c in text)


def is_kanji(text: str) -> bool:
    return bool(text) and all(is_kanji_char(c) for c in text)


def is_japanese(text: str) -> bool:
    """True if every non-space character is Japanese script."""
    chars = [c for c in text if not c.isspace()]
    return bool(chars) and all(is_japanese_char(c) for c in chars)


def has_japanese(text: str) -> bool:
    return any(is_kana_char(c) or is_kanji_char(c) for c in text)


def has_kanji(text: str) -> bool:
    return any(is_kanji_char(c) for c in text)


def kanji_literals(text: str) -> list[str]:
    """Kanji characters of `text`, deduplicated, in order of first occurrence."""
    seen: list[str] = []
    for char in text:
        if is_kanji_char(char) and char != "々" and char not in seen:
            seen.append(char)
    return seen


def to_katakana(text: str) -> str:
    """Convert hiragana to katakana, leaving everything else untouched."""
    res = []
    for c in text:
        code = ord(c)
        if _HIRAGANA_START <= code <= _HIRAGANA_END:
            res.append(chr(code + 0x60))
        else:
            res.append(c)
    return "".join(res)


def to_hiragana(text: str) -> str:
    """Convert katakana to hiragana, leaving everything else untouched."""
    res = []
    for c in text:
        code = ord(c)
        if _KATAKANA_START <= code <= _KATAKANA_END:
            res.append(chr(code - 0x60))
        else:
            res.append(c)
    return "".join(res)


def real_string_len(text: str) -> int:
    """Length in characters (code points), not bytes."""
    return len(text)
