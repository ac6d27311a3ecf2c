"""Extraction of `#tag` directives from query strings."""

import re
from typing import Callable

from .schemas import Misc, PosSimple, SearchTarget, Tag

# A tag token: '#' followed by letters, digits and hyphens
TAG_REGEX = re.compile(r"#[a-zA-Z0-9\-]*")

ParseFn = Callable[[str], tuple[Tag | None, bool]]


def extract_parse(text: str, parse_fn: ParseFn) -> tuple[str, list[Tag]]:
    """Extract all tags from `text`.

    `parse_fn` receives every tag token and returns the parsed tag (if any)
    and whether the token should be removed from the text. Removed tokens
    at the start of the text or after whitespace take one trailing space
    with them. Returns the right-trimmed remaining
    text and the collected tags in order of appearance.
    """
    out = text
    tags: list[Tag] = []

    # `out` shrinks while we iterate over matches of `text`, so keep track
    # of how many characters were removed already
    delta = 0
    for match in TAG_REGEX.finditer(text):
        tag, remove = parse_fn(match.group())
        if tag is not None:
            tags.append(tag)

        if not remove:
            continue

        start = match.start() - delta
        end = match.end() - delta
        removed = match.end() - match.start()

        # Strip the following space only where the token stands on its own,
        # otherwise the text on both sides would be glued together
        stands_alone = start == 0 or out[start - 1].isspace()
        if text[match.end() : match.end() + 1] == " " and stands_alone:
            end += 1
            removed += 1

        out = out[:start] + out[end:]
        delta += removed

    return out.rstrip(), tags


def extract(text: str) -> tuple[str, list[Tag]]:
    """Extract recognized tags, leaving unknown `#tokens` in the text."""

    def parse_fn(token: str) -> tuple[Tag | None, bool]:
        tag = parse(token)
        return tag, tag is not None

    return extract_parse(text, parse_fn)


def parse(token: str) -> Tag | None:
    """Parse a single `#token` into a tag. Case-insensitive."""
    lowered = token.strip().lower()
    if not lowered.startswith("#"):
        return None
    name = lowered[1:]

    if name in ("hidden", "hide"):
        return Tag.hidden()
    if name in ("irrichidan", "irregularichidan", "irregular-ichidan"):
        return Tag.irregular_iru_eru()

    tag = _parse_genki_tag(name) or _parse_jlpt_tag(name) or _parse_search_type(name)
    if tag is not None:
        return tag

    pos = PosSimple.parse(name) if name else None
    if pos is not None:
        return Tag.part_of_speech(pos)
    return None


def _parse_jlpt_tag(name: str) -> Tag | None:
    """`n1` .. `n5`"""
    if not name.startswith("n"):
        return None
    number = name[1:]
    if not (number.isascii() and number.isdigit()):
        return None
    level = int(number)
    return Tag.jlpt(level) if 1 <= level <= 5 else None


def _parse_genki_tag(name: str) -> Tag | None:
    """`genki3` .. `genki23`"""
    if not name.startswith("genki"):
        return None
    number = name[len("genki") :]
    if not (number.isascii() and number.isdigit()):
        return None
    lesson = int(number)
    return Tag.genki_lesson(lesson) if 3 <= lesson <= 23 else None


def _parse_search_type(name: str) -> Tag | None:
    if name == "kanji":
        return Tag.search_type(SearchTarget.KANJI)
    if name in ("sentence", "sentences"):
        return Tag.search_type(SearchTarget.SENTENCES)
    if name in ("name", "names"):
        return Tag.search_type(SearchTarget.NAMES)
    if name in ("word", "words"):
        return Tag.search_type(SearchTarget.WORDS)
    if name in ("abbreviation", "abbrev"):
        return Tag.misc(Misc.ABBREVIATION)
    return None
