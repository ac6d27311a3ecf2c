"""Query term splitting shared by the foreign-language engines."""

import re

_WORD_RE = re.compile(r"[^\W_]+(?:['-][^\W_]+)*")


def foreign_terms(query: str) -> list[str]:
    """The lowercased query followed by its individual words, without duplicates.

    >>> foreign_terms("To Eat")
    ['to eat', 'to', 'eat']
    """
    text = " ".join(query.lower().split())
    if not text:
        return []
    return list(dict.fromkeys([text, *_WORD_RE.findall(text)]))
