"""Japanese morphological tokenizer (MeCab via fugashi), lazy loaded."""

import logging

logger = logging.getLogger(__name__)

_tagger = None


def get_tagger():
    """Lazy load the fugashi tagger. Returns None if it cannot be created."""
    global _tagger
    if _tagger is None:
        try:
            from fugashi import Tagger

            _tagger = Tagger()
        except Exception as e:
            logger.warning("Failed to load tokenizer: %s", e)
            return None
    return _tagger


def tokenize(text: str) -> list[str]:
    """Surface forms of the morphemes in `text`. Empty if no tokenizer is available."""
    tagger = get_tagger()
    if tagger is None or not text:
        return []
    return [word.surface for word in tagger(text) if word.surface.strip()]


def lemmas(text: str) -> list[str]:
    """Dictionary forms of the morphemes in `text`, falling back to the surface form."""
    tagger = get_tagger()
    if tagger is None or not text:
        return []
    out = []
    for word in tagger(text):
        lemma = getattr(word.feature, "lemma", None) or word.surface
        if lemma.strip():
            out.append(lemma)
    return out


def morpheme_count(text: str) -> int | None:
    """Number of morphemes in `text`, or None without a tokenizer."""
    tagger = get_tagger()
    if tagger is None:
        return None
    return len(tagger(text))
