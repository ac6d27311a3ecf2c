"""Languages supported by the dictionary."""

from enum import Enum


class Language(str, Enum):
    """A dictionary language, valued by its locale code."""

    ENGLISH = "en-US"
    GERMAN = "de-DE"
    RUSSIAN = "ru"
    SPANISH = "es-ES"
    SWEDISH = "sv-SE"
    FRENCH = "fr-FR"
    DUTCH = "nl-NL"
    HUNGARIAN = "hu"
    SLOVENIAN = "sl-SI"
    JAPANESE = "ja"

    @classmethod
    def parse(cls, value: str | None) -> "Language | None":
        """Parse a locale code, ISO 639 code or English name.

        Returns None for unknown values.
        """
        if not value:
            return None
        key = value.strip().lower().replace("_", "-")
        return _ALIASES.get(key) or _ALIASES.get(key.split("-")[0])

    @classmethod
    def parse_or_default(cls, value: str | None) -> "Language":
        return cls.parse(value) or cls.ENGLISH

    @property
    def short_code(self) -> str:
        return self.value.split("-")[0].lower()


_ALIASES: dict[str, Language] = {}
for _lang, _codes in {
    Language.ENGLISH: ("en", "eng", "english"),
    Language.GERMAN: ("de", "ger", "deu", "german"),
    Language.RUSSIAN: ("ru", "rus", "russian"),
    Language.SPANISH: ("es", "spa", "spanish"),
    Language.SWEDISH: ("sv", "swe", "swedish"),
    Language.FRENCH: ("fr", "fre", "fra", "french"),
    Language.DUTCH: ("nl", "dut", "nld", "dutch"),
    Language.HUNGARIAN: ("hu", "hun", "hungarian"),
    Language.SLOVENIAN: ("sl", "slv", "slovenian"),
    Language.JAPANESE: ("ja", "jp", "jpn", "japanese"),
}.items():
    _ALIASES[_lang.value.lower()] = _lang
    for _code in _codes:
        _ALIASES[_code] = _lang
