"""Data schemas for dictionary words, kanji and sentences."""

from enum import Enum

from pydantic import BaseModel, Field

from ..japanese import is_katakana, real_string_len
from ..languages import Language
from ..query.schemas import PosSimple


class Dict(BaseModel):
    """A single reading (kana or kanji writing) of a dictionary entry."""

    id: int | None = None
    sequence: int = 0
    reading: str
    kanji: bool = False
    is_main: bool = False
    priorities: list[str] | None = None  # JMdict priority markers, e.g. ["news1", "ichi1"]
    jlpt_lvl: int | None = None

    def __len__(self) -> int:
        return real_string_len(self.reading)


class Reading(BaseModel):
    """All readings of a word."""

    kana: Dict
    kanji: Dict | None = None
    alternative: list[Dict] = Field(default_factory=list)

    def get_reading(self) -> Dict:
        """The preferred reading: kanji writing if present."""
        return self.kanji or self.kana

    def is_katakana(self) -> bool:
        return self.kanji is None and is_katakana(self.kana.reading)


class Sense(BaseModel):
    """One meaning of a word in one language."""

    language: Language = Language.ENGLISH
    glosses: list[str] = Field(default_factory=list)
    part_of_speech: list[str] = Field(default_factory=list)  # JMdict codes: n, v1, v5r, adj-i, ...
    misc: list[str] = Field(default_factory=list)

    def simple_pos(self) -> list[PosSimple]:
        out = []
        for code in self.part_of_speech:
            pos = PosSimple.from_jmdict(code)
            if pos is not None and pos not in out:
                out.append(pos)
        return out


class Word(BaseModel):
    """A dictionary word."""

    sequence: int
    reading: Reading
    senses: list[Sense] = Field(default_factory=list)
    priorities: list[str] | None = None
    jlpt_lvl: int | None = None
    genki_lesson: int | None = None
    furigana: str | None = None

    def is_common(self) -> bool:
        return bool(self.get_reading().priorities)

    def get_reading(self) -> Dict:
        return self.reading.get_reading()

    def is_katakana_word(self) -> bool:
        return self.reading.is_katakana()

    def senses_by_lang(self, language: Language) -> list[Sense]:
        return [s for s in self.senses if s.language == language]

    def has_language(self, language: Language) -> bool:
        return any(s.language == language for s in self.senses)

    def glosses(self, language: Language | None = None) -> list[str]:
        senses = self.senses if language is None else self.senses_by_lang(language)
        return [gloss for sense in senses for gloss in sense.glosses]

    def get_senses(self, english_on_top: bool = False) -> list[list[Sense]]:
        """Senses split into (non-English, English), swapped if `english_on_top`."""
        english = [s for s in self.senses if s.language == Language.ENGLISH]
        other = [s for s in self.senses if s.language != Language.ENGLISH]
        return [english, other] if english_on_top else [other, english]

    def glosses_pretty(self) -> str:
        other, english = self.get_senses()
        senses = other or english
        return ", ".join(gloss for sense in senses for gloss in sense.glosses)

    def part_of_speech(self) -> list[str]:
        return [pos for sense in self.senses for pos in sense.part_of_speech]

    def retain_languages(self, language: Language, show_english: bool) -> "Word":
        """Copy of this word with only the senses a user wants to see."""
        keep = [
            s for s in self.senses if s.language == language or (show_english and s.language == Language.ENGLISH)
        ]
        return self.model_copy(update={"senses": keep})


class ReadingType(str, Enum):
    KUNYOMI = "kunyomi"
    ONYOMI = "onyomi"


class Kanji(BaseModel):
    """A kanji character with its readings."""

    id: int
    literal: str
    meaning: list[str] = Field(default_factory=list)
    grade: int | None = None
    stroke_count: int = 0
    frequency: int | None = None
    jlpt: int | None = None
    onyomi: list[str] = Field(default_factory=list)
    kunyomi: list[str] = Field(default_factory=list)
    kun_dicts: list[int] = Field(default_factory=list)  # dict ids matching a kun reading

    def school_str(self) -> str | None:
        if self.grade is None:
            return None
        return f"Taught in {self.grade} grade"

    def in_kun_reading(self, reading: str) -> bool:
        return reading in self.kunyomi

    def in_on_reading(self, reading: str) -> bool:
        return reading in self.onyomi

    def has_reading(self, reading: str) -> bool:
        return self.in_kun_reading(reading) or self.in_on_reading(reading)

    def get_reading_type(self, reading: str) -> ReadingType | None:
        """Kunyomi or onyomi, or None if the reading is both or neither."""
        in_on = self.in_on_reading(reading)
        in_kun = self.in_kun_reading(reading)
        if in_on and not in_kun:
            return ReadingType.ONYOMI
        if in_kun and not in_on:
            return ReadingType.KUNYOMI
        return None

    def format_reading(self, reading: str, reading_type: ReadingType) -> str:
        """Written form of a reading, e.g. `ふる.い` -> `古い`."""
        if reading_type == ReadingType.ONYOMI:
            return self.literal
        if "." in reading:
            okurigana = reading.split(".")[1]
            return f"{self.literal}{okurigana}".replace("-", "")
        return self.literal


class Sentence(BaseModel):
    """An example sentence with its translations."""

    id: int
    japanese: str
    furigana: str = ""
    translations: dict[Language, str] = Field(default_factory=dict)
    jlpt: int | None = None

    def has_translation(self, language: Language) -> bool:
        return language in self.translations

    def translation_for(self, language: Language) -> str | None:
        return self.translations.get(language)

    def get_translation(self, language: Language, allow_english: bool = True) -> str | None:
        text = self.translation_for(language)
        if text is None and allow_english:
            text = self.translation_for(Language.ENGLISH)
        return text
