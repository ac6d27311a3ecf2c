"""Data schemas for search suggestions."""

from pydantic import BaseModel, Field


class SuggestionItem(BaseModel):
    """One line of a suggestion source file."""

    text: str
    sequence: int


class WordPair(BaseModel):
    """A suggested word: kana reading plus kanji writing if available."""

    primary: str
    secondary: str | None = None

    def has_reading(self, reading: str) -> bool:
        return self.primary == reading or self.secondary == reading


class SuggestionRequest(BaseModel):
    input: str
    lang: str = ""


class SuggestionResponse(BaseModel):
    suggestions: list[WordPair] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON body; `secondary` is omitted when absent."""
        return self.model_dump(exclude_none=True)
