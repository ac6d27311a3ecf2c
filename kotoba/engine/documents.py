"""Document payloads stored in the vector-space indices."""

from pydantic import BaseModel, ConfigDict, Field


class WordDocument(BaseModel):
    """A word sense; may be shared by several equivalent entries."""

    model_config = ConfigDict(frozen=True)

    seq_ids: list[int] = Field(default_factory=list)


class SentenceDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    seq_id: int
    jlpt: int | None = None


class KanjiDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    literal: str
