"""Sparse vectors and cosine similarity."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

D = TypeVar("D")


class SparseVector:
    """A sparse vector mapping dimension -> weight."""

    __slots__ = ("_weights", "_norm")

    def __init__(self, weights: dict[int, float] | None = None):
        self._weights = {int(dim): float(w) for dim, w in (weights or {}).items() if w != 0}
        self._norm: float | None = None

    @classmethod
    def from_dimensions(cls, dimensions: Iterable[int], weight: float = 1.0) -> "SparseVector":
        return cls({dim: weight for dim in dimensions})

    @property
    def weights(self) -> dict[int, float]:
        return self._weights

    def dimensions(self) -> list[int]:
        """Dimensions with a non-zero weight, ascending."""
        return sorted(self._weights)

    def is_empty(self) -> bool:
        return not self._weights

    def norm(self) -> float:
        if self._norm is None:
            self._norm = math.sqrt(sum(w * w for w in self._weights.values()))
        return self._norm

    def dot(self, other: "SparseVector") -> float:
        small, large = (self, other) if len(self) <= len(other) else (other, self)
        return sum(w * large._weights.get(dim, 0.0) for dim, w in small._weights.items())

    def similarity(self, other: "SparseVector") -> float:
        return cosine_similarity(self, other)

    def __len__(self) -> int:
        return len(self._weights)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SparseVector) and self._weights == other._weights

    def __repr__(self) -> str:
        return f"SparseVector({self._weights!r})"


def cosine_similarity(a: SparseVector, b: SparseVector) -> float:
    """Compute cosine similarity between two sparse vectors, clamped to [0, 1]."""
    norm_a = a.norm()
    norm_b = b.norm()
    if norm_a == 0 or norm_b == 0:
        return 0.0
    similarity = a.dot(b) / (norm_a * norm_b)
    return min(max(similarity, 0.0), 1.0)


@dataclass
class DocumentVector(Generic[D]):
    """A vector together with the document it represents."""

    vector: SparseVector
    document: D
    metadata: dict[str, Any] = field(default_factory=dict)

    def similarity(self, other: "DocumentVector | SparseVector") -> float:
        other_vec = other.vector if isinstance(other, DocumentVector) else other
        return cosine_similarity(self.vector, other_vec)
