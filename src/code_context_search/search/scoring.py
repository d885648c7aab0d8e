"""Pluggable relevance scorers for ranked code search.

Every scorer maps a query and one candidate document to a score in [0, 1]
using a single index snapshot:

- ``CosineScorer``: TF-IDF vector-space cosine similarity (canonical)
- ``OverlapScorer``: category-weighted Jaccard overlap, no IDF involved
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

from code_context_search.search.document import TokenizedDocument
from code_context_search.search.index import IndexSnapshot
from code_context_search.search.stats import (
    DEFAULT_WEIGHTS,
    CategoryWeights,
    cosine_similarity,
    jaccard_overlap,
    vector_norm,
)


@dataclass(frozen=True)
class QueryVector:
    """Ephemeral query representation built against one snapshot."""

    tokens: frozenset[str]
    weights: Mapping[str, float]
    norm: float

    @classmethod
    def from_tokens(cls, tokens: frozenset[str], snapshot: IndexSnapshot) -> QueryVector:
        weights = snapshot.build_query_vector(tokens)
        return cls(tokens=tokens, weights=weights, norm=vector_norm(weights))

    def is_zero(self) -> bool:
        return self.norm == 0.0


class Scorer(Protocol):
    """Protocol implemented by relevance scorers."""

    name: str
    default_floor: float

    def score(
        self, query: QueryVector, document: TokenizedDocument, snapshot: IndexSnapshot
    ) -> float:  # pragma: no cover - interface definition
        ...


class CosineScorer:
    """Cosine similarity between the query vector and a document's TF-IDF vector."""

    name = "cosine"
    default_floor = 0.01

    def score(self, query: QueryVector, document: TokenizedDocument, snapshot: IndexSnapshot) -> float:
        return cosine_similarity(
            query.weights,
            snapshot.get_document_vector(document),
            left_norm=query.norm,
            right_norm=snapshot.get_document_norm(document),
        )


class OverlapScorer:
    """Weighted Jaccard overlap across the four token categories.

    Each category contributes ``|Q ∩ C| / |Q ∪ C|`` times its weight; the sum
    is divided by the weight total so scores stay within [0, 1]. The floor is
    ``RAW_FLOOR`` on the unnormalized weighted sum, rescaled the same way.
    """

    name = "overlap"
    RAW_FLOOR = 0.15

    def __init__(self, weights: CategoryWeights = DEFAULT_WEIGHTS) -> None:
        self.default_floor = self.RAW_FLOOR / weights.total

    def score(self, query: QueryVector, document: TokenizedDocument, snapshot: IndexSnapshot) -> float:
        weights = snapshot.weights
        tokens = query.tokens
        total = (
            jaccard_overlap(tokens, document.class_tokens) * weights.class_weight
            + jaccard_overlap(tokens, document.method_tokens) * weights.method_weight
            + jaccard_overlap(tokens, document.package_tokens) * weights.package_weight
            + jaccard_overlap(tokens, document.import_tokens) * weights.import_weight
        )
        return total / weights.total


_SCORER_FACTORIES: dict[str, Callable[[CategoryWeights], Scorer]] = {
    "cosine": lambda _weights: CosineScorer(),
    "overlap": OverlapScorer,
}


def get_scorer(name: str | None, weights: CategoryWeights = DEFAULT_WEIGHTS) -> Scorer:
    """Return scorer by name, defaulting to cosine similarity.

    ``weights`` must match the index the scorer ranks against.
    """

    if name is None:
        return _SCORER_FACTORIES["cosine"](weights)
    normalized = name.lower()
    if normalized not in _SCORER_FACTORIES:
        msg = f"Unknown scorer '{name}'. Available: {sorted(_SCORER_FACTORIES)}"
        raise ValueError(msg)
    return _SCORER_FACTORIES[normalized](weights)
