"""Statistical helpers for TF-IDF vector-space scoring.

The functions here stay independent of the index so they can be unit tested
on plain mappings and reused by every scorer.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class CategoryWeights:
    """Term-frequency weight of each token category."""

    class_weight: float = 3.0
    method_weight: float = 2.0
    package_weight: float = 1.0
    import_weight: float = 0.5

    @property
    def total(self) -> float:
        return self.class_weight + self.method_weight + self.package_weight + self.import_weight


DEFAULT_WEIGHTS = CategoryWeights()


def calculate_idf(doc_freq: int, total_docs: int) -> float:
    """Return smoothed inverse document frequency.

    ``ln((N + 1) / (df + 1)) + 1`` stays strictly positive even for a token
    present in every document, and never divides by zero.
    """

    if total_docs < 0 or doc_freq < 0:
        raise ValueError(f"counts must be non-negative (df={doc_freq}, N={total_docs})")
    return math.log((total_docs + 1) / (doc_freq + 1)) + 1.0


def weighted_term_frequencies(
    categories: Iterable[tuple[Iterable[str], float]],
) -> dict[str, float]:
    """Return per-token term-frequency ratios from weighted token categories.

    A token present in several categories accumulates each category's weight.
    Ratios are normalized by the sum of every contribution so they add up to 1.
    """

    raw: dict[str, float] = defaultdict(float)
    for tokens, weight in categories:
        for token in tokens:
            raw[token] += weight

    total = sum(raw.values())
    if total <= 0:
        return {}
    return {token: weight / total for token, weight in raw.items()}


def vector_norm(vector: Mapping[str, float]) -> float:
    """Return the L2 norm of a sparse vector."""
    return math.sqrt(sum(value * value for value in vector.values()))


def dot_product(left: Mapping[str, float], right: Mapping[str, float]) -> float:
    if len(left) > len(right):
        left, right = right, left
    return sum(value * right.get(token, 0.0) for token, value in left.items())


def cosine_similarity(
    left: Mapping[str, float],
    right: Mapping[str, float],
    *,
    left_norm: float | None = None,
    right_norm: float | None = None,
) -> float:
    """Return cosine similarity, defined as 0.0 when either vector is zero."""

    if left_norm is None:
        left_norm = vector_norm(left)
    if right_norm is None:
        right_norm = vector_norm(right)
    if left_norm == 0.0 or right_norm == 0.0:
        return 0.0
    similarity = dot_product(left, right) / (left_norm * right_norm)
    # Rounding can push parallel vectors a hair past 1
    return min(max(similarity, 0.0), 1.0)


def jaccard_overlap(query_tokens: frozenset[str] | set[str], tokens: frozenset[str] | set[str]) -> float:
    """Return |A ∩ B| / |A ∪ B|, or 0.0 when either side is empty."""

    if not query_tokens or not tokens:
        return 0.0
    union = len(query_tokens | tokens)
    return len(query_tokens & tokens) / union
