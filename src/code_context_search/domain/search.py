"""Value objects returned by a ranked search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from code_context_search.search.document import TokenizedDocument


@dataclass(frozen=True)
class ScoredDocument:
    """Represents a document paired with its relevance score."""

    document: TokenizedDocument
    score: float


@dataclass(frozen=True)
class SearchOutcome:
    """Complete answer to a free-text prompt.

    ``results`` are ordered by descending score. An empty tuple is a valid
    "nothing matched" answer, never a failure.
    """

    query: str
    query_tokens: frozenset[str] = frozenset()
    results: tuple[ScoredDocument, ...] = ()
    search_time: float = 0.0
    scorer: str = ""
    warning: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.results
