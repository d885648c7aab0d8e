"""Ranked retrieval over the inverted index.

``CodeSearcher.search`` narrows the corpus through postings, scores only the
candidates and keeps the best ``max_results`` in a bounded min-heap whose
acceptance floor rises as the heap fills. Cost is O(|candidates| * log K)
instead of sorting the whole corpus.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import heapq
import logging
import threading

from code_context_search.domain.search import ScoredDocument
from code_context_search.observability.metrics import SEARCH_COUNT, SEARCH_LATENCY, track_latency
from code_context_search.observability.tracing import create_span
from code_context_search.search.document import TokenizedDocument
from code_context_search.search.index import IndexSnapshot, InvertedIndex
from code_context_search.search.scoring import QueryVector, Scorer, get_scorer


logger = logging.getLogger(__name__)


class TopKCollector:
    """Bounded min-heap keeping the ``capacity`` best-scoring documents.

    Heap entries are ``(score, -ordinal, document)`` so the root is the lowest
    score and, among equal scores, the latest document in corpus order.
    Offers must arrive in ascending ordinal order for ties to favor earlier
    documents.
    """

    def __init__(self, capacity: int, floor: float) -> None:
        self.capacity = max(capacity, 0)
        self.floor = floor
        self._heap: list[tuple[float, int, TokenizedDocument]] = []

    def offer(self, document: TokenizedDocument, score: float, ordinal: int) -> bool:
        if self.capacity == 0 or score <= self.floor:
            return False

        entry = (score, -ordinal, document)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
        else:
            heapq.heapreplace(self._heap, entry)

        if len(self._heap) == self.capacity:
            # Nothing at or below the weakest retained score can enter any more
            self.floor = max(self.floor, self._heap[0][0])
        return True

    def __len__(self) -> int:
        return len(self._heap)

    def drain(self) -> list[ScoredDocument]:
        """Return retained documents by descending score, earliest first on ties."""
        entries = sorted(self._heap, key=lambda entry: (-entry[0], -entry[1]))
        self._heap = []
        return [ScoredDocument(document=document, score=score) for score, _neg_ordinal, document in entries]


class CodeSearcher:
    """Rank tokenized code documents against query tokens.

    The index is built lazily on the first search for a corpus and reused for
    every later search over the same corpus object. ``rebuild`` replaces it
    explicitly.
    """

    def __init__(
        self,
        index: InvertedIndex | None = None,
        *,
        scorer: Scorer | None = None,
        score_floor: float | None = None,
    ) -> None:
        self.index = index if index is not None else InvertedIndex()
        self.scorer = scorer if scorer is not None else get_scorer(None, self.index.weights)
        self.score_floor = score_floor if score_floor is not None else self.scorer.default_floor
        # (corpus, snapshot) pair swapped as one reference
        self._current: tuple[Sequence[TokenizedDocument], IndexSnapshot] | None = None
        self._corpus_lock = threading.Lock()

    def rebuild(self, corpus: Sequence[TokenizedDocument]) -> IndexSnapshot:
        """Build a new snapshot for ``corpus`` and make it current."""
        with self._corpus_lock:
            snapshot = self.index.build(corpus)
            self._current = (corpus, snapshot)
        return snapshot

    def _ensure_index(self, corpus: Sequence[TokenizedDocument]) -> IndexSnapshot:
        current = self._current
        if current is not None and current[0] is corpus:
            return current[1]
        with self._corpus_lock:
            current = self._current
            if current is not None and current[0] is corpus:
                return current[1]
            snapshot = self.index.build(corpus)
            self._current = (corpus, snapshot)
            return snapshot

    def search(
        self,
        query_tokens: Iterable[str],
        corpus: Sequence[TokenizedDocument],
        max_results: int,
    ) -> list[ScoredDocument]:
        """Return up to ``max_results`` documents ordered by descending score.

        Empty queries, queries with no known token, ``max_results <= 0`` and
        candidate sets with nothing above the floor all return an empty list.
        """
        tokens = frozenset(query_tokens)
        if not tokens:
            logger.warning("No query tokens provided for search")
            self._count("empty")
            return []
        if max_results <= 0:
            self._count("empty")
            return []

        with (
            create_span(
                "search.query",
                attributes={"search.tokens": len(tokens), "search.scorer": self.scorer.name},
            ) as span,
            track_latency(SEARCH_LATENCY, scorer=self.scorer.name),
        ):
            snapshot = self._ensure_index(corpus)
            results = self._rank(tokens, snapshot, max_results)
            span.set_attribute("search.results", len(results))

        self._count("hit" if results else "empty")
        logger.info("Found %d matching elements", len(results))
        return results

    def _count(self, outcome: str) -> None:
        SEARCH_COUNT.labels(scorer=self.scorer.name, outcome=outcome).inc()

    def _rank(self, tokens: frozenset[str], snapshot: IndexSnapshot, max_results: int) -> list[ScoredDocument]:
        query = QueryVector.from_tokens(tokens, snapshot)
        if query.is_zero():
            logger.debug("No query token is in the vocabulary: %s", sorted(tokens))
            return []

        candidates = snapshot.ordered_candidates(query.weights)
        logger.debug(
            "Scoring %d of %d documents for tokens: %s",
            len(candidates),
            snapshot.document_count,
            sorted(query.weights),
        )

        collector = TopKCollector(max_results, self.score_floor)
        for document in candidates:
            score = self.scorer.score(query, document, snapshot)
            collector.offer(document, score, snapshot.ordinals[document])
        return collector.drain()
