"""Inverted index and TF-IDF vector-space model over tokenized documents.

``IndexSnapshot`` is an immutable value holding postings, IDF table, document
vectors and norms for one corpus. ``InvertedIndex`` publishes snapshots by
swapping a single reference, so readers always see one complete corpus state,
old or new, never a mix of both. Builds are serialized with a lock; reads
never take it.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import logging
import threading
from types import MappingProxyType

from code_context_search.exceptions import IndexNotBuiltError
from code_context_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOC_COUNT,
    INDEX_VOCABULARY_SIZE,
    track_latency,
)
from code_context_search.observability.tracing import create_span
from code_context_search.search.document import TokenizedDocument
from code_context_search.search.stats import (
    DEFAULT_WEIGHTS,
    CategoryWeights,
    calculate_idf,
    vector_norm,
    weighted_term_frequencies,
)


logger = logging.getLogger(__name__)

_EMPTY_VECTOR: Mapping[str, float] = MappingProxyType({})


@dataclass(frozen=True)
class IndexSnapshot:
    """Mutually consistent derived structures for one corpus."""

    documents: tuple[TokenizedDocument, ...]
    ordinals: Mapping[TokenizedDocument, int]
    postings: Mapping[str, frozenset[TokenizedDocument]]
    vocabulary: frozenset[str]
    idf: Mapping[str, float]
    vectors: Mapping[TokenizedDocument, Mapping[str, float]]
    norms: Mapping[TokenizedDocument, float]
    weights: CategoryWeights = DEFAULT_WEIGHTS

    @classmethod
    def build(
        cls,
        documents: Iterable[TokenizedDocument],
        weights: CategoryWeights = DEFAULT_WEIGHTS,
    ) -> IndexSnapshot:
        unique: list[TokenizedDocument] = []
        ordinals: dict[TokenizedDocument, int] = {}
        for document in documents:
            if document in ordinals:
                continue
            ordinals[document] = len(unique)
            unique.append(document)

        postings: dict[str, set[TokenizedDocument]] = defaultdict(set)
        for document in unique:
            for tokens in (
                document.class_tokens,
                document.method_tokens,
                document.package_tokens,
                document.import_tokens,
            ):
                for token in tokens:
                    postings[token].add(document)

        total_docs = len(unique)
        idf = {token: calculate_idf(len(docs), total_docs) for token, docs in postings.items()}

        vectors: dict[TokenizedDocument, Mapping[str, float]] = {}
        norms: dict[TokenizedDocument, float] = {}
        for document in unique:
            vector = _document_vector(document, idf, weights)
            vectors[document] = MappingProxyType(vector)
            norms[document] = vector_norm(vector)

        return cls(
            documents=tuple(unique),
            ordinals=MappingProxyType(ordinals),
            postings=MappingProxyType({token: frozenset(docs) for token, docs in postings.items()}),
            vocabulary=frozenset(postings),
            idf=MappingProxyType(idf),
            vectors=MappingProxyType(vectors),
            norms=MappingProxyType(norms),
            weights=weights,
        )

    @property
    def document_count(self) -> int:
        return len(self.documents)

    def get_candidates(self, query_tokens: Iterable[str]) -> set[TokenizedDocument]:
        candidates: set[TokenizedDocument] = set()
        for token in query_tokens:
            docs = self.postings.get(token)
            if docs:
                candidates |= docs
        return candidates

    def ordered_candidates(self, query_tokens: Iterable[str]) -> list[TokenizedDocument]:
        """Return candidates in corpus insertion order."""
        return sorted(self.get_candidates(query_tokens), key=self.ordinals.__getitem__)

    def build_query_vector(self, query_tokens: Iterable[str]) -> dict[str, float]:
        """Binary term presence times IDF; out-of-vocabulary tokens are dropped."""
        vector: dict[str, float] = {}
        for token in query_tokens:
            idf = self.idf.get(token)
            if idf is not None and idf > 0:
                vector[token] = 1.0 * idf
        return vector

    def get_document_vector(self, document: TokenizedDocument) -> Mapping[str, float]:
        return self.vectors.get(document, _EMPTY_VECTOR)

    def get_document_norm(self, document: TokenizedDocument) -> float:
        return self.norms.get(document, 0.0)

    def get_token_idf(self, token: str) -> float:
        return self.idf.get(token, 0.0)


def _document_vector(
    document: TokenizedDocument,
    idf: Mapping[str, float],
    weights: CategoryWeights,
) -> dict[str, float]:
    term_frequencies = weighted_term_frequencies(
        (
            (document.class_tokens, weights.class_weight),
            (document.method_tokens, weights.method_weight),
            (document.package_tokens, weights.package_weight),
            (document.import_tokens, weights.import_weight),
        )
    )
    vector: dict[str, float] = {}
    for token, tf in term_frequencies.items():
        tf_idf = tf * idf.get(token, 0.0)
        if tf_idf > 0:
            vector[token] = tf_idf
    return vector


class InvertedIndex:
    """Holder that publishes immutable index snapshots.

    Candidate and query-vector reads before the first ``build`` raise
    ``IndexNotBuiltError``.
    """

    def __init__(self, weights: CategoryWeights = DEFAULT_WEIGHTS) -> None:
        self.weights = weights
        self._snapshot: IndexSnapshot | None = None
        self._build_lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._snapshot is not None

    def build(self, documents: Sequence[TokenizedDocument]) -> IndexSnapshot:
        """Build a fresh snapshot from the whole corpus and publish it."""
        with self._build_lock:
            logger.info("Building inverted index for %d code elements", len(documents))
            with (
                create_span("index.build", attributes={"index.documents": len(documents)}) as span,
                track_latency(INDEX_BUILD_LATENCY),
            ):
                snapshot = IndexSnapshot.build(documents, self.weights)
                span.set_attribute("index.vocabulary", len(snapshot.vocabulary))

            self._snapshot = snapshot

        INDEX_DOC_COUNT.labels().set(snapshot.document_count)
        INDEX_VOCABULARY_SIZE.labels().set(len(snapshot.vocabulary))
        logger.info("Vector space model built with %d unique tokens", len(snapshot.vocabulary))
        return snapshot

    def snapshot(self) -> IndexSnapshot:
        """Return the current snapshot for a consistent series of reads."""
        return self._require("reading the index")

    def _require(self, operation: str) -> IndexSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise IndexNotBuiltError(operation)
        return snapshot

    def get_candidates(self, query_tokens: Iterable[str]) -> set[TokenizedDocument]:
        return self._require("searching").get_candidates(query_tokens)

    def build_query_vector(self, query_tokens: Iterable[str]) -> dict[str, float]:
        return self._require("creating query vector").build_query_vector(query_tokens)

    # Plain lookups fall back to empty values, built or not

    @property
    def vocabulary(self) -> frozenset[str]:
        snapshot = self._snapshot
        return snapshot.vocabulary if snapshot is not None else frozenset()

    def get_document_vector(self, document: TokenizedDocument) -> Mapping[str, float]:
        snapshot = self._snapshot
        return snapshot.get_document_vector(document) if snapshot is not None else _EMPTY_VECTOR

    def get_document_norm(self, document: TokenizedDocument) -> float:
        snapshot = self._snapshot
        return snapshot.get_document_norm(document) if snapshot is not None else 0.0

    def get_token_idf(self, token: str) -> float:
        snapshot = self._snapshot
        return snapshot.get_token_idf(token) if snapshot is not None else 0.0
