"""Code search engine facade.

Wires the tokenizer, inverted index and ranked searcher behind three calls:

- ``ingest(elements)``: tokenize a corpus and build its index
- ``search(prompt, max_results)``: rank the corpus against a free-text prompt
- ``rebuild()``: rebuild the index from the current corpus
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import time
from typing import Any

from code_context_search.config import Settings
from code_context_search.domain.model import CodeElement, load_code_elements
from code_context_search.domain.search import SearchOutcome
from code_context_search.search.document import TokenizedDocument, tokenize_elements
from code_context_search.search.index import InvertedIndex
from code_context_search.search.prompt import PromptAnalyzer
from code_context_search.search.scoring import Scorer, get_scorer
from code_context_search.search.searcher import CodeSearcher
from code_context_search.search.tokenizer import CodeTokenizer


logger = logging.getLogger(__name__)


class CodeSearchEngine:
    """Search a corpus of code elements with free-text prompts.

    One tokenizer is shared between corpus ingestion and prompt analysis so
    both sides produce comparable tokens.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        tokenizer: CodeTokenizer | None = None,
        scorer: Scorer | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.tokenizer = tokenizer if tokenizer is not None else CodeTokenizer(self.settings.token_cache_size)
        self.prompt_analyzer = PromptAnalyzer(self.tokenizer)
        weights = self.settings.category_weights()
        self.searcher = CodeSearcher(
            InvertedIndex(weights),
            scorer=scorer if scorer is not None else get_scorer(self.settings.scorer, weights),
            score_floor=self.settings.score_floor,
        )
        self._documents: tuple[TokenizedDocument, ...] = ()

    @property
    def documents(self) -> tuple[TokenizedDocument, ...]:
        return self._documents

    def ingest(self, elements: Iterable[CodeElement | Mapping[str, Any]]) -> tuple[TokenizedDocument, ...]:
        """Replace the corpus with ``elements`` and build its index.

        Raw mappings are validated through the ``CodeElement`` schema.
        """
        validated = load_code_elements(elements)
        documents = tuple(tokenize_elements(validated, self.tokenizer))
        logger.info("Analyzed %d code elements", len(documents))
        self._documents = documents
        self.searcher.rebuild(documents)
        return documents

    def rebuild(self) -> None:
        """Rebuild the index from the current corpus."""
        self.searcher.rebuild(self._documents)

    def search(self, prompt: str | None, max_results: int | None = None) -> SearchOutcome:
        limit = self.settings.max_results if max_results is None else max_results
        query = prompt or ""
        start = time.perf_counter()

        tokens = self.prompt_analyzer.analyze(prompt)
        if not tokens:
            return SearchOutcome(
                query=query,
                search_time=time.perf_counter() - start,
                scorer=self.searcher.scorer.name,
                warning="Prompt produced no tokens",
            )
        if not self._documents:
            return SearchOutcome(
                query=query,
                query_tokens=frozenset(tokens),
                search_time=time.perf_counter() - start,
                scorer=self.searcher.scorer.name,
                warning="No code elements ingested",
            )

        results = self.searcher.search(tokens, self._documents, limit)
        return SearchOutcome(
            query=query,
            query_tokens=frozenset(tokens),
            results=tuple(results),
            search_time=time.perf_counter() - start,
            scorer=self.searcher.scorer.name,
        )
