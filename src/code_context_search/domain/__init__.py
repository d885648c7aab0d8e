"""Domain layer - ingestion schema and search value objects.

This layer contains:
- Value Objects describing structural facts about code (CodeElement, Method)
- Value Objects describing ranked output (ScoredDocument, SearchOutcome)

No dependencies on the index or tokenizer implementations.
"""

from code_context_search.domain.model import CodeElement, Method, load_code_elements
from code_context_search.domain.search import ScoredDocument, SearchOutcome


__all__ = [
    "CodeElement",
    "Method",
    "ScoredDocument",
    "SearchOutcome",
    "load_code_elements",
]
