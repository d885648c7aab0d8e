"""Lexical code search over tokenized source identifiers.

Builds a TF-IDF vector-space model over code elements (classes with their
methods, package and imports) and ranks them against free-text prompts.
"""

from code_context_search.engine import CodeSearchEngine


__all__ = ["CodeSearchEngine"]
