"""
Code search indexing and ranking package.

This package provides a pure-Python lexical retrieval stack:
- tokenizer: Multi-strategy identifier tokenizer with bounded memoization
- document: Pre-tokenized documents with categorized token sets
- stats: IDF, weighted term frequency, norms and similarity helpers
- index: Inverted index and TF-IDF vector-space snapshots
- scoring: Pluggable cosine and overlap scorers
- searcher: Candidate narrowing and bounded top-K ranking
- prompt: Free-text prompt analysis
"""
