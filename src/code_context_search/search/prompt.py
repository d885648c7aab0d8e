"""Turn free-text prompts into query tokens."""

import logging

from code_context_search.search.tokenizer import CodeTokenizer


logger = logging.getLogger(__name__)


class PromptAnalyzer:
    """Tokenize user prompts with the same tokenizer used for code elements."""

    def __init__(self, tokenizer: CodeTokenizer | None = None) -> None:
        self.tokenizer = tokenizer if tokenizer is not None else CodeTokenizer()

    def analyze(self, prompt: str | None) -> set[str]:
        if prompt is None or not prompt.strip():
            logger.warning("Empty or null prompt provided")
            return set()

        tokens = self.tokenizer.tokenize(prompt)
        logger.debug("Extracted %d tokens from prompt: %s", len(tokens), sorted(tokens))
        return tokens
