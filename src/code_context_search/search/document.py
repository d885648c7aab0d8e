"""Pre-tokenized search documents built from code elements."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from code_context_search.domain.model import CodeElement
from code_context_search.search.tokenizer import CodeTokenizer


def import_tail(import_path: str) -> str:
    """Return the last dot-separated segment of an import path."""
    parts = [part for part in import_path.split(".") if part]
    return parts[-1] if parts else import_path


@dataclass(frozen=True, eq=False)
class TokenizedDocument:
    """One searchable unit holding four categorized token sets.

    Immutable after construction. Equality and hashing are by identity so two
    classes with identical names still count as distinct documents.
    """

    element: CodeElement
    class_tokens: frozenset[str] = frozenset()
    method_tokens: frozenset[str] = frozenset()
    package_tokens: frozenset[str] = frozenset()
    import_tokens: frozenset[str] = frozenset()
    all_tokens: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        union = self.class_tokens | self.method_tokens | self.package_tokens | self.import_tokens
        object.__setattr__(self, "all_tokens", union)

    @classmethod
    def from_element(cls, element: CodeElement, tokenizer: CodeTokenizer) -> TokenizedDocument:
        method_tokens: set[str] = set()
        for method in element.methods:
            method_tokens |= tokenizer.tokenize(method.name)

        import_tokens: set[str] = set()
        for import_path in element.imports:
            import_tokens |= tokenizer.tokenize(import_tail(import_path))

        return cls(
            element=element,
            class_tokens=frozenset(tokenizer.tokenize(element.class_name)),
            method_tokens=frozenset(method_tokens),
            package_tokens=frozenset(tokenizer.tokenize(element.package_name)),
            import_tokens=frozenset(import_tokens),
        )

    @property
    def class_name(self) -> str:
        return self.element.class_name

    def __repr__(self) -> str:
        return f"TokenizedDocument(class_name={self.element.class_name!r}, tokens={len(self.all_tokens)})"


def tokenize_elements(elements: Iterable[CodeElement], tokenizer: CodeTokenizer) -> list[TokenizedDocument]:
    """Tokenize a corpus, preserving element order."""
    return [TokenizedDocument.from_element(element, tokenizer) for element in elements]
