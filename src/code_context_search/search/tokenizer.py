"""Identifier tokenizer for source-code search.

Source identifiers rarely contain whitespace, so a single splitting rule
loses most of their meaning. ``CodeTokenizer`` runs five strategies over the
same input and unions their output:

- separator split on ``. _ - | $ @`` and whitespace
- camelCase / PascalCase boundaries, keeping uppercase runs together
- letter/digit transitions
- acronym runs of consecutive uppercase letters
- 3 to 6 character alphabetic shingles for partial matching

Character classes are ASCII only. Non-ASCII letters count as symbols and are
stripped before a part is kept.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Hashable
import re
import threading
from typing import Generic, TypeVar


_SEPARATOR_PATTERN = re.compile(r"[._|\-\s$@]+")
_LOWER_UPPER_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")
_UPPER_RUN_BOUNDARY = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")
_LETTER_DIGIT_BOUNDARY = re.compile(r"(?<=[A-Za-z])(?=[0-9])|(?<=[0-9])(?=[A-Za-z])")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_SPECIAL_CHARS_PATTERN = re.compile(r"[^A-Za-z0-9]+")
_ALPHA_PATTERN = re.compile(r"[A-Za-z]+")

MIN_SHINGLE_LENGTH = 3
MAX_SHINGLE_LENGTH = 6
DEFAULT_CACHE_SIZE = 10_000

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class TokenCache(Generic[K, V]):
    """Thread-safe LRU cache owned by a tokenizer.

    ``max_size=0`` disables caching entirely; every lookup is a miss.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        if max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {max_size}")
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: K, value: V) -> None:
        if self.max_size == 0:
            return
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute(key)
        self.put(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def split_separators(text: str) -> tuple[str, ...]:
    """Split on the fixed separator class, dropping empty parts."""
    return tuple(part for part in _SEPARATOR_PATTERN.split(text) if part)


def normalize_camel_case(text: str) -> str:
    """Insert spaces at camelCase boundaries.

    ``XMLHttpRequest`` becomes ``XML Http Request``: the uppercase run stays
    together and breaks only before the final capital that opens a word.
    """
    spaced = _LOWER_UPPER_BOUNDARY.sub(" ", text)
    return _UPPER_RUN_BOUNDARY.sub(" ", spaced)


def separate_digits(text: str) -> str:
    """Insert spaces at every letter/digit transition."""
    return _LETTER_DIGIT_BOUNDARY.sub(" ", text)


def _strip_symbols(part: str) -> str:
    return _SPECIAL_CHARS_PATTERN.sub("", part)


def _is_alpha(text: str) -> bool:
    return _ALPHA_PATTERN.fullmatch(text) is not None


def _is_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def separator_tokens(parts: tuple[str, ...]) -> set[str]:
    tokens: set[str] = set()
    for part in parts:
        clean = _strip_symbols(part)
        if len(clean) > 1 and _is_alpha(clean):
            tokens.add(clean.lower())
    return tokens


def camel_case_tokens(normalized: str) -> set[str]:
    tokens: set[str] = set()
    for part in _WHITESPACE_PATTERN.split(normalized):
        clean = _strip_symbols(part)
        if len(clean) > 1:
            tokens.add(clean.lower())
    return tokens


def numeric_tokens(text: str) -> set[str]:
    tokens: set[str] = set()
    for part in _WHITESPACE_PATTERN.split(separate_digits(text)):
        if len(part) > 1 and _is_alpha(part):
            tokens.add(part.lower())
    return tokens


def acronym_tokens(text: str) -> set[str]:
    tokens: set[str] = set()
    run: list[str] = []
    for char in text:
        if _is_upper(char):
            run.append(char)
            continue
        if len(run) > 1:
            tokens.add("".join(run).lower())
        run.clear()
    if len(run) > 1:
        tokens.add("".join(run).lower())
    return tokens


def shingle_tokens(text: str) -> set[str]:
    """Emit every alphabetic substring of length 3 through 6."""
    clean = _strip_symbols(text)
    if len(clean) < MIN_SHINGLE_LENGTH:
        return set()

    tokens: set[str] = set()
    lowered = clean.lower()
    for length in range(MIN_SHINGLE_LENGTH, min(MAX_SHINGLE_LENGTH, len(lowered)) + 1):
        for start in range(len(lowered) - length + 1):
            shingle = lowered[start : start + length]
            if _is_alpha(shingle):
                tokens.add(shingle)
    return tokens


class CodeTokenizer:
    """Multi-strategy tokenizer with per-instance memoization.

    Caches are owned by the tokenizer instance (or injected by the caller) and
    bounded by ``cache_size``. Returned sets are fresh copies; mutating them
    never touches cached state.
    """

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        *,
        cache: TokenCache[str, frozenset[str]] | None = None,
    ) -> None:
        self.cache: TokenCache[str, frozenset[str]] = cache if cache is not None else TokenCache(cache_size)
        self._separator_cache: TokenCache[str, tuple[str, ...]] = TokenCache(self.cache.max_size)
        self._camel_case_cache: TokenCache[str, str] = TokenCache(self.cache.max_size)

    def tokenize(self, text: str | None) -> set[str]:
        if not text:
            return set()

        cached = self.cache.get(text)
        if cached is not None:
            return set(cached)

        tokens = self._tokenize_uncached(text)
        self.cache.put(text, frozenset(tokens))
        return tokens

    __call__ = tokenize

    def _tokenize_uncached(self, text: str) -> set[str]:
        parts = self._separator_cache.get_or_compute(text, split_separators)
        normalized = self._camel_case_cache.get_or_compute(text, normalize_camel_case)

        tokens = separator_tokens(parts)
        tokens |= camel_case_tokens(normalized)
        tokens |= numeric_tokens(text)
        tokens |= acronym_tokens(text)
        tokens |= shingle_tokens(text)
        return tokens

    def clear_cache(self) -> None:
        self.cache.clear()
        self._separator_cache.clear()
        self._camel_case_cache.clear()
