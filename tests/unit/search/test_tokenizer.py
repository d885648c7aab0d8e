"""Unit tests for the multi-strategy code tokenizer."""

import pytest

from code_context_search.search.tokenizer import (
    CodeTokenizer,
    TokenCache,
    acronym_tokens,
    normalize_camel_case,
    numeric_tokens,
    separate_digits,
    shingle_tokens,
    split_separators,
)


@pytest.mark.unit
class TestBasicInput:
    """Empty and trivial inputs produce no tokens."""

    @pytest.mark.parametrize("text", [None, "", "a", "_"])
    def test_empty_or_single_character(self, tokenizer, text):
        assert tokenizer.tokenize(text) == set()

    def test_repeated_calls_are_deterministic(self, tokenizer):
        first = tokenizer.tokenize("getUserNameFromDatabase")
        second = tokenizer.tokenize("getUserNameFromDatabase")

        assert first == second
        assert first == CodeTokenizer(cache_size=0).tokenize("getUserNameFromDatabase")

    def test_callable_alias(self, tokenizer):
        assert tokenizer("helloWorld") == tokenizer.tokenize("helloWorld")

    def test_exact_output_for_short_identifier(self, tokenizer):
        assert tokenizer.tokenize("getId") == {"getid", "get", "id", "eti", "tid", "geti", "etid"}


@pytest.mark.unit
class TestSeparatorSplit:
    @pytest.mark.parametrize("text", ["hello_world", "hello-world", "hello.world", "hello world", "hello|world"])
    def test_common_separators(self, tokenizer, text):
        tokens = tokenizer.tokenize(text)

        assert {"hello", "world"} <= tokens

    def test_consecutive_separators(self, tokenizer):
        assert {"hello", "world", "test"} <= tokenizer.tokenize("hello___world---test")

    def test_single_character_parts_dropped(self, tokenizer):
        tokens = tokenizer.tokenize("a_hello_b_world_c")

        assert {"hello", "world"} <= tokens
        assert not {"a", "b", "c"} & tokens

    def test_dollar_and_at_are_separators(self):
        assert split_separators("outer$inner@field") == ("outer", "inner", "field")


@pytest.mark.unit
class TestCamelCase:
    def test_simple_camel_case(self, tokenizer):
        assert {"hello", "world"} <= tokenizer.tokenize("helloWorld")

    def test_pascal_case(self, tokenizer):
        assert {"hello", "world"} <= tokenizer.tokenize("HelloWorld")

    def test_long_camel_case(self, tokenizer):
        tokens = tokenizer.tokenize("getUserNameFromDatabase")

        assert {"get", "user", "name", "from", "database"} <= tokens

    def test_uppercase_run_kept_together(self, tokenizer):
        assert normalize_camel_case("XMLHttpRequest") == "XML Http Request"
        assert {"xml", "http", "request"} <= tokenizer.tokenize("XMLHttpRequest")

    def test_camel_parts_keep_digits(self, tokenizer):
        assert "test123method" in tokenizer.tokenize("test123method")


@pytest.mark.unit
class TestNumericSeparation:
    def test_letters_split_from_digits(self, tokenizer):
        tokens = tokenizer.tokenize("test123method")

        assert {"test", "method"} <= tokens
        assert "123" not in tokens

    @pytest.mark.parametrize("text", ["123test", "test123"])
    def test_digits_at_either_end(self, tokenizer, text):
        assert "test" in tokenizer.tokenize(text)

    def test_pure_numbers_never_emitted(self, tokenizer):
        tokens = tokenizer.tokenize("test123method456")

        assert {"test", "method"} <= tokens
        assert not {"123", "456"} & tokens

    def test_every_transition_is_split(self):
        assert separate_digits("a1b2c3") == "a 1 b 2 c 3"
        assert numeric_tokens("ab1cd") == {"ab", "cd"}


@pytest.mark.unit
class TestAcronyms:
    def test_multiple_acronyms(self, tokenizer):
        tokens = tokenizer.tokenize("HTTPSConnectionAPI")

        assert {"https", "connection", "api"} <= tokens

    def test_acronym_at_end(self, tokenizer):
        assert "api" in tokenizer.tokenize("connectionAPI")

    def test_single_capitals_ignored(self, tokenizer):
        tokens = tokenizer.tokenize("AhelloBworld")

        assert not {"a", "b"} & tokens

    def test_runs_emitted_when_they_end(self):
        assert acronym_tokens("parseXMLandJSON") == {"xml", "json"}
        assert acronym_tokens("XMLHttpRequest") == {"xmlh"}


@pytest.mark.unit
class TestShingles:
    def test_lengths_three_to_six(self):
        shingles = shingle_tokens("abcdefg")

        assert {"abc", "efg", "abcd", "abcdef", "bcdefg"} <= shingles
        assert "abcdefg" not in shingles
        assert all(3 <= len(shingle) <= 6 for shingle in shingles)

    def test_short_text_has_no_shingles(self):
        assert shingle_tokens("ab") == set()
        assert shingle_tokens("a-b") == set()

    def test_shingles_skip_digits(self, tokenizer):
        assert tokenizer.tokenize("a1bc2def") == {"a1bc2def", "bc", "def"}

    def test_partial_word_matching(self, tokenizer):
        assert {"auth", "authen"} <= tokenizer.tokenize("authentication")


@pytest.mark.unit
class TestNonAscii:
    def test_non_ascii_letters_are_stripped(self, tokenizer):
        assert tokenizer.tokenize("café") == {"caf"}


@pytest.mark.unit
class TestTokenizerCache:
    def test_returned_set_is_a_copy(self, tokenizer):
        tokens = tokenizer.tokenize("helloWorld")
        tokens.add("injected")
        tokens.discard("hello")

        again = tokenizer.tokenize("helloWorld")

        assert "injected" not in again
        assert "hello" in again

    def test_second_lookup_hits_cache(self, tokenizer):
        tokenizer.tokenize("UserService")
        tokenizer.tokenize("UserService")

        assert tokenizer.cache.hits == 1
        assert tokenizer.cache.misses == 1
        assert "UserService" in tokenizer.cache

    def test_cache_is_bounded(self):
        tokenizer = CodeTokenizer(cache_size=2)
        for text in ("alpha", "bravo", "charlie", "delta"):
            tokenizer.tokenize(text)

        assert len(tokenizer.cache) == 2
        assert "alpha" not in tokenizer.cache
        assert "delta" in tokenizer.cache

    def test_zero_size_disables_caching(self):
        tokenizer = CodeTokenizer(cache_size=0)

        assert {"hello", "world"} <= tokenizer.tokenize("helloWorld")
        assert len(tokenizer.cache) == 0

    def test_injected_cache_is_used(self):
        cache: TokenCache[str, frozenset[str]] = TokenCache(8)
        tokenizer = CodeTokenizer(cache=cache)

        tokenizer.tokenize("parseXml")

        assert "parseXml" in cache

    def test_clear_cache(self, tokenizer):
        tokenizer.tokenize("parseXml")
        tokenizer.clear_cache()

        assert len(tokenizer.cache) == 0
        assert tokenizer.cache.hits == 0


@pytest.mark.unit
class TestTokenCache:
    def test_least_recently_used_entry_is_evicted(self):
        cache: TokenCache[str, int] = TokenCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        assert cache.get("a") == 1

        cache.put("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    def test_get_or_compute_computes_once(self):
        cache: TokenCache[str, str] = TokenCache(4)
        calls = []

        def compute(key):
            calls.append(key)
            return key.upper()

        assert cache.get_or_compute("x", compute) == "X"
        assert cache.get_or_compute("x", compute) == "X"
        assert calls == ["x"]

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError, match="max_size"):
            TokenCache(-1)
