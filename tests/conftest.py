"""Shared test fixtures and configuration."""

import os

import pytest

from code_context_search.domain.model import CodeElement, Method
from code_context_search.search.document import TokenizedDocument
from code_context_search.search.tokenizer import CodeTokenizer


# Settings read CODE_SEARCH_* variables; keep the host environment out of tests
for key in [name for name in os.environ if name.upper().startswith("CODE_SEARCH_")]:
    del os.environ[key]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop any CODE_SEARCH_* variables set during a test session."""
    for key in list(os.environ):
        if key.upper().startswith("CODE_SEARCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def tokenizer() -> CodeTokenizer:
    return CodeTokenizer(cache_size=128)


@pytest.fixture
def sample_records() -> list[dict]:
    """Raw extractor records, as an external parser would hand them over."""
    return [
        {
            "class_name": "UserService",
            "package_name": "com.example.auth",
            "methods": [
                {"name": "authenticateUser", "return_type": "boolean", "parameters": ["String", "String"]},
                {"name": "login"},
            ],
            "imports": ["java.util.List", "com.example.model.UserRepository"],
        },
        {
            "class_name": "DataProcessor",
            "package_name": "com.example.pipeline",
            "methods": ["processData"],
            "imports": None,
        },
        {
            "class_name": "XMLHttpRequestFactory",
            "package_name": "com.example.http",
            "methods": ["createRequest", "parseXml"],
            "imports": ["java.net.HttpURLConnection"],
            "extends_class": "AbstractFactory",
            "implements_interfaces": ["RequestFactory"],
        },
        {
            "class_name": "ReportGenerator",
            "package_name": "com.example.reporting",
            "methods": ["generatePdfReport", "exportCsv"],
            "imports": ["java.io.File"],
        },
    ]


@pytest.fixture
def sample_elements(sample_records) -> list[CodeElement]:
    return [CodeElement.model_validate(record) for record in sample_records]


@pytest.fixture
def sample_corpus(sample_elements, tokenizer) -> list[TokenizedDocument]:
    return [TokenizedDocument.from_element(element, tokenizer) for element in sample_elements]


@pytest.fixture
def two_class_corpus(tokenizer) -> list[TokenizedDocument]:
    """Two-class corpus used by the end-to-end ranking checks."""
    user_service = CodeElement(
        class_name="UserService",
        methods=[Method(name="authenticateUser"), Method(name="login")],
    )
    data_processor = CodeElement(class_name="DataProcessor", methods=[Method(name="processData")])
    return [
        TokenizedDocument.from_element(user_service, tokenizer),
        TokenizedDocument.from_element(data_processor, tokenizer),
    ]


@pytest.fixture
def make_document():
    """Factory building documents with exact token sets, bypassing the tokenizer."""

    def _make(
        *,
        class_tokens=(),
        method_tokens=(),
        package_tokens=(),
        import_tokens=(),
        class_name: str = "",
    ) -> TokenizedDocument:
        return TokenizedDocument(
            element=CodeElement(class_name=class_name),
            class_tokens=frozenset(class_tokens),
            method_tokens=frozenset(method_tokens),
            package_tokens=frozenset(package_tokens),
            import_tokens=frozenset(import_tokens),
        )

    return _make
