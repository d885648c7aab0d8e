"""Unit tests for the ingestion schema."""

from pydantic import ValidationError
import pytest

from code_context_search.domain.model import CodeElement, Method, load_code_elements


@pytest.mark.unit
class TestCodeElement:
    """Collections default to empty values, never None."""

    def test_defaults(self):
        element = CodeElement()

        assert element.class_name == ""
        assert element.package_name == ""
        assert element.methods == []
        assert element.imports == []
        assert element.extends_class is None
        assert element.implements_interfaces == []

    def test_null_fields_become_empty(self):
        element = CodeElement.model_validate(
            {
                "class_name": None,
                "package_name": None,
                "methods": None,
                "imports": None,
                "implements_interfaces": None,
            }
        )

        assert element.class_name == ""
        assert element.methods == []
        assert element.imports == []
        assert element.implements_interfaces == []

    def test_method_names_accept_bare_strings(self):
        element = CodeElement.model_validate({"class_name": "Repo", "methods": ["save", {"name": "find"}]})

        assert element.methods == [Method(name="save"), Method(name="find")]
        assert element.method_names == ["save", "find"]

    def test_method_defaults(self):
        method = Method.model_validate({"name": "run", "return_type": None, "parameters": None})

        assert method.return_type == ""
        assert method.parameters == []

    def test_frozen(self):
        element = CodeElement(class_name="UserService")

        with pytest.raises(ValidationError):
            element.class_name = "Other"

    def test_method_requires_name(self):
        with pytest.raises(ValidationError):
            CodeElement.model_validate({"methods": [{"return_type": "int"}]})


@pytest.mark.unit
class TestLoadCodeElements:
    def test_validates_records_in_order(self, sample_records):
        elements = load_code_elements(sample_records)

        assert [element.class_name for element in elements] == [
            "UserService",
            "DataProcessor",
            "XMLHttpRequestFactory",
            "ReportGenerator",
        ]
        assert elements[2].extends_class == "AbstractFactory"
        assert elements[0].methods[0].parameters == ["String", "String"]

    def test_existing_elements_pass_through(self):
        element = CodeElement(class_name="Cache")

        assert load_code_elements([element])[0] is element

    def test_malformed_record_raises(self):
        with pytest.raises(ValidationError):
            load_code_elements([{"imports": "java.util.List"}])
