"""Ingestion schema for structural facts extracted from source files.

An external extractor (language parser, repository walker) hands the core one
record per class. These models pin that boundary down:
- Value Objects are immutable (frozen=True)
- Every collection field has a defined default, never ``None``
- Malformed records fail at construction with ``pydantic.ValidationError``
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Method(BaseModel):
    """A method declared on a code element."""

    model_config = ConfigDict(frozen=True)

    name: str
    return_type: str = ""
    parameters: list[str] = Field(default_factory=list)

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("return_type", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class CodeElement(BaseModel):
    """Value object for one class-level unit of source code.

    Carries everything a formatter needs to render the element later:
    names, method signatures, imports and inheritance.
    """

    model_config = ConfigDict(frozen=True)

    class_name: str = ""
    package_name: str = ""
    methods: list[Method] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)
    extends_class: str | None = None
    implements_interfaces: list[str] = Field(default_factory=list)

    @field_validator("methods", mode="before")
    @classmethod
    def _coerce_methods(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        # Bare strings are accepted as method names
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @field_validator("imports", "implements_interfaces", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("class_name", "package_name", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def method_names(self) -> list[str]:
        return [method.name for method in self.methods]


def load_code_elements(records: Iterable[Mapping[str, Any] | CodeElement]) -> list[CodeElement]:
    """Validate raw extractor records into ``CodeElement`` values.

    Already-validated elements pass through untouched.
    """

    elements: list[CodeElement] = []
    for record in records:
        if isinstance(record, CodeElement):
            elements.append(record)
        else:
            elements.append(CodeElement.model_validate(record))
    return elements
