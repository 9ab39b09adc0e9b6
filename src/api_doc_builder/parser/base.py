"""Descriptor models for endpoints discovered by source analysis.

Every front-end (descriptor dumps, OpenAPI documents) converts its input
into these models before the tree builder assembles the document.
"""

import json
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_VERSION = "HTTP/1.1"


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _header_pairs(value: Any) -> Any:
    # YAML dumps usually carry headers as a mapping
    if isinstance(value, dict):
        return list(value.items())
    return value


class ParameterCell(BaseModel):
    """One row of a parameter table, fields addressed by position."""

    name: str = ""
    type: str = ""
    required: str = ""  # required flag or validation text
    default: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _stringify(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: _scalar_text(v) for k, v in data.items()}
        return data

    def to_list(self) -> list[str]:
        return [self.name, self.type, self.required, self.default, self.description]

    def select_by_index(self, *positions: int) -> list[str]:
        """Return the values at ``positions`` in the order given."""
        values = self.to_list()
        return [values[i] for i in positions]


def _body_string(body: Any) -> str:
    if isinstance(body, str):
        return body
    return json.dumps(body, indent=2, ensure_ascii=False)


class HttpRequestDescriptor(BaseModel):
    """Request side of an endpoint: method, path aliases, headers and body."""

    method: str | None = None
    uris: list[str] = []
    query: dict[str, str] = {}
    headers: list[tuple[str, str]] = []
    body: Any = None
    cells: list[ParameterCell] = []

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        return _header_pairs(value)

    @field_validator("query", mode="before")
    @classmethod
    def _query_text(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): _scalar_text(v) for k, v in value.items()}
        return value

    @property
    def query_string(self) -> str:
        if not self.query:
            return ""
        return "?" + urlencode(self.query)

    def header_map(self) -> dict[str, str]:
        """Headers keyed by name; a repeated key keeps its last value."""
        return dict(self.headers)

    def has_body(self) -> bool:
        return self.body is not None and self.body != ""

    def body_string(self) -> str:
        return _body_string(self.body)


class HttpResponseDescriptor(BaseModel):
    """Response side of an endpoint."""

    status: int | None = None
    headers: list[tuple[str, str]] = []
    body: Any = None
    cells: list[ParameterCell] = []

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        return _header_pairs(value)

    def header_map(self) -> dict[str, str]:
        return dict(self.headers)

    def has_body(self) -> bool:
        return self.body is not None and self.body != ""

    def body_string(self) -> str:
        return _body_string(self.body)

    def is_empty(self) -> bool:
        return self.status is None and not self.has_body() and not self.cells


class EndpointDescriptor(BaseModel):
    """A single discovered operation plus the hints used to classify it."""

    name: str = ""
    description: str | None = None
    version: str = DEFAULT_VERSION
    request: HttpRequestDescriptor = Field(default_factory=HttpRequestDescriptor)
    response: HttpResponseDescriptor = Field(default_factory=HttpResponseDescriptor)
    group: str | None = None  # controller name
    group_id: str | None = None
    group_description: str | None = None
    bucket: str | None = None  # package / module
    tags: list[str] = []


class Classification(BaseModel):
    """Where a descriptor lands in the document tree."""

    bucket: str | None = None
    group: str
    group_id: str
