"""OpenAPI document models produced by the reader.

Fields are snake_case in Python and serialize to the camelCase OpenAPI
names through aliases (``model_dump(by_alias=True)``).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class _OpenApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExternalDocumentation(_OpenApiModel):
    url: str
    description: str | None = None


class MediaType(_OpenApiModel):
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class Parameter(_OpenApiModel):
    """A single operation parameter (path, query, header, or cookie)."""

    name: str
    in_: Literal["path", "query", "header", "cookie"] = Field(alias="in")
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = False
    allow_reserved: bool = False
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    content: dict[str, MediaType] | None = None


class RequestBody(_OpenApiModel):
    content: dict[str, MediaType]
    description: str | None = None
    required: bool = False


class ApiResponse(_OpenApiModel):
    description: str
    content: dict[str, MediaType] | None = None


class Operation(_OpenApiModel):
    """A single operation with everything the declarations provided."""

    responses: dict[str, ApiResponse]
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    deprecated: bool = False
    tags: list[str] = []
    external_docs: ExternalDocumentation | None = None
    parameters: list[Parameter] = []
    request_body: RequestBody | None = None
    callbacks: dict[str, dict[str, "PathItem"]] | None = None


class PathItem(_OpenApiModel):
    """Holds at most one operation per HTTP verb."""

    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operation(self, verb: str) -> Operation | None:
        return getattr(self, verb.lower())

    def operations(self) -> dict[str, Operation]:
        return {verb: op for verb in HTTP_METHODS if (op := getattr(self, verb)) is not None}


class Info(_OpenApiModel):
    title: str
    version: str
    description: str | None = None


class Components(_OpenApiModel):
    schemas: dict[str, dict[str, Any]] = {}


class Document(_OpenApiModel):
    """Root of the generated description."""

    openapi: str
    info: Info
    paths: dict[str, PathItem] = {}
    components: Components = Components()


Operation.model_rebuild()
