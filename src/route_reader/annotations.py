"""Declarative route metadata for resource classes.

Decorators record metadata on the decorated class or function under
``__route_meta__``. The reader never calls the decorated code; it only
reads what was recorded here::

    @path("/pets")
    @tags("pets")
    class PetResource:
        @GET
        @path("/{petId}")
        @operation(summary="Info for a specific pet")
        @api_response("200", "The pet", content=[Content("application/json", Pet)])
        def get_pet(self, pet_id: Annotated[str, PathParam("petId")]) -> Pet: ...

Argument metadata goes inside ``typing.Annotated``: one of the binding
markers (``PathParam``, ``QueryParam``, ``HeaderParam``, ``CookieParam``),
a ``Parameter`` declaration, or a ``RequestBody`` declaration.
"""

from typing import Any, Callable, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

META_ATTR = "__route_meta__"

# Metadata kinds whose values accumulate instead of replacing each other.
REPEATABLE_KINDS = ("tags", "responses", "callbacks")

T = TypeVar("T")


# -- declaration models -------------------------------------------------------


class _Declaration(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)


class ExternalDocs(_Declaration):
    url: str
    description: str | None = None


class Content(_Declaration):
    """One media-type entry of a request or response body.

    ``media_type`` may be left out, in which case the reader picks one from
    the surrounding consumes/produces declarations.
    """

    media_type: str | None = None
    schema_type: Any = None

    def __init__(self, media_type: str | None = None, schema_type: Any = None, **data: Any):
        super().__init__(media_type=media_type, schema_type=schema_type, **data)


class Parameter(_Declaration):
    """Parameter declaration, on an argument or in ``operation(parameters=...)``."""

    name: str | None = None
    in_: str | None = Field(default=None, alias="in")
    description: str | None = None
    required: bool | None = None
    deprecated: bool = False
    allow_empty_value: bool = False
    allow_reserved: bool = False
    schema_type: Any = None
    content: tuple[Content, ...] = ()


class RequestBody(_Declaration):
    description: str | None = None
    required: bool = False
    content: tuple[Content, ...] = ()


class ApiResponse(_Declaration):
    code: str = "default"
    description: str | None = None
    content: tuple[Content, ...] = ()

    def __init__(self, code: str | int = "default", description: str | None = None, **data: Any):
        super().__init__(code=str(code), description=description, **data)


class OperationInfo(_Declaration):
    """Operation-level fields.

    Used by ``operation()`` on methods, and as the nested operation of a
    ``Callback``, where ``method`` names the HTTP verb.
    """

    method: str | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    tags: tuple[str, ...] = ()
    deprecated: bool | None = None
    hidden: bool | None = None
    external_docs: ExternalDocs | None = None
    parameters: tuple[Parameter, ...] = ()
    request_body: RequestBody | None = None
    responses: tuple[ApiResponse, ...] = ()
    callbacks: tuple["Callback", ...] = ()


class Callback(_Declaration):
    name: str
    expression: str | None = None
    operations: tuple[OperationInfo, ...] = ()


OperationInfo.model_rebuild()


# -- argument binding markers -------------------------------------------------


class _Binding(_Declaration):
    location: str = ""
    name: str | None = None

    def __init__(self, name: str | None = None, **data: Any):
        super().__init__(name=name, **data)


class PathParam(_Binding):
    location: str = "path"


class QueryParam(_Binding):
    location: str = "query"


class HeaderParam(_Binding):
    location: str = "header"


class CookieParam(_Binding):
    location: str = "cookie"


Binding = _Binding


# -- recording ----------------------------------------------------------------


def get_metadata(target: Any) -> dict[str, Any]:
    """Return metadata declared directly on ``target`` (never inherited)."""
    target = getattr(target, "__func__", target)
    return vars(target).get(META_ATTR, {}) if hasattr(target, "__dict__") else {}


def _record(target: T, kind: str, value: Any) -> T:
    raw = getattr(target, "__func__", target)
    meta = vars(raw).get(META_ATTR)
    if meta is None:
        meta = {}
        setattr(raw, META_ATTR, meta)
    if kind in REPEATABLE_KINDS:
        # decorators apply bottom-up; prepend to keep source order
        meta[kind] = list(value) + meta.get(kind, [])
    else:
        meta[kind] = value
    return target


def _marker(kind: str, value: Any) -> Callable[[T], T]:
    def decorator(target: T) -> T:
        return _record(target, kind, value)

    return decorator


def _verb(name: str) -> Callable[[T], T]:
    def decorator(func: T) -> T:
        return _record(func, "http_method", name)

    decorator.__name__ = name.upper()
    return decorator


GET = _verb("get")
PUT = _verb("put")
POST = _verb("post")
DELETE = _verb("delete")
OPTIONS = _verb("options")
HEAD = _verb("head")
PATCH = _verb("patch")
TRACE = _verb("trace")


def path(fragment: str) -> Callable[[T], T]:
    return _marker("path", fragment)


def consumes(*media_types: str) -> Callable[[T], T]:
    return _marker("consumes", list(media_types))


def produces(*media_types: str) -> Callable[[T], T]:
    return _marker("produces", list(media_types))


def tags(*names: str) -> Callable[[T], T]:
    return _marker("tags", names)


def external_docs(url: str, description: str | None = None) -> Callable[[T], T]:
    return _marker("external_docs", ExternalDocs(url=url, description=description))


def deprecated(target: T) -> T:
    return _record(target, "deprecated", True)


def hidden(target: T) -> T:
    return _record(target, "hidden", True)


def operation(
    summary: str | None = None,
    description: str | None = None,
    operation_id: str | None = None,
    tags: Sequence[str] = (),
    deprecated: bool | None = None,
    hidden: bool | None = None,
    external_docs: ExternalDocs | None = None,
    parameters: Sequence[Parameter] = (),
    request_body: RequestBody | None = None,
    responses: Sequence[ApiResponse] = (),
    callbacks: Sequence[Callback] = (),
) -> Callable[[T], T]:
    """Declare operation fields on a method.

    Each field is recorded as its own metadata kind, so a field left out
    here can still be picked up from a contract method.
    """
    info = OperationInfo(
        summary=summary,
        description=description,
        operation_id=operation_id,
        tags=tuple(tags),
        deprecated=deprecated,
        hidden=hidden,
        external_docs=external_docs,
        parameters=tuple(parameters),
        request_body=request_body,
        responses=tuple(responses),
        callbacks=tuple(callbacks),
    )

    def decorator(func: T) -> T:
        for kind, value in operation_fields(info).items():
            _record(func, kind, value)
        return func

    return decorator


def operation_fields(info: OperationInfo) -> dict[str, Any]:
    """Split an OperationInfo into per-kind metadata, skipping unset fields."""
    fields: dict[str, Any] = {}
    for kind in ("summary", "description", "operation_id", "deprecated", "hidden", "external_docs", "request_body"):
        value = getattr(info, kind)
        if value is not None:
            fields[kind] = value
    if info.tags:
        fields["tags"] = info.tags
    if info.parameters:
        fields["parameters"] = list(info.parameters)
    if info.responses:
        fields["responses"] = info.responses
    if info.callbacks:
        fields["callbacks"] = info.callbacks
    return fields


def api_response(code: str | int, description: str, content: Sequence[Content] = ()) -> Callable[[T], T]:
    return _marker("responses", [ApiResponse(code, description, content=tuple(content))])


def default_response(description: str, content: Sequence[Content] = ()) -> Callable[[T], T]:
    return _marker("default_response", ApiResponse("default", description, content=tuple(content)))


def callback(name: str, *operations: OperationInfo, expression: str | None = None) -> Callable[[T], T]:
    return _marker("callbacks", [Callback(name=name, expression=expression, operations=operations)])
