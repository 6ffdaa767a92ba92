"""Builds request bodies from RequestBody declarations or body arguments."""

from typing import Any

from route_reader import model
from route_reader.annotations import Content, RequestBody
from route_reader.reader.context import ReaderContext, Scope, build_content


def consumed_media_types(scope: Scope, context: ReaderContext) -> list[str]:
    return list(scope.consumes) or [context.config.default_media_type]


def build_request_body(
    decl: RequestBody | None,
    value_type: Any,
    scope: Scope,
    context: ReaderContext,
) -> model.RequestBody:
    decl = decl or RequestBody()
    contents = decl.content or (Content(),)
    return model.RequestBody(
        description=decl.description,
        required=decl.required,
        content=build_content(contents, consumed_media_types(scope, context), value_type, context),
    )
