"""Builds the response map of an operation."""

import logging
from typing import Sequence

from route_reader import model
from route_reader.annotations import ApiResponse, Content
from route_reader.errors import MissingResponseDescription
from route_reader.reader.context import ReaderContext, Scope, build_content, has_type

logger = logging.getLogger(__name__)

DEFAULT_CODE = "200"


def build_responses(declared: Sequence[ApiResponse], scope: Scope, context: ReaderContext) -> dict[str, model.ApiResponse]:
    """Build responses keyed by status code or "default".

    The first declaration of a code wins. With nothing declared a single
    "200" response is synthesized from the return type.
    """
    media_types = list(scope.produces) or [context.config.wildcard_media_type]
    responses: dict[str, model.ApiResponse] = {}
    for decl in declared:
        if decl.description is None:
            raise MissingResponseDescription(f"response {decl.code!r} has no description")
        if decl.code in responses:
            logger.debug("Response %s declared more than once, keeping the first", decl.code)
            continue
        responses[decl.code] = model.ApiResponse(
            description=decl.description,
            content=build_content(decl.content, media_types, None, context) or None,
        )

    if not responses:
        content = None
        if has_type(scope.return_type):
            content = build_content((Content(),), media_types, scope.return_type, context)
        responses[DEFAULT_CODE] = model.ApiResponse(
            description=context.config.default_response_description,
            content=content,
        )
    return responses
