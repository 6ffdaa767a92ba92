"""Assembles one Operation from the metadata of a resource method.

Top-level methods and nested callback operations go through the same
``assemble_declared`` entry point. For a method, the accessor first folds
the method, contract and class metadata into an ``OperationInfo``.
"""

import logging
from typing import Sequence

from route_reader import model
from route_reader.annotations import ApiResponse, ExternalDocs, OperationInfo
from route_reader.reader.accessor import ArgumentInfo, MethodInfo
from route_reader.reader.callbacks import build_callbacks
from route_reader.reader.context import ReaderContext, Scope, is_complex
from route_reader.reader.parameters import binds_parameter, build_argument_parameter, build_parameter
from route_reader.reader.request_body import build_request_body
from route_reader.reader.responses import build_responses

logger = logging.getLogger(__name__)


def merge_tags(*groups: Sequence[str] | None) -> list[str]:
    """Concatenate tag groups in order, dropping repeats."""
    tags: list[str] = []
    for group in groups:
        for tag in group or ():
            if tag not in tags:
                tags.append(tag)
    return tags


def resolve_deprecated(method: MethodInfo) -> bool:
    return bool(method.resolve("deprecated")) or bool(method.resolve_class("deprecated"))


def resolve_external_docs(method: MethodInfo) -> ExternalDocs | None:
    return method.resolve("external_docs") or method.resolve_class("external_docs")


def resolve_responses(method: MethodInfo) -> list[ApiResponse]:
    declared = list(method.resolve("responses") or ())
    default = method.resolve("default_response")
    if default is not None:
        declared.append(default)
    return declared


def resolve_scope(method: MethodInfo) -> Scope:
    return Scope(
        produces=method.resolve("produces") or method.resolve_class("produces") or [],
        consumes=method.resolve("consumes") or method.resolve_class("consumes") or [],
        return_type=method.return_type,
    )


class OperationAssembler:
    """Builds Operation models for resource methods."""

    def __init__(self, context: ReaderContext):
        self.context = context

    def assemble(self, method: MethodInfo) -> model.Operation | None:
        """Return the method's Operation, or None when it is not an HTTP operation."""
        verb = method.http_method
        if verb is None:
            return None
        if method.resolve("hidden") or method.resolve_class("hidden"):
            logger.debug("Skipping hidden method %s.%s", method.hierarchy.name, method.name)
            return None

        info = OperationInfo(
            method=verb,
            summary=method.resolve("summary"),
            description=method.resolve("description"),
            operation_id=method.resolve("operation_id") or method.name,
            tags=tuple(merge_tags(method.resolve_class("tags"), method.resolve("tags"))),
            deprecated=resolve_deprecated(method),
            external_docs=resolve_external_docs(method),
            parameters=tuple(method.resolve("parameters") or ()),
            request_body=method.resolve("request_body"),
            responses=tuple(resolve_responses(method)),
            callbacks=tuple(method.resolve("callbacks") or ()),
        )
        return self.assemble_declared(info, scope=resolve_scope(method), arguments=method.arguments)

    def assemble_declared(
        self,
        info: OperationInfo,
        depth: int = 0,
        scope: Scope | None = None,
        arguments: Sequence[ArgumentInfo] = (),
    ) -> model.Operation:
        scope = scope or Scope()
        parameters = [build_parameter(p, None, p.schema_type, self.context) for p in info.parameters]
        arg_parameters, request_body = self._bind_arguments(arguments, info, scope)
        parameters.extend(arg_parameters)

        if request_body is None and info.request_body is not None:
            request_body = build_request_body(info.request_body, None, scope, self.context)

        callbacks = None
        if info.callbacks:
            callbacks = build_callbacks(info.callbacks, self._assemble_nested, depth)

        return model.Operation(
            summary=info.summary,
            description=info.description,
            operation_id=info.operation_id,
            deprecated=bool(info.deprecated),
            tags=list(info.tags),
            external_docs=_external_docs(info.external_docs),
            parameters=parameters,
            request_body=request_body,
            responses=build_responses(info.responses, scope, self.context),
            callbacks=callbacks,
        )

    def _assemble_nested(self, info: OperationInfo, depth: int) -> model.Operation:
        return self.assemble_declared(info, depth=depth)

    def _bind_arguments(
        self,
        arguments: Sequence[ArgumentInfo],
        info: OperationInfo,
        scope: Scope,
    ) -> tuple[list[model.Parameter], model.RequestBody | None]:
        parameters: list[model.Parameter] = []
        request_body = None
        implicit: list[ArgumentInfo] = []

        for arg in arguments:
            if binds_parameter(arg):
                if arg.request_body is not None:
                    logger.warning("Argument %s is bound as a parameter; its RequestBody marker is ignored", arg.name)
                parameters.append(build_argument_parameter(arg, self.context))
            elif arg.request_body is not None:
                if request_body is not None:
                    logger.warning("Argument %s declares a second request body, ignored", arg.name)
                    continue
                request_body = build_request_body(arg.request_body, arg.annotation, scope, self.context)
            elif arg.parameter is not None:
                logger.warning("Parameter on argument %s has no location, ignored", arg.name)
            elif not arg.markers and is_complex(arg.annotation):
                implicit.append(arg)

        if request_body is None and len(implicit) == 1:
            request_body = build_request_body(info.request_body, implicit[0].annotation, scope, self.context)
        return parameters, request_body


def _external_docs(decl: ExternalDocs | None) -> model.ExternalDocumentation | None:
    if decl is None:
        return None
    return model.ExternalDocumentation(url=decl.url, description=decl.description)
