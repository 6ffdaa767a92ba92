"""Builds operation parameters from argument markers or declarations."""

from typing import Any

from route_reader import model
from route_reader.annotations import Binding, Parameter
from route_reader.errors import InvalidParameterLocation, MissingParameterLocation, MissingParameterName
from route_reader.reader.accessor import ArgumentInfo
from route_reader.reader.context import ReaderContext, build_content, has_type, schema_for

PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")


def binds_parameter(argument: ArgumentInfo) -> bool:
    """An argument is a parameter when it has a binding marker or a located Parameter."""
    return argument.binding is not None or (argument.parameter is not None and argument.parameter.in_ is not None)


def build_argument_parameter(argument: ArgumentInfo, context: ReaderContext) -> model.Parameter:
    return build_parameter(argument.parameter, argument.binding, argument.annotation, context)


def build_parameter(
    decl: Parameter | None,
    binding: Binding | None,
    value_type: Any,
    context: ReaderContext,
) -> model.Parameter:
    """Merge a Parameter declaration with its binding marker.

    The declaration wins field by field. Path parameters are always required.
    Declared content replaces the inferred schema.
    """
    decl = decl or Parameter()
    name = decl.name or (binding.name if binding else None)
    location = decl.in_ or (binding.location if binding else None)
    if not name:
        raise MissingParameterName(f"{location or 'unbound'} parameter has no name")
    if location is None:
        raise MissingParameterLocation(f"parameter {name!r} has no location")
    if location not in PARAMETER_LOCATIONS:
        raise InvalidParameterLocation(f"parameter {name!r} has location {location!r}, expected one of {', '.join(PARAMETER_LOCATIONS)}")

    if has_type(decl.schema_type):
        value_type = decl.schema_type

    content = None
    schema = None
    if decl.content:
        content = build_content(decl.content, [context.config.default_media_type], value_type, context)
    else:
        schema = schema_for(value_type, context)
        if schema is None:
            schema = {}

    return model.Parameter(
        name=name,
        in_=location,
        description=decl.description,
        required=True if location == "path" else bool(decl.required),
        deprecated=decl.deprecated,
        allow_empty_value=decl.allow_empty_value,
        allow_reserved=decl.allow_reserved,
        schema_=schema,
        content=content,
    )
