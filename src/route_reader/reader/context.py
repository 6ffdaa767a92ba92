"""State shared by the builders during one scan."""

import inspect
import typing
from dataclasses import dataclass, field
from typing import Any
from types import UnionType

from route_reader.config import ReaderConfig
from route_reader.model import MediaType
from route_reader.schema.registry import SchemaRegistry

PRIMITIVE_TYPES = (str, int, float, bool, bytes)


@dataclass(frozen=True)
class ReaderContext:
    registry: SchemaRegistry
    config: ReaderConfig


@dataclass(frozen=True)
class Scope:
    """Media types and return type in effect for the operation being built."""

    produces: list[str] = field(default_factory=list)
    consumes: list[str] = field(default_factory=list)
    return_type: Any = None


def has_type(tp: Any) -> bool:
    return tp is not None and tp is not type(None) and tp is not inspect.Signature.empty


def is_complex(tp: Any) -> bool:
    """True for types that describe a structured body rather than a scalar."""
    if not has_type(tp) or tp is Any or tp in PRIMITIVE_TYPES:
        return False
    if typing.get_origin(tp) in (typing.Union, UnionType):
        return any(is_complex(arg) for arg in typing.get_args(tp))
    return True


def schema_for(tp: Any, context: ReaderContext) -> dict[str, Any] | None:
    if not has_type(tp):
        return None
    return context.registry.register_or_reference(tp)


def build_content(contents, media_types: list[str], default_type: Any, context: ReaderContext) -> dict[str, MediaType]:
    """Map media types to schemas for a list of Content declarations.

    A Content entry without its own media type is expanded over
    ``media_types``; one without a schema falls back to ``default_type``.
    """
    result: dict[str, MediaType] = {}
    for content in contents:
        keys = [content.media_type] if content.media_type else media_types
        schema_type = content.schema_type if has_type(content.schema_type) else default_type
        for key in keys:
            result.setdefault(key, MediaType(schema_=schema_for(schema_type, context)))
    return result
