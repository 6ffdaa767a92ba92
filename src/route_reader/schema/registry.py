"""Schema registry shared by every builder during a scan.

Builders hand it a Python type and get back a JSON-schema reference. Named
types (pydantic models, dataclasses, TypedDicts, enums) are stored once and
referenced through ``#/components/schemas/<Name>``; everything else is
inlined.
"""

import dataclasses
import enum
import logging
import threading
from typing import Any, Protocol, is_typeddict

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticInvalidForJsonSchema, PydanticSchemaGenerationError, PydanticUserError

logger = logging.getLogger(__name__)

REF_TEMPLATE = "#/components/schemas/{model}"


class SchemaRegistry(Protocol):
    def register_or_reference(self, tp: Any) -> dict[str, Any]: ...

    def schemas(self) -> dict[str, dict[str, Any]]: ...


def _is_named(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return (
        issubclass(tp, (BaseModel, enum.Enum))
        or dataclasses.is_dataclass(tp)
        or is_typeddict(tp)
    )


class PydanticSchemaRegistry:
    """Registry backed by pydantic's JSON-schema generator.

    Registration is idempotent and the first writer wins per name. A lock
    serializes writers so the registry can be shared across threads.
    """

    def __init__(self):
        self._schemas: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def register_or_reference(self, tp: Any) -> dict[str, Any]:
        if tp is None or tp is Any or isinstance(tp, str):
            return {}
        try:
            schema = TypeAdapter(tp).json_schema(ref_template=REF_TEMPLATE)
        except (PydanticSchemaGenerationError, PydanticInvalidForJsonSchema, PydanticUserError, TypeError, NameError) as e:
            logger.debug("No schema for %r, using an opaque one: %s", tp, e)
            return {}

        defs = schema.pop("$defs", {})
        with self._lock:
            for name, definition in defs.items():
                self._register(name, definition)
            if _is_named(tp):
                name = tp.__name__
                self._register(name, schema)
                return {"$ref": REF_TEMPLATE.format(model=name)}
        return schema

    def schemas(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            return dict(self._schemas)

    def _register(self, name: str, schema: dict[str, Any]) -> None:
        if name in self._schemas:
            return
        logger.debug("Registered schema %s", name)
        self._schemas[name] = schema
