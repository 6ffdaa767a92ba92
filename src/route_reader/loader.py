"""Resolves ``package.module:ClassName`` references to resource classes."""

import importlib
import logging

from route_reader.errors import ResourceLoadError

logger = logging.getLogger(__name__)


def load_resource(ref: str) -> type:
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ResourceLoadError(f"expected 'module:Class', got {ref!r}", resource=ref)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ResourceLoadError(f"cannot import {module_name}: {e}", resource=ref) from e

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ResourceLoadError(f"{module_name} has no attribute {attr}", resource=ref) from e
    if not isinstance(target, type):
        raise ResourceLoadError(f"{attr} is not a class", resource=ref)
    logger.debug("Loaded resource %s", ref)
    return target


def load_resources(refs: list[str]) -> list[type]:
    """Load references in the given order."""
    return [load_resource(ref) for ref in refs]
