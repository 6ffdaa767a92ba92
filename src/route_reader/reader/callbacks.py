"""Builds callback maps: name -> expression -> nested path item."""

import logging
from typing import Callable, Sequence

from route_reader import model
from route_reader.annotations import Callback, OperationInfo

logger = logging.getLogger(__name__)

AssembleNested = Callable[[OperationInfo, int], model.Operation]


def build_callbacks(
    declared: Sequence[Callback],
    assemble: AssembleNested,
    depth: int = 0,
) -> dict[str, dict[str, model.PathItem]]:
    """Assemble each nested operation under its verb.

    Callbacks sharing a name are merged. The expression defaults to the
    callback name.
    """
    callbacks: dict[str, dict[str, model.PathItem]] = {}
    for decl in declared:
        expression = decl.expression or decl.name
        path_items = callbacks.setdefault(decl.name, {})
        item = path_items.setdefault(expression, model.PathItem())
        for info in decl.operations:
            verb = (info.method or "").lower()
            if verb not in model.HTTP_METHODS:
                logger.warning("Callback %s has an operation without a valid method (%r), skipped", decl.name, info.method)
                continue
            if item.operation(verb) is not None:
                logger.warning("Callback %s declares %s %s twice, keeping the first", decl.name, verb.upper(), expression)
                continue
            logger.debug("Assembling callback %s %s %s at depth %d", decl.name, verb.upper(), expression, depth + 1)
            setattr(item, verb, assemble(info, depth + 1))
    return callbacks
