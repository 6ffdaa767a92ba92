"""Metadata lookup across a resource's class hierarchy.

Class-level kinds are resolved on the declaring class first, then its
concrete superclasses, then its contracts (Protocols and abstract bases),
each in MRO order. Method-level kinds are resolved on the method itself,
then on the same-named method of each contract. Each kind is resolved on
its own, so a contract can supply the summary while the implementation
supplies the verb.
"""

import abc
import inspect
import logging
import typing
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Protocol

from route_reader.annotations import Binding, Parameter, RequestBody, get_metadata

logger = logging.getLogger(__name__)

_ROOT_BASES = (object, abc.ABC, Protocol, typing.Generic)


def is_contract(klass: type) -> bool:
    """Protocols and abstract base classes count as capability contracts."""
    if klass in _ROOT_BASES:
        return False
    return bool(getattr(klass, "_is_protocol", False)) or inspect.isabstract(klass) or abc.ABC in klass.__bases__


@dataclass
class ArgumentInfo:
    """One method argument together with its Annotated markers."""

    name: str
    annotation: Any
    markers: list[Any] = field(default_factory=list)

    def marker(self, kind: type) -> Any:
        for m in self.markers:
            if isinstance(m, kind):
                return m
        return None

    @property
    def binding(self) -> Binding | None:
        return self.marker(Binding)

    @property
    def parameter(self) -> Parameter | None:
        return self.marker(Parameter)

    @property
    def request_body(self) -> RequestBody | None:
        return self.marker(RequestBody)


class TypeHierarchy:
    """Lookup order for one resource type, computed once."""

    def __init__(self, resource: type):
        self.resource = resource
        bases = [k for k in resource.__mro__[1:] if k not in _ROOT_BASES]
        self.superclasses = [k for k in bases if not is_contract(k)]
        self.contracts = [k for k in bases if is_contract(k)]
        self.class_order = [resource] + self.superclasses + self.contracts

    @property
    def name(self) -> str:
        return self.resource.__qualname__

    def resolve_class(self, kind: str) -> Any:
        for klass in self.class_order:
            meta = get_metadata(klass)
            if kind in meta:
                return meta[kind]
            if kind == "deprecated" and vars(klass).get("__deprecated__"):
                return True
        return None

    def method_names(self) -> list[str]:
        """Callable members in definition order: own first, then inherited."""
        names: list[str] = []
        for klass in [self.resource] + self.superclasses + self.contracts:
            for name, value in vars(klass).items():
                if name in names or name.startswith("__"):
                    continue
                if inspect.isfunction(getattr(value, "__func__", value)):
                    names.append(name)
        return names

    def method(self, name: str) -> "MethodInfo":
        return MethodInfo(self, name)


class MethodInfo:
    """Accessor for one method's metadata and arguments."""

    def __init__(self, hierarchy: TypeHierarchy, name: str):
        self.hierarchy = hierarchy
        self.name = name
        self.function = inspect.getattr_static(hierarchy.resource, name)
        self.function = getattr(self.function, "__func__", self.function)

    @cached_property
    def sources(self) -> list[Any]:
        """The implementation first, then same-named contract methods."""
        found = [self.function]
        for contract in self.hierarchy.contracts:
            candidate = vars(contract).get(self.name)
            candidate = getattr(candidate, "__func__", candidate)
            if inspect.isfunction(candidate) and candidate is not self.function:
                found.append(candidate)
        return found

    def resolve(self, kind: str) -> Any:
        for source in self.sources:
            meta = get_metadata(source)
            if kind in meta:
                return meta[kind]
            if kind == "deprecated" and getattr(source, "__deprecated__", None):
                return True
        return None

    def resolve_class(self, kind: str) -> Any:
        return self.hierarchy.resolve_class(kind)

    @property
    def http_method(self) -> str | None:
        return self.resolve("http_method")

    @cached_property
    def arguments(self) -> list[ArgumentInfo]:
        args = _arguments(self.function)
        for source in self.sources[1:]:
            fallback = {a.name: a for a in _arguments(source)}
            for arg in args:
                if arg.markers or arg.name not in fallback:
                    continue
                arg.markers = fallback[arg.name].markers
                if arg.annotation is inspect.Parameter.empty:
                    arg.annotation = fallback[arg.name].annotation
        return args

    @cached_property
    def return_type(self) -> Any:
        hints = _type_hints(self.function)
        return hints.get("return", inspect.Signature.empty)


def _type_hints(func: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func, include_extras=True)
    except (NameError, TypeError) as e:
        logger.warning("Could not resolve type hints of %s, Annotated markers may be lost: %s", func.__qualname__, e)
        return dict(getattr(func, "__annotations__", {}))


def _arguments(func: Any) -> list[ArgumentInfo]:
    hints = _type_hints(func)
    result = []
    params = list(inspect.signature(func).parameters.values())
    for param in params:
        if param.name in ("self", "cls") and param is params[0]:
            continue
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        annotation = hints.get(param.name, param.annotation)
        markers: list[Any] = []
        if typing.get_origin(annotation) is typing.Annotated:
            markers = list(annotation.__metadata__)
            annotation = typing.get_args(annotation)[0]
        result.append(ArgumentInfo(param.name, annotation, markers))
    return result
