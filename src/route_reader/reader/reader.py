"""Top-level reader: resource classes in, OpenAPI document out."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable

from pydantic import ValidationError

from route_reader import model
from route_reader.config import ReaderConfig
from route_reader.errors import DuplicateOperation, InvalidDeclaration, ReaderError
from route_reader.reader.accessor import TypeHierarchy
from route_reader.reader.context import ReaderContext
from route_reader.reader.operation import OperationAssembler
from route_reader.reader.paths import join_paths
from route_reader.schema.registry import PydanticSchemaRegistry, SchemaRegistry

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """The assembled document plus every operation that failed to assemble."""

    document: model.Document
    failures: list[ReaderError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class _Assembled:
    resource: str
    method: str
    path: str
    verb: str
    operation: model.Operation


class Reader:
    """Reads decorated resource classes into a Document.

    The schema registry is the only state kept between resource types; a
    fresh registry gives a fresh, independent scan.
    """

    def __init__(self, registry: SchemaRegistry | None = None, config: ReaderConfig | None = None):
        self.registry = registry or PydanticSchemaRegistry()
        self.config = config or ReaderConfig()
        self.assembler = OperationAssembler(ReaderContext(self.registry, self.config))

    def scan(self, resource_types: Iterable[type], max_workers: int | None = None) -> ScanResult:
        """Scan resources in the given order.

        With ``max_workers`` the per-type assembly runs on a thread pool;
        insertion into the document still follows the given order.
        """
        resource_types = list(resource_types)
        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                reads = list(pool.map(self.read_resource, resource_types))
        else:
            reads = [self.read_resource(r) for r in resource_types]

        paths: dict[str, model.PathItem] = {}
        failures: list[ReaderError] = []
        operation_ids: set[str] = set()
        for assembled, errors in reads:
            failures.extend(errors)
            for entry in assembled:
                try:
                    self._insert(paths, entry, operation_ids)
                except DuplicateOperation as e:
                    failures.append(e)

        document = model.Document(
            openapi=self.config.openapi_version,
            info=model.Info(title=self.config.title, version=self.config.version, description=self.config.description),
            paths=paths,
            components=model.Components(schemas=self.registry.schemas()),
        )
        logger.info("Scanned %d resources: %d paths, %d failures", len(resource_types), len(paths), len(failures))
        return ScanResult(document=document, failures=failures)

    def read_resource(self, resource: type) -> tuple[list[_Assembled], list[ReaderError]]:
        """Assemble every operation of one resource type."""
        hierarchy = TypeHierarchy(resource)
        base_path = hierarchy.resolve_class("path")
        assembled: list[_Assembled] = []
        failures: list[ReaderError] = []

        for name in hierarchy.method_names():
            method = hierarchy.method(name)
            if method.http_method is None:
                continue
            try:
                full_path = join_paths(base_path, method.resolve("path"))
                operation = self.assembler.assemble(method)
            except ReaderError as e:
                logger.debug("Failed to assemble %s.%s: %s", hierarchy.name, name, e.message)
                failures.append(e.bind(hierarchy.name, name))
                continue
            except ValidationError as e:
                logger.debug("Invalid declaration on %s.%s: %s", hierarchy.name, name, e)
                failures.append(InvalidDeclaration(str(e), hierarchy.name, name))
                continue
            if operation is None:
                continue
            logger.debug("Assembled %s %s from %s.%s", method.http_method.upper(), full_path, hierarchy.name, name)
            assembled.append(_Assembled(hierarchy.name, name, full_path, method.http_method.lower(), operation))
        return assembled, failures

    def _insert(self, paths: dict[str, model.PathItem], entry: _Assembled, operation_ids: set[str]) -> None:
        item = paths.get(entry.path)
        if item is not None and item.operation(entry.verb) is not None:
            raise DuplicateOperation(entry.path, entry.verb, entry.resource, entry.method)
        if item is None:
            item = paths[entry.path] = model.PathItem()

        operation = entry.operation
        if operation.operation_id:
            operation.operation_id = _unique_operation_id(operation.operation_id, operation_ids)
            operation_ids.add(operation.operation_id)
        setattr(item, entry.verb, operation)


def _unique_operation_id(operation_id: str, taken: set[str]) -> str:
    candidate = operation_id
    counter = 1
    while candidate in taken:
        candidate = f"{operation_id}_{counter}"
        counter += 1
    return candidate
