from unittest.mock import patch

from pydantic import ValidationError

from route_reader import model
from route_reader.config import ReaderConfig
from route_reader.errors import (
    DuplicateOperation,
    InvalidDeclaration,
    InvalidParameterLocation,
    MalformedPathExpression,
    MissingParameterLocation,
    MissingParameterName,
    MissingResponseDescription,
)
from route_reader.reader.reader import Reader
from route_reader.schema.registry import PydanticSchemaRegistry
from sample_resources import (
    BadLocationResource,
    BasicFieldsResource,
    ChildResource,
    ConflictingPathResource,
    DuplicateResource,
    HiddenResource,
    MalformedPathResource,
    MissingDescriptionResource,
    MissingNameResource,
    NoLocationCallbackResource,
    NoLocationResource,
    PetContractImpl,
    PetResource,
    SimpleCallbackResource,
    SimpleMethods,
)


def _validation_error() -> ValidationError:
    try:
        model.Info.model_validate({})
    except ValidationError as e:
        return e
    raise AssertionError("Info without title validated")


class TestScan:
    def test_paths_are_joined_with_base_path(self):
        result = Reader().scan([PetResource])
        assert list(result.document.paths) == ["/pets", "/pets/{petId}"]
        assert result.ok

    def test_verbs_land_in_their_slots(self):
        paths = Reader().scan([PetResource]).document.paths
        assert set(paths["/pets"].operations()) == {"get", "post"}
        assert set(paths["/pets/{petId}"].operations()) == {"get", "delete"}

    def test_methods_without_path_use_root(self):
        paths = Reader().scan([SimpleMethods]).document.paths
        assert list(paths) == ["/", "/tags", "/pet"]

    def test_hidden_resource_contributes_nothing(self):
        result = Reader().scan([HiddenResource])
        assert result.document.paths == {}
        assert result.ok

    def test_contract_paths(self):
        paths = Reader().scan([PetContractImpl, ChildResource]).document.paths
        assert "/contract/pets/{petId}" in paths
        assert "/child/ping" in paths

    def test_components_collected_from_registry(self):
        document = Reader().scan([PetResource, SimpleCallbackResource]).document
        assert set(document.components.schemas) == {"Pet", "Subscription"}

    def test_info_from_config(self):
        config = ReaderConfig(title="Pet Store", version="2.0.0")
        document = Reader(config=config).scan([]).document
        assert document.info.title == "Pet Store"
        assert document.info.version == "2.0.0"
        assert document.openapi == "3.0.1"

    def test_shared_registry(self):
        registry = PydanticSchemaRegistry()
        Reader(registry=registry).scan([PetResource])
        assert "Pet" in registry.schemas()


class TestFailures:
    def test_duplicate_operation_is_reported(self):
        result = Reader().scan([PetResource, DuplicateResource])
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert isinstance(failure, DuplicateOperation)
        assert failure.path == "/pets"
        assert failure.verb == "get"
        assert failure.resource == "DuplicateResource"
        assert failure.method == "list_again"

    def test_first_declaration_is_kept(self):
        result = Reader().scan([PetResource, DuplicateResource])
        assert result.document.paths["/pets"].get.operation_id == "list_pets"

    def test_failed_operation_does_not_stop_scan(self):
        result = Reader().scan([MissingNameResource, BasicFieldsResource])
        assert [type(f) for f in result.failures] == [MissingParameterName]
        assert result.failures[0].method == "broken"
        assert "/broken" not in result.document.paths
        assert "/fine" in result.document.paths
        assert "/basic" in result.document.paths

    def test_parameter_without_location_is_reported(self):
        result = Reader().scan([NoLocationResource, NoLocationCallbackResource, BasicFieldsResource])
        assert [type(f) for f in result.failures] == [MissingParameterLocation, MissingParameterLocation]
        assert [(f.resource, f.method) for f in result.failures] == [
            ("NoLocationResource", "no_location"),
            ("NoLocationCallbackResource", "register"),
        ]
        assert list(result.document.paths) == ["/basic"]

    def test_unknown_parameter_location_is_reported(self):
        result = Reader().scan([BadLocationResource, BasicFieldsResource])
        assert [type(f) for f in result.failures] == [InvalidParameterLocation]
        assert "BadLocationResource.bad_location" in str(result.failures[0])
        assert "/basic" in result.document.paths

    def test_invalid_declaration_is_reported(self):
        reader = Reader()
        with patch.object(reader.assembler, "assemble", side_effect=_validation_error()):
            result = reader.scan([BasicFieldsResource])
        assert [type(f) for f in result.failures] == [InvalidDeclaration]
        assert result.failures[0].location == "BasicFieldsResource.get_basic"
        assert result.document.paths == {}

    def test_missing_response_description(self):
        result = Reader().scan([MissingDescriptionResource])
        assert isinstance(result.failures[0], MissingResponseDescription)
        assert result.document.paths == {}

    def test_malformed_paths(self):
        result = Reader().scan([MalformedPathResource, ConflictingPathResource])
        assert [type(f) for f in result.failures] == [MalformedPathExpression, MalformedPathExpression]
        assert "ConflictingPathResource.conflicting" in str(result.failures[1])

    def test_operation_ids_are_unique(self):
        result = Reader().scan([PetResource, DuplicateResource, SimpleMethods])
        ids = [
            op.operation_id
            for item in result.document.paths.values()
            for op in item.operations().values()
        ]
        assert len(ids) == len(set(ids))


class TestDeterminism:
    RESOURCES = [PetResource, SimpleMethods, SimpleCallbackResource, PetContractImpl, ChildResource]

    def test_scanning_twice_gives_equal_documents(self):
        first = Reader().scan(self.RESOURCES).document
        second = Reader().scan(self.RESOURCES).document
        assert first == second

    def test_parallel_scan_matches_sequential(self):
        sequential = Reader().scan(self.RESOURCES).document
        parallel = Reader().scan(self.RESOURCES, max_workers=4).document
        assert list(parallel.paths) == list(sequential.paths)
        assert parallel == sequential
