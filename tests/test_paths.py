import pytest

from route_reader.errors import MalformedPathExpression
from route_reader.reader.paths import join_paths, normalize_path


class TestNormalizePath:
    def test_adds_leading_slash(self):
        assert normalize_path("pets") == "/pets"

    def test_collapses_duplicate_slashes(self):
        assert normalize_path("//pets///{petId}/") == "/pets/{petId}"

    def test_root(self):
        assert normalize_path("") == "/"
        assert normalize_path("///") == "/"


class TestJoinPaths:
    def test_joins_base_and_fragment(self):
        assert join_paths("/pets/", "/{petId}") == "/pets/{petId}"

    def test_missing_parts(self):
        assert join_paths(None, "/pets") == "/pets"
        assert join_paths("/pets", None) == "/pets"
        assert join_paths(None, None) == "/"

    def test_braces_kept_verbatim(self):
        assert join_paths("/items", "{id: [0-9]+}") == "/items/{id: [0-9]+}"

    @pytest.mark.parametrize("fragment", ["/items/{id", "/items/id}", "/items/{{id}}", "/items/{}"])
    def test_malformed_braces(self, fragment):
        with pytest.raises(MalformedPathExpression):
            join_paths("/", fragment)

    def test_repeated_parameter_across_fragments(self):
        with pytest.raises(MalformedPathExpression):
            join_paths("/orders/{orderId}", "/lines/{orderId}")
