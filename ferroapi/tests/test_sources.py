"""Tests for source pointers."""

from http import HTTPMethod

import pytest

from ferroapi.openapi import parse
from ferroapi.openapi.sources import (
    MediaTypeOnResponse,
    OperationSource,
    ParameterLocalId,
    ParameterOnOperation,
    ParameterOnPathItem,
    PathItemSource,
    RequestBodyOnOperation,
    ResponseOnOperation,
    SchemaFromMediaType,
    SchemaFromParameter,
    SchemaItems,
    SchemaProperty,
    SchemaUri,
    resolve,
)
from ferroapi.openapi.types import ParameterLocation
from ferroapi.tests.fixtures import BARS_SPEC, PETSTORE_SPEC, SHARED_COMPONENTS_SPEC


@pytest.fixture
def petstore():
    return parse(PETSTORE_SPEC)


def pet_id_get() -> OperationSource:
    return OperationSource(PathItemSource('/pet/{petId}'), HTTPMethod.GET)


class TestEquality:
    """Pointers are values: equal when structurally equal."""

    def test_equal_pointers(self):
        """Test that separately built pointers compare and hash equal."""
        a = SchemaProperty(SchemaUri.for_component('Pet'), 'status')
        b = SchemaProperty(SchemaUri('#/components/schemas/Pet'), 'status')
        assert a == b
        assert hash(a) == hash(b)
        assert {a: 1}[b] == 1

    def test_different_components(self):
        """Test that a different component makes pointers differ."""
        a = SchemaProperty(SchemaUri.for_component('Pet'), 'status')
        b = SchemaProperty(SchemaUri.for_component('Pet'), 'name')
        assert a != b

    def test_different_variants(self):
        """Test that variants with equal fields are still different."""
        parent = SchemaUri.for_component('Pet')
        assert SchemaItems(parent) != SchemaFromMediaType(parent)

    def test_parameter_identity_includes_location(self):
        """Test that a parameter is identified by name and location."""
        item = PathItemSource('/a')
        query = ParameterOnPathItem(item, ParameterLocalId('id', ParameterLocation.QUERY))
        header = ParameterOnPathItem(item, ParameterLocalId('id', ParameterLocation.HEADER))
        assert query != header


class TestRendering:
    """Tests for the pointer-like string form used in error messages."""

    def test_schema_uri(self):
        assert str(SchemaUri.for_component('a/b')) == '#/components/schemas/a~1b'

    def test_response_schema(self):
        source = SchemaFromMediaType(MediaTypeOnResponse(ResponseOnOperation(pet_id_get(), 0), 1))
        assert str(source) == '#/paths/~1pet~1{petId}/get/responses/0/content/1/schema'

    def test_parameter(self):
        local_id = ParameterLocalId('bar_name', ParameterLocation.PATH)
        source = ParameterOnPathItem(PathItemSource('/bars/{bar_name}'), local_id)
        assert str(source) == '#/paths/~1bars~1{bar_name}/parameters/path:bar_name'

    def test_nested_property(self):
        source = SchemaItems(SchemaProperty(SchemaUri.for_component('Pet'), 'tags'))
        assert str(source) == '#/components/schemas/Pet/properties/tags/items'


class TestResolve:
    """Tests for turning pointers back into document nodes."""

    def test_component_schema(self, petstore):
        """Test resolving a component schema and one of its properties."""
        document = petstore.document
        pet = resolve(SchemaUri.for_component('Pet'), document)
        assert pet.required == ['name']
        status = resolve(SchemaProperty(SchemaUri.for_component('Pet'), 'status'), document)
        assert status.enum == ['available', 'pending', 'sold']

    def test_response_media_type_schema(self, petstore):
        """Test resolving the schema of the second media type of a response."""
        source = SchemaFromMediaType(MediaTypeOnResponse(ResponseOnOperation(pet_id_get(), 0), 1))
        raw = resolve(source, petstore.document)
        assert petstore.reference_uri(raw) == '#/components/schemas/Pet'

    def test_operation_parameter_schema(self, petstore):
        """Test resolving the schema of an operation-level parameter."""
        local_id = ParameterLocalId('petId', ParameterLocation.PATH)
        source = SchemaFromParameter(ParameterOnOperation(pet_id_get(), local_id))
        raw = resolve(source, petstore.document)
        assert raw.format == 'int64'

    def test_request_body(self):
        """Test resolving a request body given as a reference."""
        spec = parse(SHARED_COMPONENTS_SPEC)
        source = RequestBodyOnOperation(OperationSource(PathItemSource('/things'), HTTPMethod.PUT))
        raw = resolve(source, spec.document)
        assert spec.reference_uri(raw) == '#/components/requestBodies/Thing'

    def test_deterministic(self):
        """Test that resolving equal pointers twice yields the same node."""
        spec = parse(BARS_SPEC)
        local_id = ParameterLocalId('bar_name', ParameterLocation.PATH)
        first = ParameterOnPathItem(PathItemSource('/bars/{bar_name}'), local_id)
        second = ParameterOnPathItem(PathItemSource('/bars/{bar_name}'), local_id)
        assert resolve(first, spec.document) == resolve(second, spec.document)

    def test_node_sources_resolve_to_their_node(self, petstore):
        """Test that the pointer carried by a node resolves back to it."""
        _, path_item = petstore.paths()[1]
        _, operation = path_item.operations()[0]
        (parameter,) = [ref_or.resolve_fully() for ref_or in operation.parameters()]
        assert resolve(parameter.source, petstore.document) is parameter.raw

    def test_missing_parameter(self, petstore):
        """Test that a pointer to a missing parameter fails."""
        local_id = ParameterLocalId('nope', ParameterLocation.QUERY)
        with pytest.raises(KeyError):
            resolve(ParameterOnOperation(pet_id_get(), local_id), petstore.document)
