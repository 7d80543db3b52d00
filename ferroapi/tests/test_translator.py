"""Tests for translating OpenAPI documents into the code model."""

import pytest

from ferroapi.codegen.translator import (
    ENUM_DERIVES,
    OPERATION_BODY,
    RECORD_DERIVES,
    Translator,
    TypeKind,
    classify,
)
from ferroapi.codemodel import (
    UNIT,
    Alias,
    Attribute,
    Indirection,
    Module,
    Record,
    SumType,
    TupleVariant,
    UnitVariant,
)
from ferroapi.exceptions import UnsupportedFeatureError
from ferroapi.openapi import parse
from ferroapi.tests.fixtures import (
    ALIAS_SPEC,
    BARS_SPEC,
    CYCLE_SPEC,
    EMPTY_PATHS_SPEC,
    EMPTY_SPEC,
    KEYWORDS_SPEC,
    NO_RESPONSES_SPEC,
    NUMBER_FORMATS_SPEC,
    OAS31_PATTERN_PROPERTIES_SPEC,
    OAS31_SPEC,
    PETSTORE_SPEC,
    SHARED_COMPONENTS_SPEC,
    STATUSES_SPEC,
    YAML_12_SPEC,
)


def translate(text: str, **options) -> Module:
    translator = Translator(parse(text), **options)
    return translator.translate().find_crate(translator.module.name)


def field_types(record: Record) -> dict[str, str]:
    return {f.name: f.type.name for f in record.fields}


def variants(sum_type: SumType) -> dict[str, list[str]]:
    result = {}
    for variant in sum_type.variants:
        if isinstance(variant, TupleVariant):
            result[variant.name] = [member.name for member in variant.members]
        else:
            result[variant.name] = []
    return result


def functions(module: Module) -> dict:
    (implementation,) = [i for i in module.impls if i.is_inherent]
    return {function.name: function for function in implementation.functions}


def signature(function) -> list[tuple[str, str]]:
    return [(param.name, param.type.name) for param in function.params]


class TestClassify:
    """Tests for choosing the kind of a schema."""

    def _schema(self, text: str, name: str):
        return dict(parse(text).schemata())[name].node

    def test_kinds(self):
        assert classify(self._schema(ALIAS_SPEC, 'Name')) is TypeKind.STRING
        assert classify(self._schema(ALIAS_SPEC, 'Flags')) is TypeKind.MAP
        assert classify(self._schema(ALIAS_SPEC, 'Empty')) is TypeKind.RECORD
        assert classify(self._schema(ALIAS_SPEC, 'Matrix')) is TypeKind.ARRAY
        assert classify(self._schema(PETSTORE_SPEC, 'Pet')) is TypeKind.RECORD

    def test_31_kinds(self):
        assert classify(self._schema(OAS31_SPEC, 'Nullable')) is TypeKind.JSON
        assert classify(self._schema(OAS31_SPEC, 'Count')) is TypeKind.NUMBER
        assert classify(self._schema(OAS31_SPEC, 'Anything')) is TypeKind.JSON

    def test_pattern_properties_are_deferred(self):
        with pytest.raises(UnsupportedFeatureError):
            classify(self._schema(OAS31_PATTERN_PROPERTIES_SPEC, 'Headers'))


class TestEmptySpec:
    """An empty document yields only the client and its empty impl."""

    @pytest.mark.parametrize('text', [EMPTY_SPEC, EMPTY_PATHS_SPEC])
    def test_only_client(self, text):
        module = translate(text)
        assert module.types.names() == ['Client']
        assert len(module.impls) == 1
        assert module.impls[0].is_inherent
        assert module.impls[0].functions == []
        assert len(module.traits) == 0

    def test_default_module_name(self):
        assert translate(EMPTY_SPEC).name == 'generated_api'

    def test_custom_module_name(self):
        assert translate(EMPTY_SPEC, module_name='petstore').name == 'petstore'


class TestSchemas:
    """Tests for component schema translation."""

    def test_number_formats(self):
        """Number formats map onto the matching Rust primitives."""
        module = translate(NUMBER_FORMATS_SPEC)
        record = module.find_type('NumberFormats')
        assert isinstance(record, Record)
        assert field_types(record) == {
            'number_unformatted': 'f64',
            'number_double': 'f64',
            'number_float': 'f32',
            'integer_int64': 'i64',
            'integer_int32': 'i32',
        }
        assert record.attributes == [Attribute.derive(*RECORD_DERIVES)]

    def test_enum_property(self):
        """A string enum becomes a sum type of unit variants."""
        module = translate(PETSTORE_SPEC)
        pet = module.find_type('Pet')
        status = module.find_type('PetStatus')
        assert isinstance(status, SumType)
        assert [variant.name for variant in status.variants] == ['Available', 'Pending', 'Sold']
        assert all(isinstance(variant, UnitVariant) for variant in status.variants)
        assert status.variants[0].attributes == [Attribute.serde_rename('available')]
        assert status.attributes == [Attribute.derive(*ENUM_DERIVES)]
        assert {f.name: f.type for f in pet.fields}['status'] is status

    def test_enum_skips_duplicates_and_null(self):
        text = (
            'openapi: 3.0.0\n'
            'paths: {}\n'
            'components:\n'
            '  schemas:\n'
            '    Color: {type: string, enum: [red, Red, red, null]}\n'
        )
        color = translate(text).find_type('Color')
        assert [variant.name for variant in color.variants] == ['Red', 'Red1']
        assert color.variants[1].attributes == [Attribute.serde_rename('Red')]

    def test_declaration_order(self):
        """Component types keep document order; inline types follow their owner."""
        module = translate(PETSTORE_SPEC, types=True)
        assert module.types.names() == ['Pet', 'PetStatus']

    def test_cycle(self):
        """Mutually referring schemas are both declared, no stub remains."""
        module = translate(CYCLE_SPEC, types=True)
        a = module.find_type('A')
        b = module.find_type('B')
        assert isinstance(a, Record) and isinstance(b, Record)
        (a_field,) = a.fields
        (b_field,) = b.fields
        assert isinstance(a_field.type, Indirection) and a_field.type.target is b
        assert isinstance(b_field.type, Indirection) and b_field.type.target is a
        assert not any(isinstance(t, Indirection) and t.is_stub for t in module.types)

    def test_aliases(self):
        module = translate(ALIAS_SPEC, types=True)
        name = module.find_type('Name')
        assert isinstance(name, Alias)
        assert name.target.name == 'String'

        pet_name = module.find_type('PetName')
        assert isinstance(pet_name, Alias)
        assert pet_name.target.name == 'Name'

        assert module.find_type('Flags').target.name == 'HashMap<String,Value>'
        assert module.find_type('Matrix').target.name == 'Vec<Vec<f64>>'

        empty = module.find_type('Empty')
        assert isinstance(empty, Record)
        assert empty.fields == []

    def test_31_schemas(self):
        module = translate(OAS31_SPEC, types=True)
        assert module.find_type('Nullable').target.name == 'Value'
        assert module.find_type('Count').target.name == 'i32'
        assert module.find_type('Tags').target.name == 'Vec<String>'
        assert module.find_type('Labels').target.name == 'HashMap<String,String>'
        assert module.find_type('Anything').target.name == 'Value'

    def test_keyword_names(self):
        """Keywords and invalid names are escaped and renamed for serde."""
        record = translate(KEYWORDS_SPEC, types=True).find_type('Type')
        assert [f.name for f in record.fields] == ['type_', 'kind', '_2fa']
        assert record.fields[0].attributes == [Attribute.serde_rename('type')]
        assert record.fields[1].attributes == [Attribute.serde_rename('Kind')]

    def test_yaml_12_scalars(self):
        """Values and keys that YAML 1.1 would read as booleans keep their text."""
        module = translate(YAML_12_SPEC, types=True)
        country = module.find_type('Country')
        assert [variant.name for variant in country.variants] == ['NO', 'Yes', 'On']
        assert country.variants[0].attributes == []
        assert country.variants[1].attributes == [Attribute.serde_rename('yes')]

        settings = module.find_type('Settings')
        assert field_types(settings) == {'_1': 'String', 'on': 'bool', 'true_': 'String'}
        assert settings.fields[0].attributes == [Attribute.serde_rename('1')]
        assert settings.fields[2].attributes == [Attribute.serde_rename('true')]

    def test_colliding_component_names(self):
        text = (
            'openapi: 3.0.0\n'
            'paths: {}\n'
            'components:\n'
            '  schemas:\n'
            '    pet: {type: string}\n'
            '    Pet: {type: boolean}\n'
        )
        module = translate(text, types=True)
        assert module.types.names() == ['Pet', 'Pet1']
        assert module.find_type('Pet1').target.name == 'bool'

    def test_pattern_properties_fail(self):
        with pytest.raises(UnsupportedFeatureError):
            translate(OAS31_PATTERN_PROPERTIES_SPEC)


class TestOperations:
    """Tests for the client surface."""

    def test_path_parameters(self):
        """Path-level parameters come before operation-level ones."""
        module = translate(BARS_SPEC)
        function = functions(module)['bars_bar_name_get']
        assert signature(function) == [
            ('self', '&Client'),
            ('bar_name', 'String'),
            ('with_foo', 'bool'),
        ]
        assert function.returns.name == 'Result<BarsBarNameGetOk200,BarsBarNameGetError>'
        assert function.body.text == OPERATION_BODY

    def test_overridden_path_parameter(self):
        text = (
            'openapi: 3.0.0\n'
            'paths:\n'
            '  /a/{id}:\n'
            '    parameters:\n'
            '      - {name: id, in: path, required: true, schema: {type: string}}\n'
            '    get:\n'
            '      parameters:\n'
            '        - {name: id, in: path, required: true, schema: {type: integer}}\n'
            '      responses: {}\n'
        )
        function = functions(translate(text))['a_id_get']
        assert signature(function) == [('self', '&Client'), ('id', 'f64')]

    def test_request_body_media_types(self):
        """A request body becomes a content sum with one variant per media type."""
        module = translate(PETSTORE_SPEC)
        function = functions(module)['pet_post']
        assert signature(function)[-1] == ('body', 'PetPostContent')
        content = module.find_type('PetPostContent')
        assert variants(content) == {
            'ApplicationJson': ['Pet'],
            'ApplicationXml': ['Pet'],
            'ApplicationXwwwformurlencoded': ['Pet'],
        }

    def test_response_sums(self):
        """Success and error responses become per-operation sum types."""
        module = translate(PETSTORE_SPEC)
        function = functions(module)['pet_petId_get']
        assert signature(function) == [('self', '&Client'), ('petId', 'i64')]
        assert function.returns.name == 'Result<PetPetIdGetOk200,PetPetIdGetError>'

        ok = module.find_type('PetPetIdGetOk200')
        assert variants(ok) == {'ApplicationJson': ['Pet'], 'ApplicationXml': ['Pet']}

        error = module.find_type('PetPetIdGetError')
        assert variants(error) == {
            'BadRequest400': ['()'],
            'NotFound404': ['()'],
            'UnknownResponse': ['Response<Vec<u8>>'],
            'OtherError': ['Box<dyn ::std::error::Error>'],
        }

    def test_no_success_response(self):
        module = translate(PETSTORE_SPEC)
        function = functions(module)['pet_post']
        assert function.returns.params[0] is UNIT
        assert list(variants(module.find_type('PetPostError'))) == [
            'MethodNotAllowed405',
            'UnknownResponse',
            'OtherError',
        ]

    def test_no_responses(self):
        """Without responses the error sum has only the fixed variants."""
        module = translate(NO_RESPONSES_SPEC)
        error = module.find_type('PingGetError')
        assert list(variants(error)) == ['UnknownResponse', 'OtherError']
        assert functions(module)['ping_get'].returns.params[0] is UNIT

    def test_several_statuses(self):
        module = translate(STATUSES_SPEC)
        function = functions(module)['items_post']
        assert function.returns.name == 'Result<ItemsPostOk,ItemsPostError>'

        assert variants(module.find_type('ItemsPostOk')) == {
            'Ok200': ['ItemsPostOk200'],
            'Created201': ['()'],
        }
        assert variants(module.find_type('ItemsPostError')) == {
            'ClientError4XX': ['String'],
            'Status499': ['()'],
            'Default': ['ItemsPostDefaultContent'],
            'UnknownResponse': ['Response<Vec<u8>>'],
            'OtherError': ['Box<dyn ::std::error::Error>'],
        }
        assert variants(module.find_type('ItemsPostDefaultContent')) == {
            'ApplicationJson': ['String'],
            'TextPlain': ['Vec<u8>'],
        }
        assert module.types.names() == [
            'Client',
            'ItemsPostOk',
            'ItemsPostOk200',
            'ItemsPostError',
            'ItemsPostDefaultContent',
        ]

    def test_shared_components(self):
        """Referenced parameters, bodies and responses are followed."""
        module = translate(SHARED_COMPONENTS_SPEC)
        fns = functions(module)
        assert list(fns) == ['things_get', 'things_put']
        assert signature(fns['things_get']) == [('self', '&Client'), ('limit', 'i32')]
        assert signature(fns['things_put'])[-1] == ('body', 'ThingsPutContent')
        assert variants(module.find_type('ThingsGetOk200')) == {'ApplicationJson': ['Vec<Thing>']}
        assert variants(module.find_type('ThingsPutContent')) == {'ApplicationJson': ['Thing']}

    def test_keyword_parameters(self):
        module = translate(KEYWORDS_SPEC)
        function = functions(module)['match_type_get']
        assert [name for name, _ in signature(function)] == ['self', 'type_', 'self_']

    def test_colliding_function_names(self):
        text = (
            'openapi: 3.0.0\n'
            'paths:\n'
            '  /a-b:\n'
            '    get: {responses: {}}\n'
            '  /a_b:\n'
            '    get: {responses: {}}\n'
        )
        assert list(functions(translate(text))) == ['a_b_get', 'a_b_get1']

    def test_client_name_taken_by_schema(self):
        text = (
            'openapi: 3.0.0\n'
            'paths: {}\n'
            'components:\n'
            '  schemas:\n'
            '    Client: {type: string}\n'
        )
        module = translate(text)
        assert module.types.names() == ['Client', 'Client1']
        assert module.impls[0].target.name == 'Client1'

    def test_every_operation_has_one_function(self):
        spec = parse(PETSTORE_SPEC)
        module = Translator(spec).translate().find_crate('generated_api')
        expected = {
            (template, method) for template, item in spec.paths() for method, _ in item.operations()
        }
        assert len(functions(module)) == len(expected) == 2


class TestOptions:
    """Tests for the types and traits options."""

    def test_types_only(self):
        module = translate(PETSTORE_SPEC, types=True)
        assert module.find_type('Client') is None
        assert module.impls == []

    def test_traits(self):
        module = translate(PETSTORE_SPEC, traits=True)
        (trait,) = list(module.traits)
        assert trait.name == 'ClientApi'
        assert [function.name for function in trait.functions] == ['pet_post', 'pet_petId_get']
        assert all(function.body is None for function in trait.functions)
        assert signature(trait.functions[1])[0] == ('self', '&Self')

        inherent, trait_impl = module.impls
        assert inherent.is_inherent
        assert trait_impl.trait is trait
        delegate = trait_impl.functions[1]
        assert delegate.body.text == 'Client::pet_petId_get(self, petId)'
