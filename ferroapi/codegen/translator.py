"""Translation of an OpenAPI document into the code model.

The translation runs in three phases over a single pass of the document:

1. Stub phase: every component schema gets a forward-declared type, so that
   schemas can refer to each other in any order, cycles included.
2. Body phase: every component schema is translated and its declaration
   patches the stub registered for it.
3. Operation phase: every operation becomes a function on the ``Client``
   record, with synthesized sum types for its request body content and for
   its success and error responses.

Translated types are remembered per source pointer, so a schema reached twice
(for example a path-level parameter shared by several operations) is only
declared once.
"""

import logging
from enum import Enum

from ferroapi.codegen.naming import (
    capitalize,
    enum_value_to_variant_name,
    media_type_range_to_variant_name,
    parameter_to_param_name,
    path_method_to_fn_name,
    path_method_to_type_name,
    property_to_field_name,
    schema_to_type_name,
    status_spec_to_variant_name,
    uncollide,
)
from ferroapi.codemodel import (
    UNIT,
    Attribute,
    Codemodel,
    Function,
    FunctionBuilder,
    ImplementationBuilder,
    Module,
    Param,
    Record,
    RecordBuilder,
    ReferenceTo,
    SelfType,
    SumType,
    SumTypeBuilder,
    Tokens,
    TraitBuilder,
    TypeLike,
)
from ferroapi.exceptions import TranslationError, UnsupportedFeatureError
from ferroapi.openapi import Spec
from ferroapi.openapi.nodes import (
    MediaType,
    Operation,
    Parameter,
    PathItem,
    RefOr,
    Reference,
    RequestBody,
    Response,
    Schema,
)
from ferroapi.openapi.sources import SchemaUri, Source
from ferroapi.openapi.types import Format, StatusSpec, Type

logger = logging.getLogger(__name__)

RECORD_DERIVES = (
    '::std::fmt::Debug',
    '::serde::Serialize',
    '::serde::Deserialize',
    '::core::cmp::PartialEq',
)
ENUM_DERIVES = (
    '::std::fmt::Debug',
    '::std::clone::Clone',
    '::serde::Serialize',
    '::serde::Deserialize',
    '::core::cmp::PartialEq',
)
OPERATION_TYPE_DERIVES = ('::std::fmt::Debug',)
CLIENT_DERIVES = ('::std::fmt::Debug',)

CLIENT_NAME = 'Client'
CLIENT_TRAIT_NAME = 'ClientApi'
OPERATION_BODY = 'todo!("operation not yet implemented")'

_NUMBER_FORMATS = {
    Format.INT32: Codemodel.type_i32,
    Format.INT64: Codemodel.type_i64,
    Format.FLOAT: Codemodel.type_f32,
    Format.DOUBLE: Codemodel.type_f64,
}


class TypeKind(Enum):
    JSON = 'json'
    RECORD = 'record'
    MAP = 'map'
    ENUM = 'enum'
    STRING = 'string'
    ARRAY = 'array'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    NULL = 'null'


def classify(schema: Schema) -> TypeKind:
    """Decide which kind of Rust type a schema becomes.

    A schema without a type or with several types is opaque JSON. Objects with
    properties are records; objects without are maps, unless additional
    properties are forbidden, which makes an empty record.

    Raises:
        UnsupportedFeatureError: For objects described only by patternProperties.
    """
    types = schema.types()
    if not types or len(types) != 1:
        return TypeKind.JSON

    match_type = types[0]
    if match_type is Type.OBJECT:
        if schema.properties():
            return TypeKind.RECORD
        if schema.pattern_properties():
            raise UnsupportedFeatureError(
                f"patternProperties at '{schema.source}'",
                'Describe the object with properties or additionalProperties instead',
            )
        if schema.additional_properties() is False:
            return TypeKind.RECORD
        return TypeKind.MAP
    if match_type is Type.STRING:
        return TypeKind.ENUM if schema.enum() is not None else TypeKind.STRING
    if match_type is Type.ARRAY:
        return TypeKind.ARRAY
    if match_type is Type.NUMBER:
        return TypeKind.NUMBER
    if match_type is Type.BOOLEAN:
        return TypeKind.BOOLEAN
    if match_type is Type.NULL:
        return TypeKind.NULL
    raise UnsupportedFeatureError(f"schema type '{match_type.value}' at '{schema.source}'")


class Translator:
    """Builds the code model for one OpenAPI document.

    Args:
        spec: The parsed document.
        module_name: Name of the module holding all generated items.
        types: Only translate schemas, skipping the client surface.
        traits: Also emit a trait declaring every operation, implemented by
            the client by delegating to its inherent functions.

    Example:
        >>> spec = parse(text)
        >>> codemodel = Translator(spec).translate()
        >>> module = codemodel.find_crate('generated_api')
    """

    def __init__(
        self,
        spec: Spec,
        module_name: str = 'generated_api',
        types: bool = False,
        traits: bool = False,
    ):
        self.spec = spec
        self.types_only = types
        self.traits = traits
        self.codemodel = Codemodel()
        self.module: Module = self.codemodel.insert_crate(Module(module_name))
        self._translated: dict[Source, TypeLike] = {}
        self._component_names: dict[str, str] = {}

    def translate(self) -> Codemodel:
        """Run all translation phases and return the finished code model."""
        schemata = self.spec.schemata()
        self._insert_stubs(schemata)
        self._translate_components(schemata)
        if self.types_only:
            logger.debug('Skipping operations, only types were requested')
        else:
            self._translate_operations()
        return self.codemodel

    # Schemas

    def _insert_stubs(self, schemata: list[tuple[str, RefOr]]) -> None:
        for name, _ in schemata:
            type_name = schema_to_type_name(name)
            if self.module.is_name_taken(type_name):
                unique = uncollide(type_name, self._taken_names())
                logger.warning(f"Schema '{name}' maps to '{type_name}' which is taken, using '{unique}'")
                type_name = unique
            stub = self.module.insert_type_stub(type_name)
            self._translated[SchemaUri.for_component(name)] = stub
            self._component_names[name] = type_name

    def _translate_components(self, schemata: list[tuple[str, RefOr]]) -> None:
        for name, ref_or in schemata:
            type_name = self._component_names[name]
            logger.debug(f"Translating schema '{name}' as '{type_name}'")
            if isinstance(ref_or, Reference):
                ref_or.resolve_fully()
                self.module.insert_alias(type_name, self.translate_schema(ref_or, type_name))
            else:
                self._declare(type_name, ref_or.node)

    def _declare(self, type_name: str, schema: Schema) -> None:
        kind = classify(schema)
        if kind is TypeKind.RECORD:
            self.module.insert_record(self._build_record(type_name, schema))
        elif kind is TypeKind.ENUM:
            self.module.insert_sum_type(self._build_enum(type_name, schema))
        else:
            self.module.insert_alias(type_name, self._structural_type(schema, kind, type_name))

    def translate_schema(self, ref_or: RefOr, candidate: str) -> TypeLike:
        """Translate a schema, inline or referenced, into a type.

        Args:
            ref_or: The schema.
            candidate: The name to give the type if an inline schema needs a
                declaration of its own; it is made unique first.

        Returns:
            The type to use where the schema appears.
        """
        if isinstance(ref_or, Reference):
            target = ref_or.target
            found = self._translated.get(target)
            if found is None:
                raise TranslationError('Referenced schema has no declared type', source=str(target))
            return found

        schema = ref_or.node
        found = self._translated.get(schema.source)
        if found is not None:
            return found

        kind = classify(schema)
        if kind is TypeKind.RECORD:
            result = self.module.insert_record(self._build_record(self._fresh_name(candidate), schema))
        elif kind is TypeKind.ENUM:
            result = self.module.insert_sum_type(self._build_enum(self._fresh_name(candidate), schema))
        else:
            result = self._structural_type(schema, kind, candidate)
        self._translated[schema.source] = result
        return result

    def _structural_type(self, schema: Schema, kind: TypeKind, candidate: str) -> TypeLike:
        cm = self.codemodel
        if kind is TypeKind.JSON:
            return cm.type_json()
        if kind is TypeKind.STRING:
            return cm.type_string()
        if kind is TypeKind.BOOLEAN:
            return cm.type_bool()
        if kind is TypeKind.NULL:
            return cm.type_unit()
        if kind is TypeKind.NUMBER:
            return _NUMBER_FORMATS.get(schema.format(), Codemodel.type_f64)(cm)
        if kind is TypeKind.ARRAY:
            items = schema.items()
            item_type = cm.type_json() if items is None else self.translate_schema(items, f'{candidate}Item')
            return cm.type_instance(cm.type_vec(), [item_type])
        if kind is TypeKind.MAP:
            additional = schema.additional_properties()
            if additional is True:
                value_type = cm.type_json()
            else:
                value_type = self.translate_schema(additional, f'{candidate}Value')
            return cm.type_instance(cm.type_hashmap(), [cm.type_string(), value_type])
        raise UnsupportedFeatureError(f"{kind.value} schema at '{schema.source}'")

    def _build_record(self, type_name: str, schema: Schema) -> Record:
        builder = RecordBuilder(type_name).attribute(Attribute.derive(*RECORD_DERIVES))
        taken: set[str] = set()
        for property_name, property_schema in schema.properties().items():
            field_name = uncollide(property_to_field_name(property_name), taken)
            taken.add(field_name)
            field_type = self.translate_schema(property_schema, type_name + capitalize(property_name))
            attributes = []
            if field_name != property_name:
                attributes.append(Attribute.serde_rename(property_name))
            builder.field(field_name, field_type, attributes)
        return builder.build()

    def _build_enum(self, type_name: str, schema: Schema) -> SumType:
        builder = SumTypeBuilder(type_name).attribute(Attribute.derive(*ENUM_DERIVES))
        seen: set[str] = set()
        for value in schema.enum() or []:
            if value is None:
                continue
            text = value if isinstance(value, str) else str(value)
            if text in seen:
                continue
            seen.add(text)
            variant_name = uncollide(enum_value_to_variant_name(text), builder.variant_names)
            attributes = []
            if variant_name != text:
                attributes.append(Attribute.serde_rename(text))
            builder.unit(variant_name, attributes)
        return builder.build()

    def _taken_names(self) -> set[str]:
        return set(self.module.types.names()) | set(self.module.traits.names())

    def _fresh_name(self, candidate: str) -> str:
        return uncollide(schema_to_type_name(candidate), self._taken_names())

    def _reserve(self, candidate: str) -> str:
        """Pick a free type name and hold it with a stub until the type is built."""
        name = self._fresh_name(candidate)
        self.module.insert_type_stub(name)
        return name

    # Operations

    def _translate_operations(self) -> None:
        client = self._insert_client()
        inherent = ImplementationBuilder.inherent(client)
        functions: list[Function] = []
        fn_names: set[str] = set()

        for template, path_item in self.spec.paths():
            for method, operation in path_item.operations():
                fn_name = uncollide(path_method_to_fn_name(method, template), fn_names)
                fn_names.add(fn_name)
                logger.debug(f"Translating {method.value} {template} as '{fn_name}'")
                function = self._translate_operation(client, fn_name, template, path_item, operation)
                inherent.function(function)
                functions.append(function)

        self.module.insert_impl(inherent.build())
        if self.traits:
            self._insert_client_trait(client, functions)

    def _insert_client(self) -> Record:
        name = uncollide(CLIENT_NAME, self._taken_names())
        record = RecordBuilder(name).attribute(Attribute.derive(*CLIENT_DERIVES)).build()
        return self.module.insert_record(record)

    def _translate_operation(
        self,
        client: Record,
        fn_name: str,
        template: str,
        path_item: PathItem,
        operation: Operation,
    ) -> Function:
        prefix = path_method_to_type_name(operation.method, template)
        builder = FunctionBuilder(fn_name).param('self', ReferenceTo(client)).body(OPERATION_BODY)
        taken = {'self'}

        for parameter in self._parameters(path_item, operation):
            param_name = uncollide(parameter_to_param_name(parameter.name), taken)
            taken.add(param_name)
            builder.param(param_name, self._parameter_type(parameter, prefix + capitalize(parameter.name)))

        request_body = operation.request_body()
        if request_body is not None:
            content_type = self._request_body_type(request_body.resolve_fully(), prefix)
            if content_type is not None:
                builder.param(uncollide('body', taken), content_type)

        ok_type, error_type = self._response_types(operation, prefix)
        cm = self.codemodel
        builder.returns(cm.type_instance(cm.type_result(), [ok_type, error_type]))
        return builder.build()

    def _parameters(self, path_item: PathItem, operation: Operation) -> list[Parameter]:
        """Path-level parameters not overridden by the operation, then the operation's own."""
        own = [ref_or.resolve_fully() for ref_or in operation.parameters()]
        own_ids = {parameter.local_id for parameter in own}
        inherited = [
            parameter
            for parameter in (ref_or.resolve_fully() for ref_or in path_item.parameters())
            if parameter.local_id not in own_ids
        ]
        return inherited + own

    def _parameter_type(self, parameter: Parameter, candidate: str) -> TypeLike:
        schema = parameter.schema()
        if schema is not None:
            return self.translate_schema(schema, candidate)
        for media_type in (parameter.content() or {}).values():
            return self._media_payload(media_type, candidate)
        return self.codemodel.type_json()

    def _request_body_type(self, request_body: RequestBody, prefix: str) -> TypeLike | None:
        content = request_body.content()
        if not content:
            return None
        return self._media_sum(f'{prefix}Content', content)

    def _media_payload(self, media_type: MediaType, candidate: str) -> TypeLike:
        schema = media_type.schema()
        if schema is None:
            cm = self.codemodel
            return cm.type_instance(cm.type_vec(), [cm.type_u8()])
        return self.translate_schema(schema, candidate)

    def _media_sum(self, candidate: str, content: dict[str, MediaType]) -> SumType:
        """A sum type with one variant per media type, carrying its payload."""
        name = self._reserve(candidate)
        builder = SumTypeBuilder(name).attribute(Attribute.derive(*OPERATION_TYPE_DERIVES))
        for media_range, media_type in content.items():
            variant_name = uncollide(media_type_range_to_variant_name(media_range), builder.variant_names)
            builder.tuple(variant_name, [self._media_payload(media_type, name + variant_name)])
        return self.module.insert_sum_type(builder.build())

    def _response_types(self, operation: Operation, prefix: str) -> tuple[TypeLike, TypeLike]:
        successes: list[tuple[StatusSpec, Response]] = []
        errors: list[tuple[StatusSpec, Response]] = []
        for status, ref_or in operation.responses():
            response = ref_or.resolve_fully()
            if status.is_success:
                successes.append((status, response))
            else:
                errors.append((status, response))
        return self._ok_type(prefix, successes), self._error_type(prefix, errors)

    def _ok_type(self, prefix: str, successes: list[tuple[StatusSpec, Response]]) -> TypeLike:
        if not successes:
            return UNIT

        umbrella = self._reserve(f'{prefix}Ok') if len(successes) > 1 else None
        payloads = []
        for status, response in successes:
            content = response.content()
            payload = self._media_sum(f'{prefix}Ok{status}', content) if content else UNIT
            payloads.append((status, payload))

        if umbrella is None:
            return payloads[0][1]

        builder = SumTypeBuilder(umbrella).attribute(Attribute.derive(*OPERATION_TYPE_DERIVES))
        for status, payload in payloads:
            variant_name = uncollide(status_spec_to_variant_name(status), builder.variant_names)
            builder.tuple(variant_name, [payload])
        return self.module.insert_sum_type(builder.build())

    def _error_type(self, prefix: str, errors: list[tuple[StatusSpec, Response]]) -> SumType:
        cm = self.codemodel
        name = self._reserve(f'{prefix}Error')
        builder = SumTypeBuilder(name).attribute(Attribute.derive(*OPERATION_TYPE_DERIVES))

        for status, response in errors:
            variant_name = uncollide(status_spec_to_variant_name(status), builder.variant_names)
            content = response.content()
            if not content:
                payload = UNIT
            elif len(content) == 1:
                payload = self._media_payload(next(iter(content.values())), prefix + variant_name)
            else:
                payload = self._media_sum(f'{prefix}{variant_name}Content', content)
            builder.tuple(variant_name, [payload])

        bytes_type = cm.type_instance(cm.type_vec(), [cm.type_u8()])
        builder.tuple('UnknownResponse', [cm.type_instance(cm.type_http_response(), [bytes_type])])
        builder.tuple('OtherError', [cm.type_instance(cm.type_box(), [Tokens('dyn ::std::error::Error')])])
        return self.module.insert_sum_type(builder.build())

    def _insert_client_trait(self, client: Record, functions: list[Function]) -> None:
        trait_name = uncollide(CLIENT_TRAIT_NAME, self._taken_names())
        trait_builder = TraitBuilder(trait_name)
        delegates = []
        for function in functions:
            params = [Param('self', ReferenceTo(SelfType())), *function.params[1:]]
            trait_builder.function(Function(function.name, params, function.returns))
            args = ', '.join(['self', *(param.name for param in function.params[1:])])
            delegates.append(
                Function(function.name, params, function.returns, Tokens(f'{client.name}::{function.name}({args})'))
            )

        trait = self.module.insert_trait(trait_builder.build())
        implementation = ImplementationBuilder.for_trait(trait, client)
        for delegate in delegates:
            implementation.function(delegate)
        self.module.insert_impl(implementation.build())
        logger.debug(f"Declared trait '{trait_name}' with {len(functions)} operations")
