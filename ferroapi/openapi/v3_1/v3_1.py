"""OpenAPI 3.1 document models.

Schemas follow JSON Schema 2020-12: ``type`` may be a list and
``patternProperties`` is available. Only the parts of the document the
generator navigates are modelled in
detail; everything else is accepted and ignored.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
)

from ferroapi.openapi.types import ParameterLocation

SchemaType = Literal['null', 'boolean', 'object', 'array', 'number', 'integer', 'string']


class _Model(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class Reference(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    ref: str = Field(..., alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None


def _reference_or_object(value: Any) -> str:
    if isinstance(value, dict):
        return 'reference' if '$ref' in value else 'object'
    return 'reference' if isinstance(value, Reference) else 'object'


class Contact(_Model):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(_Model):
    name: str
    identifier: Optional[str] = None
    url: Optional[str] = None


class Info(_Model):
    summary: Optional[str] = None
    title: str
    description: Optional[str] = None
    termsOfService: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None
    version: str


class Server(_Model):
    url: str
    description: Optional[str] = None


class DiscriminatorObject(_Model):
    propertyName: str
    mapping: Optional[Dict[str, str]] = None


class Schema(_Model):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[Union[SchemaType, List[SchemaType]]] = None
    format: Optional[str] = None
    const: Optional[Any] = None
    examples: Optional[List[Any]] = None
    required: Optional[List[str]] = None
    enum: Optional[List[Any]] = None
    default: Optional[Any] = None

    allOf: Optional[List[SchemaOrRef]] = None
    oneOf: Optional[List[SchemaOrRef]] = None
    anyOf: Optional[List[SchemaOrRef]] = None
    not_: Optional[SchemaOrRef] = Field(None, alias='not')

    items: Optional[SchemaOrRef] = None
    properties: Optional[Dict[str, SchemaOrRef]] = None
    additionalProperties: Optional[Union[bool, SchemaOrRef]] = None
    patternProperties: Optional[Dict[str, SchemaOrRef]] = None
    prefixItems: Optional[List[SchemaOrRef]] = None

    discriminator: Optional[DiscriminatorObject] = None
    readOnly: Optional[bool] = False
    writeOnly: Optional[bool] = False
    deprecated: Optional[bool] = False
    example: Optional[Any] = None


class MediaType(_Model):
    schema_: Optional[SchemaOrRef] = Field(None, alias='schema')
    example: Optional[Any] = None


class Parameter(_Model):
    name: str
    in_: ParameterLocation = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    deprecated: Optional[bool] = False
    schema_: Optional[SchemaOrRef] = Field(None, alias='schema')
    content: Optional[Dict[str, MediaType]] = None


class RequestBody(_Model):
    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = False


class Response(_Model):
    description: Optional[str] = None
    content: Optional[Dict[str, MediaType]] = None


class Operation(_Model):
    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operationId: Optional[str] = None
    parameters: Optional[List[ParameterOrRef]] = None
    requestBody: Optional[RequestBodyOrRef] = None
    responses: Optional[Dict[str, ResponseOrRef]] = None
    deprecated: Optional[bool] = False


class PathItem(_Model):
    ref: Optional[str] = Field(None, alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[List[Server]] = None
    parameters: Optional[List[ParameterOrRef]] = None


class Components(_Model):
    schemas: Optional[Dict[str, SchemaOrRef]] = None
    responses: Optional[Dict[str, ResponseOrRef]] = None
    parameters: Optional[Dict[str, ParameterOrRef]] = None
    requestBodies: Optional[Dict[str, RequestBodyOrRef]] = None


class OpenAPI(_Model):
    openapi: Annotated[str, Field(pattern=r'^3\.1\.\d+(-.+)?$')]
    info: Optional[Info] = None
    servers: Optional[List[Server]] = None
    paths: Optional[Dict[str, PathItem]] = None
    webhooks: Optional[Dict[str, PathItem]] = None
    components: Optional[Components] = None


SchemaOrRef = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[Schema, Tag('object')]],
    Discriminator(_reference_or_object),
]
ParameterOrRef = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[Parameter, Tag('object')]],
    Discriminator(_reference_or_object),
]
RequestBodyOrRef = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[RequestBody, Tag('object')]],
    Discriminator(_reference_or_object),
]
ResponseOrRef = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[Response, Tag('object')]],
    Discriminator(_reference_or_object),
]

Schema.model_rebuild()
MediaType.model_rebuild()
Parameter.model_rebuild()
RequestBody.model_rebuild()
Response.model_rebuild()
Operation.model_rebuild()
PathItem.model_rebuild()
Components.model_rebuild()
OpenAPI.model_rebuild()
