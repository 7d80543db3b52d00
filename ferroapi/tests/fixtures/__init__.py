"""Test fixtures for FerroAPI tests.

This module provides sample OpenAPI documents as text, the way they are read
from disk, for testing parsing, translation and emission.
"""

# No paths, no components
EMPTY_SPEC = """openapi: 3.0.0
info: {title: E, version: v1}
paths:
"""

# Same document with an explicitly empty paths map
EMPTY_PATHS_SPEC = """openapi: 3.0.0
info: {title: E, version: v1}
paths: {}
"""

NUMBER_FORMATS_SPEC = """openapi: 3.0.0
info: {title: Numbers, version: v1}
paths: {}
components:
  schemas:
    NumberFormats:
      type: object
      properties:
        number_unformatted: {type: number}
        number_double: {type: number, format: double}
        number_float: {type: number, format: float}
        integer_int64: {type: integer, format: int64}
        integer_int32: {type: integer, format: int32}
"""

# Path-level path parameter plus an operation-level query parameter
BARS_SPEC = """openapi: 3.0.3
info: {title: Bars, version: v1}
paths:
  /bars/{bar_name}:
    parameters:
      - name: bar_name
        in: path
        required: true
        schema: {type: string}
    get:
      parameters:
        - name: with_foo
          in: query
          schema: {type: boolean}
      responses:
        200:
          description: The bar
          content:
            application/json:
              schema: {type: string}
"""

PETSTORE_SPEC = """openapi: 3.0.2
info: {title: Petstore, version: 1.0.0}
paths:
  /pet:
    post:
      requestBody:
        content:
          application/json:
            schema: {$ref: '#/components/schemas/Pet'}
          application/xml:
            schema: {$ref: '#/components/schemas/Pet'}
          application/x-www-form-urlencoded:
            schema: {$ref: '#/components/schemas/Pet'}
      responses:
        '405':
          description: Invalid input
  /pet/{petId}:
    get:
      parameters:
        - name: petId
          in: path
          required: true
          schema: {type: integer, format: int64}
      responses:
        '200':
          description: successful operation
          content:
            application/json:
              schema: {$ref: '#/components/schemas/Pet'}
            application/xml:
              schema: {$ref: '#/components/schemas/Pet'}
        '400':
          description: Invalid ID supplied
        '404':
          description: Pet not found
components:
  schemas:
    Pet:
      type: object
      required: [name]
      properties:
        id: {type: integer, format: int64}
        name: {type: string}
        status:
          type: string
          enum: [available, pending, sold]
"""

CYCLE_SPEC = """openapi: 3.0.0
info: {title: Cycle, version: v1}
paths: {}
components:
  schemas:
    A:
      type: object
      properties:
        b: {$ref: '#/components/schemas/B'}
    B:
      type: object
      properties:
        a: {$ref: '#/components/schemas/A'}
"""

NO_RESPONSES_SPEC = """openapi: 3.0.0
info: {title: Ping, version: v1}
paths:
  /ping:
    get:
      responses: {}
"""

# Several successes, wildcard and default errors, an error with two media types
STATUSES_SPEC = """openapi: 3.0.0
info: {title: Statuses, version: v1}
paths:
  /items:
    post:
      responses:
        '200':
          description: Updated
          content:
            application/json:
              schema: {type: string}
        '201':
          description: Created
        '4XX':
          description: Client error
          content:
            application/json:
              schema: {type: string}
        '499':
          description: Unnamed
        default:
          description: Anything else
          content:
            application/json:
              schema: {type: string}
            text/plain: {}
"""

OAS31_SPEC = """{
  "openapi": "3.1.0",
  "info": {"title": "Typed", "version": "v1"},
  "paths": {},
  "components": {
    "schemas": {
      "Nullable": {"type": ["string", "null"]},
      "Count": {"type": ["integer", "integer"], "format": "int32"},
      "Tags": {"type": "array", "items": {"type": "string"}},
      "Labels": {"type": "object", "additionalProperties": {"type": "string"}},
      "Anything": {}
    }
  }
}
"""

OAS31_PATTERN_PROPERTIES_SPEC = """openapi: 3.1.0
info: {title: Patterns, version: v1}
paths: {}
components:
  schemas:
    Headers:
      type: object
      patternProperties:
        '^x-': {type: string}
"""

ALIAS_SPEC = """openapi: 3.0.0
info: {title: Aliases, version: v1}
paths: {}
components:
  schemas:
    Name: {type: string}
    PetName: {$ref: '#/components/schemas/Name'}
    Flags:
      type: object
      additionalProperties: true
    Empty:
      type: object
      additionalProperties: false
    Matrix:
      type: array
      items:
        type: array
        items: {type: number}
"""

KEYWORDS_SPEC = """openapi: 3.0.0
info: {title: Keywords, version: v1}
paths:
  /match/{type}:
    get:
      parameters:
        - name: type
          in: path
          required: true
          schema: {type: string}
        - name: self
          in: query
          schema: {type: string}
      responses:
        '204':
          description: Nothing
components:
  schemas:
    type:
      type: object
      properties:
        type: {type: string}
        Kind: {type: string}
        '2fa': {type: boolean}
"""

SHARED_COMPONENTS_SPEC = """openapi: 3.0.0
info: {title: Shared, version: v1}
paths:
  /things:
    get:
      parameters:
        - $ref: '#/components/parameters/Limit'
      responses:
        '200':
          $ref: '#/components/responses/Things'
    put:
      requestBody:
        $ref: '#/components/requestBodies/Thing'
      responses:
        '204':
          description: Stored
components:
  schemas:
    Thing:
      type: object
      properties:
        name: {type: string}
  parameters:
    Limit:
      name: limit
      in: query
      schema: {type: integer, format: int32}
  requestBodies:
    Thing:
      content:
        application/json:
          schema: {$ref: '#/components/schemas/Thing'}
  responses:
    Things:
      description: All things
      content:
        application/json:
          schema:
            type: array
            items: {$ref: '#/components/schemas/Thing'}
"""

EXTERNAL_REF_SPEC = """openapi: 3.0.0
info: {title: External, version: v1}
paths: {}
components:
  schemas:
    Pet: {$ref: 'other.yaml#/Pet'}
"""

DANGLING_REF_SPEC = """openapi: 3.0.0
info: {title: Dangling, version: v1}
paths: {}
components:
  schemas:
    Pet:
      type: object
      properties:
        owner: {$ref: '#/components/schemas/Owner'}
"""

INVALID_STATUS_SPEC = """openapi: 3.0.0
info: {title: Status, version: v1}
paths:
  /x:
    get:
      responses:
        '600':
          description: Out of range
"""

SWAGGER_SPEC = """swagger: '2.0'
info: {title: Old, version: v1}
paths: {}
"""

# Scalars that YAML 1.1 reads as booleans or integers, used as values and keys
YAML_12_SPEC = """openapi: 3.0.0
info: {title: Countries, version: v1}
paths: {}
components:
  schemas:
    Country:
      type: string
      enum: [NO, yes, on]
    Settings:
      type: object
      properties:
        1: {type: string}
        on: {type: boolean}
        true: {type: string}
"""
