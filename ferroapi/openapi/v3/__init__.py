from ferroapi.openapi.v3.spec import OAS30Spec
from ferroapi.openapi.v3.v3 import OpenAPI

__all__ = ['OAS30Spec', 'OpenAPI']
