from ferroapi.openapi.v3_1.spec import OAS31Spec
from ferroapi.openapi.v3_1.v3_1 import OpenAPI

__all__ = ['OAS31Spec', 'OpenAPI']
