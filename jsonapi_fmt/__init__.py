# flake8: noqa: F401
from .jsonapi_init import log
from .errors import (
    JsonApiException,
    JsonApiErrorException,
    JsonApiMultipleErrorException,
    LogicException,
    InvalidStateException,
)
from .jsonapi_types import JSONAPI_MEDIA_TYPE, Error, Link
from .schema import (
    HasIdentifier,
    ResourceSchema,
    SchemaContainer,
    EncodingContext,
    RELATIONSHIP_DATA,
    RELATIONSHIP_LINKS,
    RELATIONSHIP_META,
    RELATIONSHIP_LINKS_SELF,
    RELATIONSHIP_LINKS_RELATED,
)
from .encoder import JsonApiEncoder
from .pagination import PaginationWindow
from .response import JsonApiResponse, ScalarEntity, ResponseAttributes
from .routing import RouteResolver
from .middleware import JsonApiMiddleware
from .hydrators import Hydrator, BooleanField, NumberField, TextField
from .crud import Crud, CrudReader, crud_fields
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    "log",
    # middleware:
    "JsonApiMiddleware",
    "JsonApiResponse",
    "ScalarEntity",
    "ResponseAttributes",
    "RouteResolver",
    "PaginationWindow",
    # encoding:
    "JsonApiEncoder",
    "HasIdentifier",
    "ResourceSchema",
    "SchemaContainer",
    "EncodingContext",
    "RELATIONSHIP_DATA",
    "RELATIONSHIP_LINKS",
    "RELATIONSHIP_META",
    "RELATIONSHIP_LINKS_SELF",
    "RELATIONSHIP_LINKS_RELATED",
    "JSONAPI_MEDIA_TYPE",
    "Error",
    "Link",
    # Errors:
    "JsonApiException",
    "JsonApiErrorException",
    "JsonApiMultipleErrorException",
    "LogicException",
    "InvalidStateException",
    # hydrators:
    "Hydrator",
    "BooleanField",
    "NumberField",
    "TextField",
    "Crud",
    "CrudReader",
    "crud_fields",
)
