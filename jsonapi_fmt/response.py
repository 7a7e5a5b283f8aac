# Response classes
from typing import Any
from flask import Response
from .jsonapi_types import JSONAPI_MEDIA_TYPE


class ResponseAttributes:
    """
    Names of the side-channel response attributes
    """

    # number of items in the (unpaginated) collection
    ATTR_TOTAL_COUNT = "total_count"


class ScalarEntity:
    """
    Wraps the data (resource, collection of resources or None) a handler wants to return
    """

    def __init__(self, data: Any = None) -> None:
        self.data = data

    def get_data(self) -> Any:
        return self.data


class JsonApiResponse(Response):
    """
    Response class, the body is written by the JsonApiMiddleware when an entity is set
    """

    default_mimetype = JSONAPI_MEDIA_TYPE

    def __init__(self, *args: Any, entity: Any = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.entity = entity
        self.attributes: dict[str, Any] = {}

    def with_attribute(self, name: str, value: Any) -> "JsonApiResponse":
        self.attributes[name] = value
        return self

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)
