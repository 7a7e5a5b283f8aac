"""
Resource schemas

A schema describes how instances of one resource type are represented in a JSON:API document:
id, attributes, relationships, links and meta. The encoder looks up the schema for every
resource it encodes in a `SchemaContainer`.

Example:

    class ArticleSchema(ResourceSchema):
        type = "articles"

        def get_attributes(self, resource, context):
            return {"title": resource.title}

        def get_relationships(self, resource, context):
            return {"author": {RELATIONSHIP_DATA: resource.author}}

    schemas = SchemaContainer({Article: ArticleSchema()})
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Iterable, Mapping, Optional, Union
from .errors import InvalidStateException, LogicException
from .jsonapi_init import log
from .jsonapi_types import KEYWORD_RELATIONSHIPS, KEYWORD_SELF, Link

# relationship description keys, cfr. ResourceSchema.get_relationships
RELATIONSHIP_DATA = "data"
RELATIONSHIP_LINKS = "links"
RELATIONSHIP_META = "meta"
RELATIONSHIP_LINKS_SELF = "show_self"
RELATIONSHIP_LINKS_RELATED = "show_related"


class HasIdentifier(ABC):
    """
    Resources implement this to expose their JSON:API id
    """

    @abstractmethod
    def get_id(self) -> Any:
        """
        :return: the resource id, it is converted to a string in the document
        """


@dataclass(frozen=True)
class EncodingContext:
    """
    Passed to the schema hooks while encoding

    include_paths: the dot-separated relationship paths that will be side-loaded,
    relative to the resource being encoded
    """

    include_paths: tuple[str, ...] = field(default_factory=tuple)

    def is_included(self, relationship_name: str) -> bool:
        return any(path.split(".")[0] == relationship_name for path in self.include_paths)


class ResourceSchema(ABC):
    """
    Entity schema constructor: subclasses set `type` and implement `get_attributes`,
    the link and meta hooks can be overridden to customize the output
    """

    type: str = ""

    @abstractmethod
    def get_attributes(self, resource: Any, context: EncodingContext) -> Mapping[str, Any]:
        """
        :return: attribute name -> value
        """

    def get_id(self, resource: Any) -> Optional[str]:
        if isinstance(resource, HasIdentifier):
            resource_id = resource.get_id()
            return None if resource_id is None else str(resource_id)
        return None

    def get_relationships(self, resource: Any, context: EncodingContext) -> Mapping[str, Mapping[str, Any]]:
        """
        :return: relationship name -> description, a description may contain
            RELATIONSHIP_DATA: related resource, list of resources or None
            RELATIONSHIP_META: relationship meta
            RELATIONSHIP_LINKS: extra relationship links (name -> Link)
            RELATIONSHIP_LINKS_SELF / RELATIONSHIP_LINKS_RELATED: override the default link flags
        """
        return {}

    def get_links(self, resource: Any) -> Mapping[str, Link]:
        return {
            KEYWORD_SELF: self.get_self_link(resource),
        }

    def get_self_link(self, resource: Any) -> Link:
        return Link(self._get_self_sub_url(resource))

    def get_relationship_self_link(self, resource: Any, name: str) -> Link:
        # Feel free to override this method to change default URL or add meta
        return Link(f"{self._get_self_sub_url(resource)}/{KEYWORD_RELATIONSHIPS}/{name}")

    def get_relationship_related_link(self, resource: Any, name: str) -> Link:
        # Feel free to override this method to change default URL or add meta
        return Link(f"{self._get_self_sub_url(resource)}/{name}")

    def has_identifier_meta(self, resource: Any) -> bool:
        return False

    def get_identifier_meta(self, resource: Any) -> Any:
        raise LogicException("Default schema does not provide any meta")

    def has_resource_meta(self, resource: Any) -> bool:
        return False

    def get_resource_meta(self, resource: Any) -> Any:
        raise LogicException("Default schema does not provide any meta")

    def is_add_self_link_in_relationship_by_default(self, relationship_name: str) -> bool:
        return True

    def is_add_related_link_in_relationship_by_default(self, relationship_name: str) -> bool:
        return True

    @cached_property
    def resources_sub_url(self) -> str:
        """
        :return: the collection url of the resource type, e.g. /articles
        """
        return f"/{self.type}"

    def _get_self_sub_url(self, resource: Any) -> str:
        resource_id = self.get_id(resource)
        return f"{self.resources_sub_url}/{resource_id if resource_id is not None else ''}"


class SchemaContainer:
    """
    Registry of the schemas by resource class, subclasses use the schema of the closest registered base class
    """

    def __init__(self, schemas: Optional[Union[Mapping[type, ResourceSchema], Iterable[tuple[type, ResourceSchema]]]] = None) -> None:
        self._schemas: dict[type, ResourceSchema] = {}
        self._lock = threading.Lock()
        items = schemas.items() if isinstance(schemas, Mapping) else (schemas or [])
        for resource_class, schema in items:
            self.register(resource_class, schema)

    def register(self, resource_class: type, schema: ResourceSchema) -> None:
        if not isinstance(schema, ResourceSchema):
            raise InvalidStateException(f"Schema for {resource_class.__name__} should be a ResourceSchema, got {schema!r}")
        with self._lock:
            self._schemas[resource_class] = schema
        log.debug(f"Registered schema {schema.__class__.__name__} ({schema.type}) for {resource_class.__name__}")

    def get_schema(self, resource: Any) -> ResourceSchema:
        schema = self._lookup(type(resource))
        if schema is None:
            raise InvalidStateException(f"No schema registered for {type(resource).__name__}")
        return schema

    def _lookup(self, resource_class: type) -> Optional[ResourceSchema]:
        for klass in resource_class.__mro__:
            schema = self._schemas.get(klass)
            if schema is not None:
                return schema
        return None
