"""
JSON:API document encoding

http://jsonapi.org/format/#document-top-level

The encoder walks the resource graph with the help of the schemas in a `SchemaContainer`:
- primary data: resource objects (`encode_data`) or resource identifiers (`encode_identifiers`)
- included: the related resources on the requested include paths, e.g. ["author", "comments.author"]
- errors: `encode_error` / `encode_errors`

The document level members (jsonapi, meta, links) are set with the fluent `with_*` methods.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional
from .json_encoder import dumps
from .jsonapi_types import KEYWORD_RELATED, KEYWORD_SELF, Error, JSONAPIData, JSONAPIDocument, JSONAPIResourceIdentifier, JSONAPIResourceObject, Link
from .schema import (
    RELATIONSHIP_DATA,
    RELATIONSHIP_LINKS,
    RELATIONSHIP_LINKS_RELATED,
    RELATIONSHIP_LINKS_SELF,
    RELATIONSHIP_META,
    EncodingContext,
    ResourceSchema,
    SchemaContainer,
)


def _is_collection(data: Any) -> bool:
    return isinstance(data, Iterable) and not isinstance(data, (str, bytes, Mapping))


def _as_list(data: Any) -> list:
    if data is None:
        return []
    if _is_collection(data):
        return list(data)
    return [data]


def _sub_paths(include_paths: tuple[str, ...], relationship_name: str) -> tuple[str, ...]:
    """
    ("author.books", "author", "comments") , "author" => ("books",)
    """
    prefix = relationship_name + "."
    return tuple(path[len(prefix) :] for path in include_paths if path.startswith(prefix))


class JsonApiEncoder:
    """
    Encode resources, identifiers and errors to a JSON:API document
    """

    def __init__(self, schemas: SchemaContainer) -> None:
        self.schemas = schemas
        self._indent: Optional[int] = None
        self._version: Optional[str] = None
        self._meta: Optional[dict[str, Any]] = None
        self._links: Optional[dict[str, Link]] = None
        self._included_paths: tuple[str, ...] = ()

    def with_encode_options(self, indent: Optional[int]) -> "JsonApiEncoder":
        self._indent = indent
        return self

    def with_jsonapi_version(self, version: Optional[str]) -> "JsonApiEncoder":
        self._version = version
        return self

    def with_meta(self, meta: Optional[Mapping[str, Any]]) -> "JsonApiEncoder":
        self._meta = dict(meta) if meta is not None else None
        return self

    def with_links(self, links: Optional[Mapping[str, Link]]) -> "JsonApiEncoder":
        self._links = dict(links) if links is not None else None
        return self

    def with_included_paths(self, paths: Iterable[str]) -> "JsonApiEncoder":
        self._included_paths = tuple(paths)
        return self

    def encode_data(self, data: Any) -> str:
        return dumps(self.encode_data_as_dict(data), self._indent)

    def encode_data_as_dict(self, data: Any) -> JSONAPIDocument:
        """
        :param data: None, a resource or a collection of resources
        :return: document dict with the resource objects as primary data
        """
        if _is_collection(data):
            data = list(data)
        included: dict[tuple[str, Optional[str]], JSONAPIResourceObject] = {}
        primary = [self._identity(resource) for resource in _as_list(data)]

        encoded: JSONAPIData
        if data is None:
            encoded = None
        elif _is_collection(data):
            encoded = [self._encode_resource(resource, self._included_paths, included) for resource in data]
        else:
            encoded = self._encode_resource(data, self._included_paths, included)

        document = self._document()
        document["data"] = encoded
        if self._included_paths:
            # primary data is never repeated in the included list
            document["included"] = [obj for key, obj in included.items() if key not in primary]
        return document

    def encode_identifiers(self, data: Any) -> str:
        """
        Encode the resource linkage only, used for relationship endpoints
        """
        document = self._document()
        document["data"] = self._encode_linkage(data)
        return dumps(document, self._indent)

    def encode_error(self, error: Error) -> str:
        return self.encode_errors([error])

    def encode_errors(self, errors: Iterable[Error]) -> str:
        document = self._document()
        document["errors"] = [error.to_dict() for error in errors]
        return dumps(document, self._indent)

    def _document(self) -> JSONAPIDocument:
        document: JSONAPIDocument = {}
        if self._version is not None:
            document["jsonapi"] = {"version": self._version}
        if self._meta:
            document["meta"] = dict(self._meta)
        if self._links:
            document["links"] = {name: link.to_value() for name, link in self._links.items()}
        return document

    def _identity(self, resource: Any) -> tuple[str, Optional[str]]:
        schema = self.schemas.get_schema(resource)
        return schema.type, schema.get_id(resource)

    def _encode_identifier(self, resource: Any) -> JSONAPIResourceIdentifier:
        schema = self.schemas.get_schema(resource)
        result: JSONAPIResourceIdentifier = {"type": schema.type, "id": schema.get_id(resource)}
        if schema.has_identifier_meta(resource):
            result["meta"] = schema.get_identifier_meta(resource)
        return result

    def _encode_linkage(self, data: Any) -> Any:
        if data is None:
            return None
        if _is_collection(data):
            return [self._encode_identifier(resource) for resource in data]
        return self._encode_identifier(data)

    def _encode_resource(
        self,
        resource: Any,
        include_paths: tuple[str, ...],
        included: dict[tuple[str, Optional[str]], JSONAPIResourceObject],
    ) -> JSONAPIResourceObject:
        schema = self.schemas.get_schema(resource)
        context = EncodingContext(include_paths)
        result: JSONAPIResourceObject = {"type": schema.type, "id": schema.get_id(resource)}

        attributes = schema.get_attributes(resource, context)
        if attributes:
            result["attributes"] = dict(attributes)

        relationships = {}
        for name, description in schema.get_relationships(resource, context).items():
            relationships[name] = self._encode_relationship(schema, resource, name, description)
            if RELATIONSHIP_DATA in description and context.is_included(name):
                for related in _as_list(description[RELATIONSHIP_DATA]):
                    self._include(related, _sub_paths(include_paths, name), included)
        if relationships:
            result["relationships"] = relationships

        links = schema.get_links(resource)
        if links:
            result["links"] = {name: link.to_value() for name, link in links.items()}

        if schema.has_resource_meta(resource):
            result["meta"] = schema.get_resource_meta(resource)

        return result

    def _encode_relationship(self, schema: ResourceSchema, resource: Any, name: str, description: Mapping[str, Any]) -> dict[str, Any]:
        """
        http://jsonapi.org/format/#document-resource-object-relationships
        """
        result: dict[str, Any] = {}

        links = {}
        if description.get(RELATIONSHIP_LINKS_SELF, schema.is_add_self_link_in_relationship_by_default(name)):
            links[KEYWORD_SELF] = schema.get_relationship_self_link(resource, name).to_value()
        if description.get(RELATIONSHIP_LINKS_RELATED, schema.is_add_related_link_in_relationship_by_default(name)):
            links[KEYWORD_RELATED] = schema.get_relationship_related_link(resource, name).to_value()
        for link_name, link in description.get(RELATIONSHIP_LINKS, {}).items():
            links[link_name] = link.to_value()
        if links:
            result["links"] = links

        if RELATIONSHIP_DATA in description:
            result["data"] = self._encode_linkage(description[RELATIONSHIP_DATA])

        if RELATIONSHIP_META in description:
            result["meta"] = description[RELATIONSHIP_META]

        return result

    def _include(
        self,
        resource: Any,
        include_paths: tuple[str, ...],
        included: dict[tuple[str, Optional[str]], JSONAPIResourceObject],
    ) -> None:
        key = self._identity(resource)
        first_visit = key not in included
        if not first_visit and not include_paths:
            return
        if first_visit:
            # reserve the position so the included list follows the traversal order
            included[key] = {}
        encoded = self._encode_resource(resource, include_paths, included)
        if first_visit:
            included[key] = encoded
