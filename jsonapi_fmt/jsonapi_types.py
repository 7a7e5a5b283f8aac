from dataclasses import dataclass
from typing import Any, Optional, TypedDict, Union


JSONAPI_MEDIA_TYPE = "application/vnd.api+json"

# document and link keywords
KEYWORD_SELF = "self"
KEYWORD_RELATED = "related"
KEYWORD_FIRST = "first"
KEYWORD_LAST = "last"
KEYWORD_NEXT = "next"
KEYWORD_PREV = "prev"
KEYWORD_RELATIONSHIPS = "relationships"


class JSONAPIResourceIdentifier(TypedDict, total=False):
    id: Optional[str]
    type: str
    meta: dict[str, Any]


class JSONAPIResourceObject(JSONAPIResourceIdentifier, total=False):
    attributes: dict[str, Any]
    relationships: dict[str, Any]
    links: dict[str, Any]


JSONAPIData = Union[JSONAPIResourceObject, list[JSONAPIResourceObject], None]


class JSONAPIErrorObject(TypedDict, total=False):
    status: str
    code: str
    title: str
    detail: str
    source: dict[str, Any]
    type: str


class JSONAPIDocument(TypedDict, total=False):
    jsonapi: dict[str, str]
    meta: dict[str, Any]
    links: dict[str, Any]
    data: JSONAPIData
    included: list[JSONAPIResourceObject]
    errors: list[JSONAPIErrorObject]


@dataclass(frozen=True)
class Link:
    """
    A links object member: either a plain url or an {"href", "meta"} object
    """

    href: str
    meta: Optional[dict[str, Any]] = None

    def to_value(self) -> Union[str, dict[str, Any]]:
        if self.meta is None:
            return self.href
        return {"href": self.href, "meta": self.meta}


@dataclass(frozen=True)
class Error:
    """
    A single JSON:API error object (https://jsonapi.org/format/#error-objects)

    `status` and `code` are strings on the wire, even though they're usually numeric
    """

    status: str
    code: str
    title: Optional[str] = None
    detail: Optional[str] = None
    source: Optional[dict[str, Any]] = None
    type: Optional[str] = None

    def to_dict(self) -> JSONAPIErrorObject:
        result: JSONAPIErrorObject = {"status": self.status, "code": self.code}
        if self.title is not None:
            result["title"] = self.title
        if self.detail is not None:
            result["detail"] = self.detail
        if self.source is not None:
            result["source"] = self.source
        if self.type is not None:
            result["type"] = self.type
        return result
