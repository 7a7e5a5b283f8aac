"""
{JSON:API} formatting output handling middleware

http://jsonapi.org/format/#content-negotiation-servers
Servers MUST send all JSON:API data in response documents with the header
"Content-Type: application/vnd.api+json" without any media type parameters.

Every request passes through `JsonApiMiddleware.process`:
- when the handler returns a `JsonApiResponse` with a `ScalarEntity`, the entity data is encoded
  into the response body, with pagination links when the handler set a total count
- when the handler raises, the exception is converted to an error document:
    JsonApiException       => status and errors from the exception
    werkzeug HTTPException => status, name and description from the exception, headers (Allow, ...) are kept,
                              redirects (status < 400) are returned as is
    anything else          => logged, generic 500 error
"""
from __future__ import annotations

import logging
import traceback
from collections.abc import Iterator
from functools import wraps
from http import HTTPStatus
from typing import Any, Callable, Optional, Union
from flask import Flask, request as flask_request
from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map
from werkzeug.wrappers import Request, Response
from .config import get_config, is_debug
from .encoder import JsonApiEncoder
from .errors import JsonApiErrorException, JsonApiException, JsonApiMultipleErrorException
from .jsonapi_init import log
from .jsonapi_types import (
    JSONAPI_MEDIA_TYPE,
    KEYWORD_FIRST,
    KEYWORD_LAST,
    KEYWORD_NEXT,
    KEYWORD_PREV,
    KEYWORD_RELATED,
    KEYWORD_RELATIONSHIPS,
    KEYWORD_SELF,
    Error,
    Link,
)
from .pagination import PaginationWindow, build_page_query
from .response import JsonApiResponse, ResponseAttributes, ScalarEntity
from .routing import RouteResolver
from .schema import SchemaContainer

Handler = Callable[[Request], Response]

RELATIONSHIPS_PATH = f"/{KEYWORD_RELATIONSHIPS}/"
INCLUDE_ARG = "include"


def uri_to_string(path: str, query: str = "", fragment: str = "") -> str:
    """
    :return: relative uri, the path always starts with a slash
    """
    result = ""

    # Add a leading slash if necessary.
    if not path.startswith("/"):
        result += "/"

    result += path

    if query:
        result += "?" + query

    if fragment:
        result += "#" + fragment

    return result


class JsonApiMiddleware:
    """
    Flask extension, usage:

        app = Flask(__name__)
        JsonApiMiddleware(app, schemas=SchemaContainer({Article: ArticleSchema()}), meta_author="Jane Doe")

        @app.route("/articles")
        def articles():
            response = JsonApiResponse(entity=ScalarEntity(Article.query.all()))
            return response.with_attribute(ResponseAttributes.ATTR_TOTAL_COUNT, Article.query.count())
    """

    response_class = JsonApiResponse

    def __init__(
        self,
        app: Optional[Flask] = None,
        schemas: Optional[SchemaContainer] = None,
        meta_author: Optional[Union[str, list[str]]] = None,
        meta_copyright: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        url_map: Optional[Map] = None,
    ) -> None:
        self.schemas = schemas if schemas is not None else SchemaContainer()
        self.meta_author = meta_author
        self.meta_copyright = meta_copyright
        self.logger = logger if logger is not None else log
        self.router = RouteResolver(url_map) if url_map is not None else None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Run all the app views through `process`
        """
        if self.router is None:
            self.router = RouteResolver(app.url_map, app.config.get("SERVER_NAME") or "localhost")

        dispatch_request = app.dispatch_request

        @wraps(dispatch_request)
        def jsonapi_dispatch_request(*args: Any, **kwargs: Any) -> Response:
            def handler(request: Request) -> Response:
                return app.make_response(dispatch_request(*args, **kwargs))

            return self.process(flask_request._get_current_object(), handler)

        app.dispatch_request = jsonapi_dispatch_request
        app.extensions["jsonapi_fmt"] = self

    def process(self, request: Request, handler: Handler) -> Response:
        """
        :param request: the current request
        :param handler: callable that produces the response for the request
        :return: response with a JSON:API body
        """
        try:
            response = handler(request)

            if isinstance(response, JsonApiResponse) and isinstance(response.entity, ScalarEntity):
                content = self._encode_entity(request, response, response.entity)
                response.set_data(content)

        except Exception as exc:
            response = self._handle_exception(exc)

        # Setup content type
        response.headers["Content-Type"] = JSONAPI_MEDIA_TYPE
        return response

    def get_encoder(self) -> JsonApiEncoder:
        encoder = JsonApiEncoder(self.schemas)
        encoder.with_encode_options(4 if get_config("JSONAPI_PRETTY_PRINT") else None)
        encoder.with_jsonapi_version(get_config("JSONAPI_VERSION"))
        return encoder

    def get_base_meta(self) -> dict[str, Any]:
        meta: dict[str, Any] = {}

        author = self.meta_author if self.meta_author is not None else get_config("JSONAPI_META_AUTHOR")
        if author is not None:
            if isinstance(author, (list, tuple)):
                meta["authors"] = list(author)
            else:
                meta["author"] = author

        meta_copyright = self.meta_copyright if self.meta_copyright is not None else get_config("JSONAPI_META_COPYRIGHT")
        if meta_copyright is not None:
            meta["copyright"] = meta_copyright

        return meta

    def _encode_entity(self, request: Request, response: JsonApiResponse, entity: ScalarEntity) -> str:
        encoder = self.get_encoder()
        query = request.query_string.decode("latin-1")
        data = entity.get_data()
        if isinstance(data, Iterator):
            # the data is walked more than once for relationship endpoints
            data = list(data)

        links = {
            KEYWORD_SELF: Link(uri_to_string(request.path, query)),
        }

        meta = self.get_base_meta()

        if response.has_attribute(ResponseAttributes.ATTR_TOTAL_COUNT):
            total_count = int(response.get_attribute(ResponseAttributes.ATTR_TOTAL_COUNT))
            meta["totalCount"] = total_count

            window = PaginationWindow.from_args(request.args, total_count)
            if window is not None:
                links.update(self._pagination_links(request, window))

        encoder.with_meta(meta)
        encoder.with_links(links)

        if RELATIONSHIPS_PATH in request.path:
            related = self._related_link(request, encoder.encode_data_as_dict(data))
            if related is not None:
                encoder.with_links({**links, KEYWORD_RELATED: related})

            return encoder.encode_identifiers(data)

        if INCLUDE_ARG in request.args:
            encoder.with_included_paths([path for path in request.args[INCLUDE_ARG].split(",") if path])

        return encoder.encode_data(data)

    def _pagination_links(self, request: Request, window: PaginationWindow) -> dict[str, Link]:
        """
        self and first are always set, prev and next only when there's a previous or next page
        """

        def page_link(offset: int) -> Link:
            return Link(uri_to_string(request.path, build_page_query(offset, window.limit)))

        links = {
            KEYWORD_SELF: page_link(window.offset),
            KEYWORD_FIRST: page_link(0),
        }
        if window.has_prev:
            links[KEYWORD_PREV] = page_link(window.prev_offset)
        if window.has_next:
            links[KEYWORD_NEXT] = page_link(window.next_offset)
        links[KEYWORD_LAST] = page_link(window.last_page_offset)

        return links

    def _related_link(self, request: Request, document: dict[str, Any]) -> Optional[Link]:
        """
        The "related" link of a relationship endpoint: the self link of the (to-one) related resource,
        or else the relationship url without "/relationships/" if the app serves it
        """
        data = document.get("data")
        if isinstance(data, dict):
            self_link = data.get("links", {}).get(KEYWORD_SELF)
            if self_link is not None:
                return Link(self_link) if isinstance(self_link, str) else Link(self_link["href"], self_link.get("meta"))

        uri = uri_to_string(request.path, request.query_string.decode("latin-1"))
        related = uri.replace(RELATIONSHIPS_PATH, "/")
        if self.router is not None and self.router.resolves(related):
            return Link(related)

        return None

    def _handle_exception(self, exc: Exception) -> Response:
        response = self.response_class()

        if isinstance(exc, JsonApiException):
            response.status_code = exc.code

            if isinstance(exc, JsonApiErrorException):
                response.set_data(self.get_encoder().encode_error(exc.get_error()))

            elif isinstance(exc, JsonApiMultipleErrorException):
                response.set_data(self.get_encoder().encode_errors(exc.get_errors()))

            else:
                error = Error(status=str(exc.code), code=str(exc.code), title=str(exc))
                response.set_data(self.get_encoder().encode_error(error))

        elif isinstance(exc, HTTPException):
            status_code = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR.value
            if status_code < HTTPStatus.BAD_REQUEST.value:
                # RequestRedirect (strict slashes), the client has to follow the Location header
                return exc.get_response()

            response.status_code = status_code
            # e.g. Allow for a 405, WWW-Authenticate for a 401
            for name, value in exc.get_response().headers.items():
                if name.lower() not in ("content-type", "content-length"):
                    response.headers.add(name, value)
            error = Error(
                status=str(status_code),
                code=str(status_code),
                title=exc.name,
                detail=exc.description,
            )
            response.set_data(self.get_encoder().encode_error(error))

        else:
            code = getattr(exc, "code", 0)
            self.logger.error(f"An error occurred during request handling: {exc} (code: {code})")
            if is_debug():
                self.logger.debug(traceback.format_exc())

            response.status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
            error = Error(
                status=str(HTTPStatus.INTERNAL_SERVER_ERROR.value),
                code=str(code),
                title="Server error",
                detail="There was a server error, please try again later",
            )
            response.set_data(self.get_encoder().encode_error(error))

        return response
