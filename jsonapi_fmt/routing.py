"""
Route lookup over the application url map

The middleware uses this to check whether a candidate "related" link of a relationship
endpoint (e.g. /articles/1/author for /articles/1/relationships/author) is served by the app.
"""
import threading
from typing import Optional
from urllib.parse import urlsplit
from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, MapAdapter
from .jsonapi_init import log


class RouteResolver:
    """
    The map adapter is bound on first use and reused for the lifetime of the resolver
    """

    def __init__(self, url_map: Map, server_name: str = "localhost") -> None:
        self.url_map = url_map
        self.server_name = server_name
        self._adapter: Optional[MapAdapter] = None
        self._lock = threading.Lock()

    @property
    def adapter(self) -> MapAdapter:
        if self._adapter is None:
            with self._lock:
                if self._adapter is None:
                    self._adapter = self.url_map.bind(self.server_name)
        return self._adapter

    def resolves(self, url: str, method: str = "GET") -> bool:
        """
        :param url: url path, a query string or fragment is ignored
        :param method: HTTP method
        :return: True if a rule matches
        """
        path = urlsplit(url).path
        try:
            self.adapter.match(path, method=method)
        except HTTPException as exc:
            # NotFound, MethodNotAllowed or a RequestRedirect (strict slashes)
            log.debug(f"No {method} route for {path}: {exc.__class__.__name__}")
            return False
        return True
