# JSON:API document to json encoding

import datetime
import decimal
import json
from uuid import UUID
from typing import Any
from .config import is_debug
from .jsonapi_init import log


class JsonApiJSONEncoder(json.JSONEncoder):
    """
    JSON encoding for the attribute values returned by the resource schemas
    """

    # pylint: disable=too-many-return-statements,method-hidden
    def default(self, obj: Any) -> Any:
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, bytes):
            if obj == b"":
                return ""
            log.debug("JsonApiJSONEncoder: serializing bytes obj")
            return obj.hex()

        # Getting here means a schema returned something we can't represent,
        # only give the details away in debug mode
        log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}"')
        if is_debug():
            return str(obj)
        return {"error": "JsonApiJSONEncoder invalid object"}


def dumps(document: Any, indent: Any = None) -> str:
    """
    :param document: JSON:API document dict
    :param indent: json indentation, None for compact output
    :return: json string
    """
    return json.dumps(document, cls=JsonApiJSONEncoder, indent=indent)
