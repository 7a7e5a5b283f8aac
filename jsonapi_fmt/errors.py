# Exceptions
#
# Handlers raise JsonApiErrorException / JsonApiMultipleErrorException for expected (domain) failures,
# the middleware converts these to an error document with the exception's status code:
# {
#     "errors": [
#         {
#             "status": "422",
#             "code": "422",
#             "title": "Invalid attribute",
#             "detail": "Name can't be empty",
#             "source": {"pointer": "/data/attributes/name"}
#         }
#     ]
# }
#
# Any other exception is logged and reported as a generic server error.
#
from http import HTTPStatus
from typing import Any, Optional
from .jsonapi_types import Error


class JsonApiException(Exception):
    """
    Marker for the exceptions that are rendered as a JSON:API error document,
    `code` holds the HTTP status of the response
    """

    code = HTTPStatus.INTERNAL_SERVER_ERROR.value


class JsonApiErrorException(JsonApiException):
    """
    Process single error
    """

    def __init__(
        self,
        code: int,
        title: str,
        detail: Optional[str] = None,
        source: Optional[dict[str, Any]] = None,
        type: Optional[str] = None,
    ) -> None:
        """
        :param code: HTTP status code
        :param title: short summary, this is also the exception message
        :param detail: human readable explanation
        :param source: reference to the cause, e.g. {"pointer": "/data/attributes/name"}
        :param type: error type tag
        """
        super().__init__(title)
        self.code = code
        self.title = title
        self.detail = detail
        self.source = source
        self.type = type

    def get_error(self) -> Error:
        return Error(
            status=str(self.code),
            code=str(self.code),
            title=self.title,
            detail=self.detail,
            source=self.source,
            type=self.type,
        )


class JsonApiMultipleErrorException(JsonApiException):
    """
    Process multiple errors
    """

    def __init__(self, code: Optional[int] = None) -> None:
        super().__init__("Json:api error")
        self._code = code
        self._errors: list[Error] = []

    @property
    def code(self) -> int:
        """
        The explicit status code, or the status of the first error
        """
        if self._code is not None:
            return self._code
        if self._errors:
            return int(self._errors[0].status)
        return HTTPStatus.BAD_REQUEST.value

    def add_error(
        self,
        code: int,
        title: str,
        detail: Optional[str] = None,
        source: Optional[dict[str, Any]] = None,
        type: Optional[str] = None,
    ) -> None:
        self._errors.append(JsonApiErrorException(code, title, detail, source, type).get_error())

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def get_errors(self) -> list[Error]:
        return list(self._errors)


class LogicException(Exception):
    """
    Raised on programming errors, e.g. calling a getter that isn't supported
    """


class InvalidStateException(Exception):
    """
    Raised when the configuration doesn't allow the requested operation, e.g. a missing schema
    """
