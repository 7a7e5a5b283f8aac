"""
Request document hydration

The hydrator reads the "data.attributes" of a JSON:API request document and returns the
coerced values keyed by entity field name, ready to be passed to a model constructor or update.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Iterable, Mapping
from ..errors import JsonApiErrorException, JsonApiMultipleErrorException
from ..jsonapi_init import log
from .fields import Field


class Hydrator:
    """
    :param fields: the field table of the entity, cfr. `jsonapi_fmt.crud.crud_fields`
    """

    def __init__(self, fields: Iterable[Field]) -> None:
        self.fields = tuple(fields)

    def hydrate(self, document: Mapping[str, Any], is_new: bool = True) -> dict[str, Any]:
        """
        :param document: request payload
        :param is_new: True when creating an entity (POST), False when updating (PATCH)
        :return: field name -> value
        """
        data = document.get("data") if isinstance(document, Mapping) else None
        if not isinstance(data, Mapping):
            raise JsonApiErrorException(
                HTTPStatus.BAD_REQUEST.value,
                "Invalid document",
                "Provided document doesn't contain a data object",
                {"pointer": "/data"},
            )

        attributes = data.get("attributes") or {}
        if not isinstance(attributes, Mapping):
            raise JsonApiErrorException(
                HTTPStatus.BAD_REQUEST.value,
                "Invalid document",
                "Resource attributes should be an object",
                {"pointer": "/data/attributes"},
            )

        errors = JsonApiMultipleErrorException()
        result = {}

        for field in self.fields:
            present = attributes.get(field.mapped_name) is not None

            if is_new:
                if field.is_required and not present:
                    errors.add_error(
                        HTTPStatus.UNPROCESSABLE_ENTITY.value,
                        "Missing required attribute",
                        f'Attribute "{field.mapped_name}" is required',
                        {"pointer": f"/data/attributes/{field.mapped_name}"},
                    )
                    continue
                if not field.is_writable and not field.is_required:
                    continue

            elif not field.is_writable or field.mapped_name not in attributes:
                continue

            result[field.field_name] = field.get_value(attributes)

        if errors.has_errors():
            log.debug(f"Hydration failed: {len(errors.get_errors())} missing attribute(s)")
            raise errors

        return result
