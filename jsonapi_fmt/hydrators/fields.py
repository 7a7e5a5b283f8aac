"""
Entity hydrator fields

A field maps a JSON:API attribute (`mapped_name`) to an entity attribute (`field_name`)
and coerces the raw attribute value. Coercion never fails: values that are missing or can't be
used fall back to a default (see the `get_value` implementations).
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

KIND_BOOLEAN = "boolean"
KIND_INTEGER = "integer"
KIND_DECIMAL = "decimal"
KIND_TEXT = "text"


# leading decimal number of a string, the rest of the string is ignored: "12abc" => "12"
NUMERIC_PREFIX = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def is_scalar(value: Any) -> bool:
    return isinstance(value, (bool, int, float, str))


def to_bool(value: Any) -> bool:
    # "0" is a common representation of false in form encoded payloads
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def to_float(value: Any) -> float:
    if isinstance(value, str):
        match = NUMERIC_PREFIX.match(value)
        value = match.group(0) if match else 0
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def to_int(value: Any) -> int:
    if isinstance(value, str):
        value = to_float(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        # nan, inf
        return 0


def to_text(value: Any) -> str:
    """
    true => "1", false => "", 1.0 => "1"
    """
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Field(ABC):
    """
    Base entity field
    """

    mapped_name: str
    field_name: str
    is_required: bool = False
    is_writable: bool = False
    is_nullable: bool = True

    kind = ""

    @abstractmethod
    def get_value(self, attributes: Mapping[str, Any]) -> Any:
        """
        :param attributes: the "data.attributes" of the request document
        :return: the coerced value
        """


@dataclass(frozen=True)
class BooleanField(Field):
    """
    Entity boolean field
    """

    kind = KIND_BOOLEAN

    def get_value(self, attributes: Mapping[str, Any]) -> Optional[bool]:
        value = attributes.get(self.mapped_name)

        if value is not None:
            return to_bool(value)

        if self.is_nullable:
            return None

        return False


@dataclass(frozen=True)
class NumberField(Field):
    """
    Entity numeric field

    Missing or non-scalar values are None, also for fields that aren't nullable
    """

    is_decimal: bool = False

    @property
    def kind(self) -> str:  # type: ignore[override]
        return KIND_DECIMAL if self.is_decimal else KIND_INTEGER

    def get_value(self, attributes: Mapping[str, Any]) -> Optional[Union[int, float]]:
        value = attributes.get(self.mapped_name)

        if value is None or not is_scalar(value):
            return None

        return to_float(value) if self.is_decimal else to_int(value)


@dataclass(frozen=True)
class TextField(Field):
    """
    Entity text field

    An empty string (also false, which is "") is None for nullable fields
    """

    kind = KIND_TEXT

    def get_value(self, attributes: Mapping[str, Any]) -> Optional[str]:
        value = attributes.get(self.mapped_name)

        if value is None or not is_scalar(value):
            return None

        text = to_text(value)
        if self.is_nullable and text == "":
            return None

        return text
