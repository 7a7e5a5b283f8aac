"""
CRUD metadata of the model columns

The create/update permissions of a column are declared in the column `info`:

    class Article(Base):
        __tablename__ = "articles"
        id = Column(Integer, primary_key=True)
        title = Column(String, nullable=False, info={"crud": Crud(required=True, writable=True)})
        published = Column(Boolean, info={"crud": Crud(writable=True, mapped_name="isPublished")})

`crud_fields(Article)` turns these declarations into the hydrator field table.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.sql import sqltypes
from .hydrators.fields import BooleanField, Field, NumberField, TextField
from .jsonapi_init import log

CRUD_INFO_KEY = "crud"


@dataclass(frozen=True)
class Crud:
    """
    :param required: the attribute must be provided when creating an entity
    :param writable: the attribute may be set by the client
    :param mapped_name: JSON:API attribute name, defaults to the model attribute name
    """

    required: bool = False
    writable: bool = False
    mapped_name: Optional[str] = None


class CrudReader:
    """
    Read the CRUD metadata of a column
    """

    def get_crud(self, column: Any) -> Optional[Crud]:
        """
        :param column: sqlalchemy column
        :return: the Crud descriptor in the column info, None if there is none
        """
        crud = getattr(column, "info", {}).get(CRUD_INFO_KEY)
        return crud if isinstance(crud, Crud) else None

    def read(self, column: Any) -> tuple[bool, bool]:
        """
        :param column: sqlalchemy column
        :return: (required, writable), (False, False) if the column has no CRUD metadata
        """
        crud = self.get_crud(column)
        if crud is None:
            return False, False
        return crud.required, crud.writable


@lru_cache(maxsize=128)
def crud_fields(model: type) -> tuple[Field, ...]:
    """
    :param model: sqlalchemy model class
    :return: hydrator fields for the columns with CRUD metadata
    """
    reader = CrudReader()
    result = []

    for attr_name, column in sqla_inspect(model).columns.items():
        crud = reader.get_crud(column)
        if crud is None:
            continue

        kwargs = dict(
            mapped_name=crud.mapped_name or attr_name,
            field_name=attr_name,
            is_required=crud.required,
            is_writable=crud.writable,
            is_nullable=bool(column.nullable),
        )

        column_type = column.type
        if isinstance(column_type, sqltypes.Boolean):
            result.append(BooleanField(**kwargs))
        elif isinstance(column_type, sqltypes.Integer):
            result.append(NumberField(is_decimal=False, **kwargs))
        elif isinstance(column_type, sqltypes.Numeric):
            # Float is a Numeric subclass
            result.append(NumberField(is_decimal=True, **kwargs))
        elif isinstance(column_type, sqltypes.String):
            result.append(TextField(**kwargs))
        else:
            log.debug(f"No hydrator field for {model.__name__}.{attr_name} ({column_type.__class__.__name__})")

    return tuple(result)
