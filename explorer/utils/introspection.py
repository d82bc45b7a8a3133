"""
SQLAlchemy model introspection.

Turns declarative classes into ModelDescriptor instances by reading their
column metadata. Column ``info`` may carry ``min``, ``max`` and
``description`` entries, which have no native SQLAlchemy counterpart.
"""

import datetime
import decimal
import logging
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable

from explorer.models import ModelDescriptor, PropertyDescriptor

logger = logging.getLogger(__name__)

# Python types produced by SQLAlchemy column types, mapped to host type names
PYTHON_TYPE_NAMES = {
    str: "string",
    bool: "boolean",
    int: "number",
    float: "number",
    decimal.Decimal: "number",
    datetime.datetime: "date",
    datetime.date: "date",
    dict: "object",
    list: "array",
}


def column_type_name(column) -> str:
    """Return the host type name for a SQLAlchemy column."""
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return type(column.type).__name__.lower()
    return PYTHON_TYPE_NAMES.get(python_type, python_type.__name__.lower())


def column_default(column) -> Any:
    """Return the scalar Python-side default of a column, or None."""
    default = column.default
    if default is not None and getattr(default, "is_scalar", False):
        return default.arg
    return None


def property_from_column(key: str, column) -> PropertyDescriptor:
    info = column.info or {}
    prop = PropertyDescriptor(
        name=key,
        type=info.get("type", column_type_name(column)),
        required=not column.nullable and not column.primary_key,
        minimum=info.get("min"),
        maximum=info.get("max"),
        description=info.get("description") or column.doc,
    )
    default = column_default(column)
    if default is not None:
        prop.default_value = default
    return prop


def model_from_sqlalchemy(
    model_class, name: Optional[str] = None, **settings
) -> ModelDescriptor:
    """Build a ModelDescriptor from a SQLAlchemy declarative class.

    Args:
        model_class: Declarative (``db.Model``) class to introspect
        name: Model name, defaults to the class name
        **settings: Extra ModelDescriptor fields (plural, public, ...)

    Returns:
        ModelDescriptor: Descriptor whose properties mirror the mapped columns

    Raises:
        TypeError: If ``model_class`` is not a mapped class
    """
    try:
        mapper = inspect(model_class)
    except NoInspectionAvailable as e:
        raise TypeError(f"{model_class!r} is not a SQLAlchemy mapped class") from e

    properties = {}
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        properties[attr.key] = property_from_column(attr.key, column)

    settings.setdefault("description", (model_class.__doc__ or "").strip() or None)
    descriptor = ModelDescriptor(name=name or model_class.__name__, properties=properties, **settings)
    logger.debug(f"Introspected {descriptor.name} with {len(properties)} properties")
    return descriptor
