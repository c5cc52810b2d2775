"""
Soft Delete Registration

Enables soft delete on SQLAlchemy mapped classes. The configuration lives on
the class itself (``__soft_delete__``) so every lookup is an attribute read on
the model rather than a process-wide table.

Usage:
    @acts_as_paranoid
    class Comment(SoftDeleteMixin, Base):
        ...

    @acts_as_paranoid(column="deleted_date")
    class Invoice(SoftDeleteMixin, Base):
        ...
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from .config import DEFAULT_DELETE_COLUMN
from .exceptions import SoftDeleteConfigurationError
from .freezing import guard_attributes

logger = logging.getLogger(__name__)

CONFIG_ATTR = "__soft_delete__"


@dataclass(frozen=True)
class SoftDeleteConfig:
    """Per-model soft delete settings"""

    column: str = DEFAULT_DELETE_COLUMN


def _model_of(record_or_type: Any) -> type:
    return record_or_type if isinstance(record_or_type, type) else type(record_or_type)


def get_config(record_or_type: Any) -> Optional[SoftDeleteConfig]:
    """Return the soft delete config of a model (or instance), None if not enabled"""
    return getattr(_model_of(record_or_type), CONFIG_ATTR, None)


def is_paranoid(record_or_type: Any) -> bool:
    """Whether soft delete has been enabled for the model (or the model of an instance)"""
    return get_config(record_or_type) is not None


def delete_column(record_or_type: Any) -> str:
    """Name of the deletion marker attribute, explicit or default"""
    config = get_config(record_or_type)
    return config.column if config is not None else DEFAULT_DELETE_COLUMN


def enable_soft_delete(model: type, column: Optional[str] = None) -> type:
    """
    Enable soft delete for a mapped class

    Registers the marker column, guards the column attributes of frozen
    instances against writes and installs the default scope on every Session
    (see remove_default_scope to opt out).

    Args:
        model: SQLAlchemy mapped class
        column: Attribute name of the nullable timestamp marker. Defaults to
            PARANOID_DELETE_COLUMN (``deleted_at``).

    Returns:
        The model, so the call can back a class decorator

    Raises:
        SoftDeleteConfigurationError: model is not mapped or lacks the column
    """
    column = column or DEFAULT_DELETE_COLUMN

    mapper = inspect(model, raiseerr=False)
    if mapper is None:
        raise SoftDeleteConfigurationError(f"{model!r} is not a mapped class")
    if column not in mapper.column_attrs:
        raise SoftDeleteConfigurationError(
            f"{model.__name__} has no mapped column '{column}' to use as deletion marker"
        )

    # scoping reads the config back from this module
    from .scoping import install_default_scope

    setattr(model, CONFIG_ATTR, SoftDeleteConfig(column=column))
    guard_attributes(model)
    install_default_scope(Session)
    logger.debug("Soft delete enabled for %s (column=%s)", model.__name__, column)
    return model


def acts_as_paranoid(model: Optional[type] = None, *, column: Optional[str] = None):
    """Class decorator form of enable_soft_delete, usable with or without arguments"""
    if model is not None:
        return enable_soft_delete(model, column=column)

    def decorator(cls: type) -> type:
        return enable_soft_delete(cls, column=column)

    return decorator
