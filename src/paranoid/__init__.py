"""
Soft delete (logical deletion) for SQLAlchemy models.

Deleting a record stamps a nullable timestamp column instead of removing the
row; default-scoped queries hide stamped rows, ``only_deleted`` finds them,
``restore`` clears the stamp and the hard variants remove the row for good.
"""

from .callbacks import after_destroy, before_destroy, run_destroy_callbacks
from .config import DEFAULT_DELETE_COLUMN, INCLUDE_DELETED_OPTION
from .exceptions import (
    FrozenRecordError,
    RecordNotFoundError,
    SoftDeleteConfigurationError,
    SoftDeleteError,
)
from .freezing import freeze, is_frozen
from .mixins import FreezableMixin, SoftDeleteMixin
from .registry import (
    SoftDeleteConfig,
    acts_as_paranoid,
    delete_column,
    enable_soft_delete,
    is_paranoid,
)
from .repository import Scope, SoftDeleteRepository, is_destroyed, is_persisted
from .scoping import (
    default_scope_installed,
    filter_deleted,
    install_default_scope,
    only_deleted,
    only_deleted_select,
    remove_default_scope,
    unscoped_select,
    with_deleted,
)

__all__ = [
    "DEFAULT_DELETE_COLUMN",
    "INCLUDE_DELETED_OPTION",
    "FreezableMixin",
    "FrozenRecordError",
    "RecordNotFoundError",
    "Scope",
    "SoftDeleteConfig",
    "SoftDeleteConfigurationError",
    "SoftDeleteError",
    "SoftDeleteMixin",
    "SoftDeleteRepository",
    "acts_as_paranoid",
    "after_destroy",
    "before_destroy",
    "default_scope_installed",
    "delete_column",
    "enable_soft_delete",
    "filter_deleted",
    "freeze",
    "install_default_scope",
    "is_destroyed",
    "is_frozen",
    "is_paranoid",
    "is_persisted",
    "only_deleted",
    "only_deleted_select",
    "remove_default_scope",
    "run_destroy_callbacks",
    "unscoped_select",
    "with_deleted",
]
