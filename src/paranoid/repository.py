"""
Soft Delete Repository

Data-access adapter for one model. All soft delete semantics live here: the
soft and hard variants of delete/destroy sit side by side, and every query is
built through ``statement()`` which injects the deletion filter for the
requested scope.

Usage:
    repo = SoftDeleteRepository(db, Comment)
    repo.soft_destroy(comment)
    repo.count()                        # active rows only
    repo.count(Scope.WITH_DELETED)      # every row
    restored = repo.find(comment_id, Scope.ONLY_DELETED)
    repo.restore(restored)
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from . import scoping
from .callbacks import run_destroy_callbacks
from .config import AUTOCOMMIT, utcnow
from .exceptions import RecordNotFoundError, SoftDeleteConfigurationError
from .freezing import freeze, mark_destroyed, was_destroyed
from .registry import delete_column, is_paranoid

logger = logging.getLogger(__name__)


class Scope(str, Enum):
    """Which rows a query sees"""

    DEFAULT = "default"
    WITH_DELETED = "with_deleted"
    ONLY_DELETED = "only_deleted"


def is_persisted(record: Any) -> bool:
    """Whether the instance corresponds to an existing row"""
    state = inspect(record)
    return state.has_identity and not (state.deleted or state.was_deleted or was_destroyed(record))


def is_destroyed(record: Any) -> bool:
    """
    Deletion state of an instance as held in memory

    For paranoid models this is whether the marker is set; for other models
    whether the row was physically removed.
    """
    if is_paranoid(record):
        return getattr(record, delete_column(record)) is not None
    state = inspect(record)
    return was_destroyed(record) or state.deleted or state.was_deleted


def _describe(record: Any) -> str:
    identity = inspect(record).identity
    key = identity[0] if identity and len(identity) == 1 else identity
    return f"{type(record).__name__}(id={key!r})"


class SoftDeleteRepository:
    """Soft delete aware data access for a single model"""

    def __init__(self, db: Session, model: type, autocommit: Optional[bool] = None):
        self.db = db
        self.model = model
        self.autocommit = AUTOCOMMIT if autocommit is None else autocommit
        self.paranoid = is_paranoid(model)
        self.column = delete_column(model)
        self.mapper = inspect(model)

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        try:
            if self.autocommit:
                self.db.commit()
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to persist %s changes: %s", self.model.__name__, e)
            if self.autocommit:
                self.db.rollback()
            raise

    def _load(self, record: Any) -> None:
        """Load expired attributes so the instance stays readable once detached"""
        state = inspect(record)
        if state.expired_attributes and state.persistent:
            self.db.refresh(record)

    def _detach(self, record: Any) -> None:
        self._load(record)
        if record in self.db:
            self.db.expunge(record)

    def _write_marker(self, record: Any, value: Any) -> None:
        setattr(record, self.column, value)
        self.db.add(record)
        self._persist()

    def _require_paranoid(self) -> None:
        if not self.paranoid:
            raise SoftDeleteConfigurationError(f"Soft delete is not enabled for {self.model.__name__}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def soft_delete(self, record: Any) -> Any:
        """
        Stamp the deletion marker and persist that single change

        Records that are already deleted or were never saved are left
        untouched. Either way the instance ends up frozen and detached.
        Models without soft delete fall through to hard_delete.

        With autocommit=False the instance is detached before the caller
        commits; if the caller rolls back, the detached instance keeps its
        in-memory marker although the row was never updated. Load the row
        again after a rollback.

        Args:
            record: Instance of the repository's model

        Returns:
            The frozen record
        """
        if not self.paranoid:
            return self.hard_delete(record)

        if not is_destroyed(record) and is_persisted(record):
            self._write_marker(record, utcnow())
            logger.info("Soft deleted %s", _describe(record))
        else:
            logger.debug("Skipping soft delete of %s: already deleted or not persisted", type(record).__name__)

        self._detach(record)
        return freeze(record)

    def soft_destroy(self, record: Any) -> Any:
        """
        Soft delete wrapped in the model's destroy callbacks

        Returns:
            The frozen record, or False when a before_destroy callback halted
        """
        if not self.paranoid:
            return self.hard_destroy(record)
        return run_destroy_callbacks(record, lambda: self.soft_delete(record))

    def restore(self, record: Any) -> Any:
        """Clear the deletion marker and persist that single change"""
        self._require_paranoid()
        self._write_marker(record, None)
        logger.info("Restored %s", _describe(record))
        return record

    def is_destroyed(self, record: Any) -> bool:
        return is_destroyed(record)

    def hard_delete(self, record: Any) -> Any:
        """Remove the row with a primary key DELETE, skipping soft delete and callbacks"""
        state = inspect(record)
        if state.has_identity and not was_destroyed(record):
            self._load(record)
            stmt = (
                delete(self.model)
                .where(*self._identity_criteria(state.identity))
                .execution_options(synchronize_session=False)
            )
            if record in self.db:
                self.db.expunge(record)
            self.db.execute(stmt)
            self._persist()
            logger.info("Hard deleted %s", _describe(record))
        elif record in self.db:
            self.db.expunge(record)

        mark_destroyed(record)
        return freeze(record)

    def hard_destroy(self, record: Any) -> Any:
        """
        Remove the row through the session, running the destroy callbacks

        Returns:
            The frozen record, or False when a before_destroy callback halted
        """

        def action():
            if is_persisted(record):
                self._load(record)
                self.db.delete(record)
                self._persist()
                logger.info("Hard destroyed %s", _describe(record))
            elif record in self.db:
                self.db.expunge(record)
            mark_destroyed(record)
            return freeze(record)

        return run_destroy_callbacks(record, action)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _identity_criteria(self, ident: Any) -> list:
        if not isinstance(ident, (tuple, list)):
            ident = (ident,)
        if len(ident) != len(self.mapper.primary_key):
            raise ValueError(
                f"{self.model.__name__} primary key has {len(self.mapper.primary_key)} column(s), got {len(ident)} value(s)"
            )
        return [column == value for column, value in zip(self.mapper.primary_key, ident)]

    def statement(self, scope: Union[Scope, str] = Scope.DEFAULT) -> Select:
        """SELECT for the model restricted to the given scope"""
        scope = Scope(scope)
        stmt = scoping.with_deleted(select(self.model))
        if scope is Scope.ONLY_DELETED:
            self._require_paranoid()
            return scoping.only_deleted(stmt, self.model)
        if scope is Scope.DEFAULT:
            return scoping.filter_deleted(stmt, self.model)
        return stmt

    def unscoped(self) -> Select:
        return self.statement(Scope.WITH_DELETED)

    def only_deleted(self) -> Select:
        return self.statement(Scope.ONLY_DELETED)

    def all(self, scope: Union[Scope, str] = Scope.DEFAULT) -> List[Any]:
        stmt = self.statement(scope).order_by(*self.mapper.primary_key)
        return list(self.db.scalars(stmt).all())

    def first(self, scope: Union[Scope, str] = Scope.DEFAULT) -> Optional[Any]:
        stmt = self.statement(scope).order_by(*self.mapper.primary_key).limit(1)
        return self.db.scalars(stmt).first()

    def last(self, scope: Union[Scope, str] = Scope.DEFAULT) -> Optional[Any]:
        stmt = self.statement(scope).order_by(*[c.desc() for c in self.mapper.primary_key]).limit(1)
        return self.db.scalars(stmt).first()

    def count(self, scope: Union[Scope, str] = Scope.DEFAULT) -> int:
        stmt = scoping.with_deleted(select(func.count()).select_from(self.statement(scope).subquery()))
        return self.db.scalar(stmt)

    def find(self, ident: Any, scope: Union[Scope, str] = Scope.DEFAULT) -> Any:
        """
        Load a record by primary key within a scope

        Raises:
            RecordNotFoundError: no row with that key in the scope
        """
        scope = Scope(scope)
        record = self.db.scalars(self.statement(scope).where(*self._identity_criteria(ident))).first()
        if record is None:
            raise RecordNotFoundError(self.model, ident, scope)
        return record

    def exists(self, ident: Any, scope: Union[Scope, str] = Scope.DEFAULT) -> bool:
        stmt = self.statement(scope).where(*self._identity_criteria(ident))
        return bool(self.db.scalar(scoping.with_deleted(select(stmt.exists()))))
