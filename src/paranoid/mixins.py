"""
Database model mixins for soft delete functionality.
"""

from typing import Any

from sqlalchemy.orm import object_session

from .exceptions import FrozenRecordError, SoftDeleteError
from .freezing import freeze, is_frozen
from .registry import is_paranoid
from .repository import SoftDeleteRepository, is_destroyed


class FreezableMixin:
    """
    Mixin rejecting attribute writes once the instance has been frozen.

    SQLAlchemy populates loaded state through the instance dict, so loading and
    refreshing a frozen instance keep working; only application writes fail.
    """

    def __setattr__(self, key: str, value: Any) -> None:
        if not key.startswith("_") and is_frozen(self):
            raise FrozenRecordError(self, key)
        super().__setattr__(key, value)

    def freeze(self):
        return freeze(self)

    @property
    def frozen(self) -> bool:
        return is_frozen(self)


class SoftDeleteMixin(FreezableMixin):
    """
    Mixin exposing the soft delete lifecycle on model instances.

    The soft variants only take effect once the class is registered with
    ``acts_as_paranoid``/``enable_soft_delete``; until then ``delete`` and
    ``destroy`` remove the row. The hard variants always remove the row.
    Deleted and destroyed instances end up frozen and detached from their
    session; load the row again to work with it.

    Usage:
        @acts_as_paranoid
        class Comment(SoftDeleteMixin, Base):
            __tablename__ = "comments"
            id = Column(Integer, primary_key=True)
            deleted_at = Column(DateTime, nullable=True)

        comment.destroy()       # stamps deleted_at, runs destroy callbacks
        comment.hard_delete()   # DELETE FROM comments WHERE id = ...
    """

    def _repository(self) -> SoftDeleteRepository:
        db = object_session(self)
        if db is None:
            raise SoftDeleteError(f"{type(self).__name__} instance is not attached to a session")
        return SoftDeleteRepository(db, type(self))

    @classmethod
    def is_paranoid_class(cls) -> bool:
        return is_paranoid(cls)

    @property
    def paranoid(self) -> bool:
        return is_paranoid(self)

    def delete(self):
        """Soft delete without running destroy callbacks"""
        return self._repository().soft_delete(self)

    def destroy(self):
        """Soft delete wrapped in the destroy callbacks"""
        return self._repository().soft_destroy(self)

    def restore(self):
        """Clear the deletion marker of a freshly loaded record"""
        return self._repository().restore(self)

    def hard_delete(self):
        return self._repository().hard_delete(self)

    def hard_destroy(self):
        return self._repository().hard_destroy(self)

    @property
    def destroyed(self) -> bool:
        return is_destroyed(self)

    deleted = destroyed
