"""
In-memory freezing of record instances.

The flags live in the instance dict, next to SQLAlchemy's loaded state, so they
survive expire and refresh. FreezableMixin models reject writes in
``__setattr__``; registered models without the mixin get a "set" listener on
each column attribute through ``guard_attributes``.
"""

from typing import Any

from sqlalchemy import event, inspect

from .exceptions import FrozenRecordError

FROZEN_FLAG = "_paranoid_frozen"
DESTROYED_FLAG = "_paranoid_destroyed"


def freeze(record: Any) -> Any:
    record.__dict__[FROZEN_FLAG] = True
    return record


def is_frozen(record: Any) -> bool:
    return bool(record.__dict__.get(FROZEN_FLAG, False))


def mark_destroyed(record: Any) -> Any:
    """Flag an instance whose row was physically removed"""
    record.__dict__[DESTROYED_FLAG] = True
    return record


def was_destroyed(record: Any) -> bool:
    return bool(record.__dict__.get(DESTROYED_FLAG, False))


def _reject_frozen_write(target, value, oldvalue, initiator):
    if is_frozen(target):
        raise FrozenRecordError(target, initiator.key)
    return value


def guard_attributes(model: type) -> None:
    """Reject writes to every column attribute of a frozen instance of model"""
    for prop in inspect(model).column_attrs:
        attr = getattr(model, prop.key)
        if not event.contains(attr, "set", _reject_frozen_write):
            event.listen(attr, "set", _reject_frozen_write, retval=True, propagate=True)
