"""
Destroy Callbacks

Before/after hooks run around ``destroy`` (soft or hard). ``delete`` never runs
them. A before-callback returning ``False`` halts the destroy.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

CALLBACKS_ATTR = "__destroy_callbacks__"

BEFORE = "before"
AFTER = "after"

Callback = Callable[[Any], Any]


def _own_callbacks(model: type) -> Dict[str, List[Callback]]:
    # Stored in the class __dict__ so subclasses never append to a parent's list
    callbacks = model.__dict__.get(CALLBACKS_ATTR)
    if callbacks is None:
        callbacks = {BEFORE: [], AFTER: []}
        setattr(model, CALLBACKS_ATTR, callbacks)
    return callbacks


def register_destroy_callback(model: type, kind: str, fn: Callback) -> Callback:
    if kind not in (BEFORE, AFTER):
        raise ValueError(f"Unknown destroy callback kind '{kind}'. Must be one of: {[BEFORE, AFTER]}")
    _own_callbacks(model)[kind].append(fn)
    return fn


def before_destroy(model: type) -> Callable[[Callback], Callback]:
    """Register ``fn(record)`` to run before a record of ``model`` is destroyed"""

    def decorator(fn: Callback) -> Callback:
        return register_destroy_callback(model, BEFORE, fn)

    return decorator


def after_destroy(model: type) -> Callable[[Callback], Callback]:
    """Register ``fn(record)`` to run after a record of ``model`` is destroyed"""

    def decorator(fn: Callback) -> Callback:
        return register_destroy_callback(model, AFTER, fn)

    return decorator


def destroy_callbacks(model: type, kind: str) -> List[Callback]:
    """Callbacks of one kind for a model, base classes first"""
    found: List[Callback] = []
    for klass in reversed(model.__mro__):
        callbacks = klass.__dict__.get(CALLBACKS_ATTR)
        if callbacks:
            found.extend(callbacks[kind])
    return found


def run_destroy_callbacks(record: Any, action: Callable[[], Any]) -> Any:
    """
    Run before-callbacks, the action, then after-callbacks

    Returns:
        False if a before-callback halted the chain, otherwise the action's result
    """
    model = type(record)
    for callback in destroy_callbacks(model, BEFORE):
        if callback(record) is False:
            logger.warning("Destroy of %s halted by before_destroy callback %s", model.__name__, getattr(callback, "__name__", callback))
            return False

    result = action()

    for callback in destroy_callbacks(model, AFTER):
        callback(record)
    return result
