"""
Soft Delete Query Scoping

Query filtering for soft-deleted records using SQLAlchemy.

Two layers are provided:

* composable helpers (``filter_deleted``, ``only_deleted``, ``with_deleted``)
  that work on legacy ``Query`` objects and 2.0 ``Select`` statements alike;
* an ambient default scope, installed with ``install_default_scope``, that
  adds ``marker IS NULL`` criteria to every ORM SELECT touching a paranoid
  model unless the statement carries ``include_deleted=True``.
"""

import logging
from typing import Any, TypeVar

from sqlalchemy import event, select
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria
from sqlalchemy.sql import Select

from .config import INCLUDE_DELETED_OPTION
from .exceptions import SoftDeleteConfigurationError
from .registry import delete_column, get_config, is_paranoid

logger = logging.getLogger(__name__)

Statement = TypeVar("Statement")


def marker(model: type):
    """Mapped attribute holding the deletion marker of a paranoid model"""
    if not is_paranoid(model):
        raise SoftDeleteConfigurationError(f"Soft delete is not enabled for {model.__name__}")
    return getattr(model, delete_column(model))


def filter_deleted(query: Statement, model: type) -> Statement:
    """Filter out soft-deleted records from query"""
    if not is_paranoid(model):
        return query
    return query.filter(marker(model).is_(None))


def only_deleted(query: Statement, model: type) -> Statement:
    """Filter to show only soft-deleted records, bypassing the default scope"""
    return with_deleted(query).filter(marker(model).is_not(None))


def with_deleted(query: Statement) -> Statement:
    """Mark a query so the default scope leaves it untouched"""
    return query.execution_options(**{INCLUDE_DELETED_OPTION: True})


def unscoped_select(model: type) -> Select:
    return with_deleted(select(model))


def only_deleted_select(model: type) -> Select:
    return only_deleted(select(model), model)


def _apply_default_scope(execute_state: ORMExecuteState) -> None:
    if (
        not execute_state.is_select
        or execute_state.is_column_load
        or execute_state.execution_options.get(INCLUDE_DELETED_OPTION, False)
    ):
        return

    criteria = []
    for mapper in execute_state.all_mappers:
        config = get_config(mapper.class_)
        if config is None:
            continue
        column = getattr(mapper.class_, config.column)
        criteria.append(with_loader_criteria(mapper.class_, column.is_(None), include_aliases=True))

    if criteria:
        logger.debug("Applying default soft delete scope to %d model(s)", len(criteria))
        execute_state.statement = execute_state.statement.options(*criteria)


def install_default_scope(target: Any = Session) -> None:
    """
    Exclude soft-deleted rows from every ORM SELECT issued through target

    Args:
        target: Session class (all sessions), a sessionmaker or a single session
    """
    if not event.contains(target, "do_orm_execute", _apply_default_scope):
        event.listen(target, "do_orm_execute", _apply_default_scope)
        logger.info("Default soft delete scope installed on %r", target)


def remove_default_scope(target: Any = Session) -> None:
    if event.contains(target, "do_orm_execute", _apply_default_scope):
        event.remove(target, "do_orm_execute", _apply_default_scope)
        logger.info("Default soft delete scope removed from %r", target)


def default_scope_installed(target: Any = Session) -> bool:
    return event.contains(target, "do_orm_execute", _apply_default_scope)
