"""Single-statement INSERT ... ON CONFLICT for the supported dialects."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_statement(
    session: AsyncSession,
    model: type[Any],
    values: Mapping[str, Any],
    *,
    conflict_columns: Sequence[str],
    update_columns: Sequence[str] = (),
) -> Any:
    """Build an insert that overwrites ``update_columns`` on a key conflict.

    With no ``update_columns`` a conflicting row is left untouched. The
    statement is atomic, so concurrent callers racing on the same key never
    see an IntegrityError.
    """
    dialect_name = session.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect_name]
    except KeyError as err:
        raise NotImplementedError(f"Upserts are not supported on {dialect_name}") from err

    stmt = insert(model).values(**values)
    if not update_columns:
        return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    return stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
