"""
Parameterized SQL access for the lookup pipeline.

The lookup core only reads from the registry; it needs exactly two
primitives, "get one row" and "get all rows". Seeding additionally uses
``execute`` for inserts and updates.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import TextClause

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _prepare(sql: str, params: Optional[Mapping[str, Any]]) -> TextClause:
    """Build a text clause, binding list/tuple parameters as expanding IN lists."""
    stmt = text(sql)
    if params:
        expanding = [
            bindparam(name, expanding=True)
            for name, value in params.items()
            if isinstance(value, (list, tuple, set, frozenset))
        ]
        if expanding:
            stmt = stmt.bindparams(*expanding)
    return stmt


def _normalize(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not params:
        return {}
    return {
        name: list(value) if isinstance(value, (set, frozenset, tuple)) else value
        for name, value in params.items()
    }


class RegistryStore:
    """Thin read/write facade over an AsyncSession using named SQL parameters.

    Errors raised by the driver are not caught here; they propagate to the
    caller unchanged.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def query_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Row]:
        result = await self.session.execute(_prepare(sql, params), _normalize(params))
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def query_all(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Row]:
        result = await self.session.execute(_prepare(sql, params), _normalize(params))
        return [dict(row) for row in result.mappings().all()]

    async def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count.

        Does NOT commit; transaction management belongs to the caller.
        """
        result = await self.session.execute(_prepare(sql, params), _normalize(params))
        return result.rowcount
