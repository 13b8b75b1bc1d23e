"""Shared plumbing for the SQLAlchemy repository adapters."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.exceptions import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


def like_pattern(fragment: str) -> str:
    """Build a ``%fragment%`` LIKE pattern with wildcards in the input escaped."""
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlRepository:
    """Base for adapters that open one session per logical operation.

    Reads issued concurrently by a service each get their own session (and
    so their own connection from the engine pool).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, translating driver failures into domain errors."""
        try:
            async with self._session_factory() as session:
                yield session
        except IntegrityError as exc:
            raise ConflictError(str(exc.orig)) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Database operation failed")
            raise StoreUnavailableError("Database unavailable") from exc


async def gather_reads(*reads: Awaitable[Any]) -> list[Any]:
    """Run independent reads concurrently and return their results in order.

    Every read settles before the first failure is re-raised, so no read is
    left running with an open session and no second failure goes unretrieved.
    """
    results = await asyncio.gather(*reads, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results
