"""Error wrapping shared by the read-only repositories.

Repositories never retry and never cache: each call is a single query
against the pool. Driver failures are re-raised as ``RepositoryError`` so
callers handle one exception type regardless of what went wrong below.
"""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import asyncpg

from gamedata.errors import RepositoryError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Failures that mean "store unreachable or query rejected"
STORE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
)


def store_operation(operation: str) -> Callable[[F], F]:
    """Decorator wrapping store failures of an async repository method.

    Parameters
    ----------
    operation : str
        Name reported in the ``RepositoryError`` and in the log line.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except STORE_ERRORS as exc:
                logger.error(f"{operation} failed: {type(exc).__name__}: {exc}")
                raise RepositoryError(operation, exc) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def load_json(value: Any) -> Any:
    """Decode a JSON/JSONB column; asyncpg returns text without a codec."""
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value
