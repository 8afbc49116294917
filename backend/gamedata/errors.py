"""Errors raised by the game data layer."""

from __future__ import annotations


class RepositoryError(Exception):
    """The store was unreachable or rejected a query.

    ``operation`` names the repository method that failed; the underlying
    driver exception is kept on ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"{operation} failed: {detail}")
