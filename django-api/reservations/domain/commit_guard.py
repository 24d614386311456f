"""Single-outstanding-commit guard shared by the workflows."""

from contextlib import contextmanager
from typing import Iterator
from uuid import uuid4

from reservations.domain.errors import CommitInProgressError


class CommitGuard:
    """Tracks one in-flight commit and the idempotency key the store dedups on."""

    def __init__(self, idempotency_key: str | None = None) -> None:
        self.idempotency_key = idempotency_key or uuid4().hex
        self._in_flight = False

    @property
    def commit_in_progress(self) -> bool:
        return self._in_flight

    @contextmanager
    def committing(self) -> Iterator[str]:
        """Hold the guard for the duration of a commit.

        Raises:
            CommitInProgressError: If another commit has not resolved yet.
        """
        if self._in_flight:
            raise CommitInProgressError()
        self._in_flight = True
        try:
            yield self.idempotency_key
        finally:
            self._in_flight = False

    def rotate_key(self) -> None:
        """Start a new idempotency scope, used once a commit has succeeded."""
        self.idempotency_key = uuid4().hex
