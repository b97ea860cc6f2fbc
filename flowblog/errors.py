from __future__ import annotations
from typing import Optional


class PersistenceError(Exception):
    """Backend failure surfaced to the caller (network, constraint, timeout)."""


class SlugConflictError(PersistenceError):
    """Insert rejected by the unique index on posts.slug."""

    def __init__(self, slug: str, message: Optional[str] = None):
        self.slug = slug
        super().__init__(message or f"slug already taken: {slug}")


class RetryExhaustedError(PersistenceError):
    """Every slug attempt collided; no post was written."""

    def __init__(self, attempts: int, last_slug: str):
        self.attempts = attempts
        self.last_slug = last_slug
        super().__init__(f"slug still colliding after {attempts} attempts (last tried: {last_slug})")
