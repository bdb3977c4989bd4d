"""Identifier tokens and short-prefix lookup.

Records are identified by random UUIDs. Humans refer to them by the first
eight characters shown in list output, so lookups accept either the full
UUID or an unambiguous prefix of at least :data:`SHORT_ID_LENGTH` chars.

INVARIANT: IDs are opaque. They are compared for equality and by prefix,
never ordered.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

SHORT_ID_LENGTH = 8


class IdLookupError(ValueError):
    """Raised when a user-supplied ID token cannot be resolved.

    ``code`` is one of ``NOT_FOUND``, ``AMBIGUOUS_ID``, ``INVALID_ID``.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def short_id(value: UUID) -> str:
    """Render the short form shown in tables."""
    return str(value)[:SHORT_ID_LENGTH]


def matches_prefix(value: UUID, prefix: str) -> bool:
    """Case-insensitive prefix comparison against the canonical string form."""
    return str(value).lower().startswith(prefix.strip().lower())


def resolve_id(token: str, candidates: Iterable[UUID], *, noun: str = "record") -> UUID:
    """Resolve *token* to exactly one of *candidates*.

    Raises:
        IdLookupError: if nothing matches, several match, or the token is
            neither a UUID nor long enough to be a short ID.
    """
    pool = list(candidates)
    token = token.strip()

    try:
        full = UUID(token)
    except ValueError:
        full = None

    if full is not None:
        if full in pool:
            return full
        raise IdLookupError("NOT_FOUND", f"No {noun} found with ID: {token}")

    if len(token) < SHORT_ID_LENGTH:
        msg = (
            f"Invalid ID {token!r}. Use the full UUID or the first "
            f"{SHORT_ID_LENGTH} characters shown in list output."
        )
        raise IdLookupError("INVALID_ID", msg)

    matching = [c for c in pool if matches_prefix(c, token)]
    if not matching:
        raise IdLookupError("NOT_FOUND", f"No {noun} found with ID starting with {token!r}")
    if len(matching) > 1:
        msg = f"Multiple {noun}s match {token!r}. Use the full UUID to be more specific."
        raise IdLookupError("AMBIGUOUS_ID", msg)
    return matching[0]
