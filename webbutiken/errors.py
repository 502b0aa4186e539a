from __future__ import annotations


class ValidationError(ValueError):
    """Malformed or missing input; surfaced as 400."""


class NotFoundError(LookupError):
    """Referenced id is absent; surfaced as 404."""
