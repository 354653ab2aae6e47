from __future__ import annotations


class TeamFlowError(Exception):
    """Base class for all data-layer failures."""


class ValidationError(TeamFlowError, ValueError):
    """Required field missing/empty/non-positive. Raised before any storage access."""


class NotFoundError(TeamFlowError, LookupError):
    """lookup() on a key that does not exist."""

    def __init__(self, entity: str, key):
        super().__init__(f"{entity} not found: {key!r}")
        self.entity = entity
        self.key = key


class StorageError(TeamFlowError):
    """Connectivity loss, malformed statement or other store fault."""
