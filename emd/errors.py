"""
Error taxonomy for emd.

None of these errors is fatal to the process; the UI turns them into a
status message and keeps running.
"""

from typing import Optional


class EmdError(Exception):
    """Base class for all emd errors."""


class ValidationError(EmdError):
    """User input was rejected (e.g. an empty blueprint name)."""


class ProviderError(EmdError):
    """A Resource Provider call failed (network, auth, API error)."""

    def __init__(self, message: str, kind: Optional[object] = None, resource_id: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.resource_id = resource_id


class PersistenceError(EmdError):
    """Saving or loading settings, blueprints or documents failed."""


class NotFoundError(EmdError):
    """A stale index or id no longer refers to anything."""
