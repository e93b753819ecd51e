"""
Core Errors
===========

Exception taxonomy for the compliance analytics core.

Missing or insufficient data (empty cohorts, members without a
renewal deadline) is never raised; it is returned as ``None`` or
zero-peer results so callers can render "no data".

Author: cpdtrack Team
Version: 1.0.0
"""


class ComplianceCoreError(Exception):
    """Base exception for compliance core errors."""
    pass


class NotFoundError(ComplianceCoreError):
    """Referenced credential or user does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvalidInputError(ComplianceCoreError, ValueError):
    """A required identifier or argument is missing or malformed."""
    pass


def require(value: str, name: str) -> str:
    """Return ``value`` or raise InvalidInputError if it is empty."""
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{name} is required")
    return value
