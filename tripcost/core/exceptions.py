"""Custom exceptions for the trip cost engine.

Allocation, reconciliation and aggregation never raise; these cover the
collaborator boundary (loading exports, configuration, CLI lookups).
"""


class TripCostError(Exception):
    """Base exception for all trip cost errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ExpenseSourceError(TripCostError):
    """Raised when an expense source cannot be read or has an invalid layout."""

    def __init__(self, source: str, message: str, path: str | None = None):
        full_message = f"[{source}] {message}"
        if path:
            full_message += f" ({path})"
        super().__init__(full_message, {"source": source, "path": path})
        self.source = source
        self.path = path


class ValidationError(TripCostError):
    """Raised when a record has a shape the normalizer cannot use."""

    def __init__(self, field: str, value: str, reason: str):
        message = f"Validation failed for {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(TripCostError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class MemberNotFoundError(TripCostError):
    """Raised when a member id is not part of the report roster."""

    def __init__(self, member_id: str, roster: list[str] | None = None):
        message = f"Member not found: {member_id}"
        if roster:
            message += f" (roster: {', '.join(roster)})"
        super().__init__(message, {"member_id": member_id, "roster": roster})
        self.member_id = member_id
        self.roster = roster or []
