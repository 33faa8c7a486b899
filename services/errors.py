"""
Typed errors raised by the repositories and the explorer service

Each error carries the HTTP status the API layer renders it with.
"""
from typing import Any, Optional


class DataExplorerError(Exception):
    """Base class for all domain errors"""
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DataExplorerError):
    """Missing/blank required field or unrecognized enum value"""
    status_code = 400


class NotFoundError(DataExplorerError):
    """Referenced id does not exist"""
    status_code = 404


class ConflictError(DataExplorerError):
    """Duplicate unique key (table_name, or table_id + column_name)"""
    status_code = 409


class PersistenceError(DataExplorerError):
    """Underlying store failure"""
    status_code = 500
