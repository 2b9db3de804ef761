"""
Error taxonomy for the data layer.

Each error carries the HTTP status an outer layer should answer with;
nothing in this package renders responses.
"""

from typing import Any, List, Optional


class JoblyError(Exception):
    """Base class for data-layer errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JoblyError):
    """Malformed or contradictory input (empty update, min > max, bad fields)."""
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class DuplicateError(JoblyError):
    """Create conflicts with an existing unique key."""
    status_code = 400


class ReferentialError(JoblyError):
    """Create references a parent row that does not exist."""
    status_code = 400


class NotFoundError(JoblyError):
    """Target row of a get/update/remove does not exist."""
    status_code = 404
