"""Exceptions shared across Travel Flow modules."""

from typing import Optional


class FetchFailed(Exception):
    """The trips backend could not be reached or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
