"""Exceptions raised by the flight reservation system."""
from __future__ import annotations


class FlightsDBError(RuntimeError):
    """Base class for errors raised by this package."""


class AuthenticationFailure(FlightsDBError):
    """Raised when a handle/password pair does not match a customer."""

    def __init__(self, handle: str):
        super().__init__(f"invalid credentials for handle '{handle}'")
        self.handle = handle


class DataAccessFault(FlightsDBError):
    """Raised when the underlying store fails to execute a query or transaction."""
