"""Errors raised by the IMS MmTel simulator."""

from __future__ import annotations


class ImsException(Exception):
    """IMS operation failed; ``code`` tells why."""

    CODE_ERROR_UNSPECIFIED = 0
    CODE_ERROR_SERVICE_UNAVAILABLE = 1
    CODE_ERROR_UNSUPPORTED_OPERATION = 2
    CODE_ERROR_INVALID_SUBSCRIPTION = 3

    def __init__(self, message: str, code: int = CODE_ERROR_UNSPECIFIED) -> None:
        super().__init__(message)
        self.code = code


class ImsUnsupportedError(ImsException):
    """The simulated device does not support IMS."""

    def __init__(self, message: str = "IMS not available on device.") -> None:
        super().__init__(message, code=ImsException.CODE_ERROR_UNSUPPORTED_OPERATION)


class PreconditionError(RuntimeError):
    """The simulator was queried before the state it needs was set up."""


class ImsSecurityError(PermissionError):
    """Caller lacks the permission an operation requires."""

    def __init__(self, permission: str, operation: str) -> None:
        super().__init__(f"{operation} requires {permission}.")
        self.permission = permission
        self.operation = operation
