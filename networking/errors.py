import errno as errno_codes
import socket
from typing import Optional


class ClientError(Exception):
    """Base class for errors raised by the line client."""


class StartupError(ClientError):
    """
    Fatal failure while establishing the connection.

    Args:
        stage: One of "socket", "address" or "connect"
        message: Human readable description shown to the user
        errno: Underlying OS error code, when the OS reported one
    """

    STAGES = ("socket", "address", "connect")

    def __init__(self, stage: str, message: str, errno: Optional[int] = None):
        if stage not in self.STAGES:
            raise ValueError(f"Unknown startup stage: {stage}")
        super().__init__(message)
        self.stage = stage
        self.message = message
        self.errno = errno

    def __str__(self):
        if self.errno is None:
            return self.message
        return f"{self.message} Error Code: {self.errno}"

    @classmethod
    def from_os_error(cls, stage: str, message: str, exc: OSError) -> "StartupError":
        code = exc.errno
        # socket.timeout carries no errno
        if code is None and isinstance(exc, socket.timeout):
            code = errno_codes.ETIMEDOUT
        return cls(stage, message, code)


class OperationTimeout(ClientError):
    """A blocking send or receive did not finish within the configured timeout."""

    def __init__(self, operation: str, timeout: Optional[float]):
        super().__init__(f"{operation} timed out after {timeout}s")
        self.operation = operation
        self.timeout = timeout
