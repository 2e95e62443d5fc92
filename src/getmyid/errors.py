"""Error types raised by the getmyid clients.

Every failure of a call surfaces as exactly one subclass of GetMyIdError.
The phase of failure (connect, write, read, decode) is encoded in the class.
"""

from pathlib import Path


class GetMyIdError(Exception):
    """Base error for all identity lookups."""

    code = "error"

    def __init__(self, message: str) -> None:
        """Initialize with a human-readable message.

        Args:
            message: Human-readable error description.

        """
        super().__init__(message)


class SocketNotFoundError(GetMyIdError):
    """Socket path does not exist; no connection was attempted."""

    code = "socket_not_found"

    def __init__(self, path: Path) -> None:
        """Initialize with the missing socket path."""
        super().__init__(f"Socket path does not exist: {path}")
        self.path = path


class ConnectionFailedError(GetMyIdError):
    """Socket path exists but connecting to it failed."""

    code = "connection_failed"

    def __init__(self, path: Path, cause: OSError) -> None:
        """Initialize with the socket path and the underlying OS error."""
        super().__init__(f"Failed to connect to socket at {path}: {cause}")
        self.path = path
        self.cause = cause


class WriteError(GetMyIdError):
    """Sending the runner request failed."""

    code = "write_error"

    def __init__(self, cause: OSError) -> None:
        """Initialize with the underlying OS error."""
        super().__init__(f"Failed to write to socket: {cause}")
        self.cause = cause


class ReadError(GetMyIdError):
    """Reading the daemon response failed."""

    code = "read_error"

    def __init__(self, cause: Exception) -> None:
        """Initialize with the underlying error (OS error or bad UTF-8)."""
        super().__init__(f"Failed to read response: {cause}")
        self.cause = cause


class InvalidJsonError(GetMyIdError):
    """Outbound request could not be encoded, or inbound response could not be decoded."""

    code = "invalid_json"

    def __init__(self, detail: str) -> None:
        """Initialize with a description of the JSON problem."""
        super().__init__(f"Invalid JSON: {detail}")
        self.detail = detail


class DaemonError(GetMyIdError):
    """The daemon answered with status=error."""

    def __init__(self, code: str, message: str) -> None:
        """Initialize with the daemon's error code and message.

        Args:
            code: Error code reported by the daemon (e.g. "E_NO_MATCH").
            message: Human-readable message reported by the daemon.

        """
        super().__init__(f"Daemon error ({code}): {message}")
        self.code = code
        self.message = message


class MissingFieldError(GetMyIdError):
    """Response is valid JSON but its payload does not match its status."""

    code = "missing_field"

    def __init__(self, field: str) -> None:
        """Initialize with the name of the expected field."""
        super().__init__(f"Invalid response: missing field '{field}'")
        self.field = field


class DeadlineExceededError(GetMyIdError):
    """The asynchronous round trip did not finish within the configured timeout."""

    code = "timeout"

    def __init__(self, timeout: float) -> None:
        """Initialize with the configured timeout in seconds."""
        super().__init__(f"Connection timeout after {timeout}s")
        self.timeout = timeout
