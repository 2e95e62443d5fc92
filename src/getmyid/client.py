"""Synchronous client for process → whoami daemon identity lookups."""

import contextlib
import logging
import socket
from pathlib import Path

from getmyid.config import ClientBuilder, ClientConfig
from getmyid.errors import ConnectionFailedError, ReadError, SocketNotFoundError, WriteError
from getmyid.protocol import decode_response, encode_request
from getmyid.types import Identity, RunnerRequest

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 65536


def _recv_all(s: socket.socket) -> str:
    """Read from socket until the daemon closes the connection (protocol framing delimiter)."""
    chunks: list[bytes] = []
    try:
        while True:
            chunk = s.recv(_BUFSIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks).decode()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(e) from e


def _send_request(s: socket.socket, runner: RunnerRequest) -> None:
    """Write the runner request, then half-close so the daemon sees end of input."""
    data = encode_request(runner)
    try:
        s.sendall(data)
    except OSError as e:
        raise WriteError(e) from e
    # Best-effort: the daemon may still answer if the half-close fails.
    with contextlib.suppress(OSError):
        s.shutdown(socket.SHUT_WR)
    logger.debug("Sent runner request (%d bytes)", len(data))


def is_connectable(sock_path: Path, timeout: float = 1.0) -> bool:
    """Check if the daemon socket is accepting connections."""
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
            s.settimeout(timeout)
            s.connect(str(sock_path))
    except OSError:
        return False
    else:
        return True


class Client:
    """Synchronous client that talks to the whoami daemon over a Unix socket.

    Opens one connection per call; holds no connection state, so a single
    instance can be shared across threads.
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        """Initialize client with configuration.

        Args:
            config: Client configuration (defaults if omitted).

        """
        self._config = config or ClientConfig()

    @staticmethod
    def builder() -> "ClientBuilder[Client]":
        """Create a builder for a customized client."""
        return ClientBuilder(Client)

    @property
    def config(self) -> ClientConfig:
        """Client configuration."""
        return self._config

    @property
    def socket_path(self) -> Path:
        """Configured socket path."""
        return self._config.socket_path

    @property
    def timeout(self) -> float | None:
        """Configured timeout in seconds, or None if disabled."""
        return self._config.timeout

    def get_identity(self) -> Identity:
        """Get the identity of the current process.

        The daemon identifies the caller from kernel peer credentials and
        answers as soon as the connection is accepted; nothing is sent.
        """
        return self.get_identity_with_runner(None)

    def get_identity_with_runner(self, runner: RunnerRequest | None) -> Identity:
        """Get the identity, sending client-provided runner context first.

        The timeout, if configured, applies separately to each write and read;
        exceeding it surfaces as WriteError or ReadError.

        Args:
            runner: Context merged by the daemon into the returned runner. None sends nothing.

        Raises:
            SocketNotFoundError: Socket path does not exist.
            ConnectionFailedError: Connecting to the socket failed.
            WriteError: Sending the runner request failed.
            ReadError: Reading the response failed.
            InvalidJsonError: Request could not be encoded or response could not be decoded.
            DaemonError: Daemon reported an error (e.g. no matching rule).
            MissingFieldError: Response shape contradicts its status.

        """
        with self._connect() as s:
            if self.timeout is not None:
                s.settimeout(self.timeout)
            if runner is not None:
                _send_request(s, runner)
            response = _recv_all(s)
        logger.debug("Received %d bytes from %s", len(response), self.socket_path)
        return decode_response(response)

    def _connect(self) -> socket.socket:
        """Open a fresh connection to the daemon socket."""
        path = self.socket_path
        if not path.exists():
            raise SocketNotFoundError(path)
        s = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            s.connect(str(path))
        except OSError as e:
            s.close()
            raise ConnectionFailedError(path, e) from e
        logger.debug("Connected to %s", path)
        return s
