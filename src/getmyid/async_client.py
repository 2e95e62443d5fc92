"""Asyncio client for process → whoami daemon identity lookups."""

import asyncio
import contextlib
import logging
from pathlib import Path

from getmyid.config import ClientBuilder, ClientConfig
from getmyid.errors import ConnectionFailedError, DeadlineExceededError, ReadError, SocketNotFoundError, WriteError
from getmyid.protocol import decode_response, encode_request
from getmyid.types import Identity, RunnerRequest

logger = logging.getLogger(__name__)


class AsyncClient:
    """Asyncio client that talks to the whoami daemon over a Unix socket.

    Same protocol as Client. The configured timeout bounds the whole
    connect + write + read round trip; on expiry the connection is closed
    and DeadlineExceededError is raised.
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        """Initialize client with configuration.

        Args:
            config: Client configuration (defaults if omitted).

        """
        self._config = config or ClientConfig()

    @staticmethod
    def builder() -> "ClientBuilder[AsyncClient]":
        """Create a builder for a customized async client."""
        return ClientBuilder(AsyncClient)

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

    async def get_identity(self) -> Identity:
        """Get the identity of the current process."""
        return await self.get_identity_with_runner(None)

    async def get_identity_with_runner(self, runner: RunnerRequest | None) -> Identity:
        """Get the identity, sending client-provided runner context first.

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
            DeadlineExceededError: Round trip did not finish within the timeout.

        """
        if not self.socket_path.exists():
            raise SocketNotFoundError(self.socket_path)

        if self.timeout is None:
            response = await self._round_trip(runner)
        else:
            try:
                async with asyncio.timeout(self.timeout):
                    response = await self._round_trip(runner)
            except TimeoutError as e:
                logger.debug("Round trip to %s exceeded %ss", self.socket_path, self.timeout)
                raise DeadlineExceededError(self.timeout) from e
        return decode_response(response)

    async def _round_trip(self, runner: RunnerRequest | None) -> str:
        """Connect, optionally send the runner request, and read until the daemon closes."""
        path = self.socket_path
        try:
            reader, writer = await asyncio.open_unix_connection(str(path))
        except OSError as e:
            raise ConnectionFailedError(path, e) from e
        logger.debug("Connected to %s", path)

        try:
            if runner is not None:
                data = encode_request(runner)
                try:
                    writer.write(data)
                    await writer.drain()
                except OSError as e:
                    raise WriteError(e) from e
                # Best-effort: the daemon may still answer if the half-close fails.
                with contextlib.suppress(OSError):
                    writer.write_eof()
                logger.debug("Sent runner request (%d bytes)", len(data))

            try:
                raw = await reader.read()
                response = raw.decode()
            except (OSError, UnicodeDecodeError) as e:
                raise ReadError(e) from e
            logger.debug("Received %d bytes from %s", len(raw), path)
            return response
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
