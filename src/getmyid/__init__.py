"""Client library for the whoami identity-by-PID daemon.

The daemon identifies a local process from the kernel credentials of its
Unix socket connection and answers with the application identity assigned
to it. Both a blocking Client and an asyncio AsyncClient are provided.
"""

from pathlib import Path

from getmyid.async_client import AsyncClient as AsyncClient
from getmyid.client import Client as Client
from getmyid.config import DEFAULT_SOCKET_PATH as DEFAULT_SOCKET_PATH
from getmyid.config import DEFAULT_TIMEOUT as DEFAULT_TIMEOUT
from getmyid.config import ClientBuilder as ClientBuilder
from getmyid.config import ClientConfig as ClientConfig
from getmyid.errors import ConnectionFailedError as ConnectionFailedError
from getmyid.errors import DaemonError as DaemonError
from getmyid.errors import DeadlineExceededError as DeadlineExceededError
from getmyid.errors import GetMyIdError as GetMyIdError
from getmyid.errors import InvalidJsonError as InvalidJsonError
from getmyid.errors import MissingFieldError as MissingFieldError
from getmyid.errors import ReadError as ReadError
from getmyid.errors import SocketNotFoundError as SocketNotFoundError
from getmyid.errors import WriteError as WriteError
from getmyid.types import Identity as Identity
from getmyid.types import Runner as Runner
from getmyid.types import RunnerRequest as RunnerRequest


def get_identity() -> Identity:
    """Get the identity of this process using default settings."""
    return Client().get_identity()


def get_identity_from(socket_path: str | Path) -> Identity:
    """Get the identity of this process from a daemon at a custom socket path."""
    return Client.builder().socket_path(socket_path).build().get_identity()
