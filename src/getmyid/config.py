"""Client configuration: socket path and timeout."""

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from getmyid.async_client import AsyncClient
    from getmyid.client import Client

DEFAULT_SOCKET_PATH = Path("/var/run/whoami.sock")
DEFAULT_TIMEOUT = 5.0


class ClientConfig(BaseModel):
    """Immutable client configuration. Holds no connection state."""

    model_config = ConfigDict(frozen=True)

    socket_path: Path = Field(default=DEFAULT_SOCKET_PATH, description="Unix domain socket of the whoami daemon")
    timeout: float | None = Field(default=DEFAULT_TIMEOUT, gt=0, description="Timeout in seconds (None = disabled)")

    @staticmethod
    def build(config_path: Path | None = None) -> "ClientConfig":
        """Build a ClientConfig from defaults and an optional TOML file.

        Recognized keys are ``socket_path`` (string) and ``timeout`` (seconds;
        ``0`` disables the timeout). Unknown keys are ignored.

        Raises:
            FileNotFoundError: config_path is given but does not exist.
            ValidationError: A recognized key has an invalid value.

        """
        kwargs: dict[str, Any] = {}
        if config_path is not None:
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            if "socket_path" in toml_data:
                kwargs["socket_path"] = toml_data["socket_path"]
            if "timeout" in toml_data:
                kwargs["timeout"] = toml_data["timeout"] or None
        return ClientConfig(**kwargs)


ClientT = TypeVar("ClientT", "Client", "AsyncClient")


class ClientBuilder(Generic[ClientT]):
    """Chained construction of a Client or AsyncClient.

    Each setter returns a new builder; the receiver is left unchanged.
    """

    def __init__(self, client_cls: type[ClientT], config: ClientConfig | None = None) -> None:
        """Initialize the builder.

        Args:
            client_cls: Client class produced by ``build``.
            config: Starting configuration (defaults if omitted).

        """
        self._client_cls = client_cls
        self._config = config or ClientConfig()

    def socket_path(self, path: str | Path) -> Self:
        """Set the daemon socket path."""
        return self._with(socket_path=Path(path))

    def timeout(self, timeout: float | None) -> Self:
        """Set the timeout in seconds. Pass None to disable it."""
        return self._with(timeout=timeout)

    def build(self) -> ClientT:
        """Build the client."""
        return self._client_cls(self._config)

    def _with(self, **changes: Any) -> Self:  # noqa: ANN401
        config = ClientConfig.model_validate({**self._config.model_dump(), **changes})
        return type(self)(self._client_cls, config)
