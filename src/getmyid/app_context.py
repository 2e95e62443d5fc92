"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from getmyid.client import Client
from getmyid.config import ClientConfig
from getmyid.output import Output

# Connect timeout for `check` when the configured timeout is disabled.
CHECK_TIMEOUT = 1.0


@dataclass(frozen=True, slots=True)
class AppContext:
    """Output mode and resolved client configuration for one CLI invocation."""

    out: Output
    cfg: ClientConfig

    def client(self) -> Client:
        """Create a blocking client from the resolved configuration."""
        return Client(self.cfg)

    @property
    def check_timeout(self) -> float:
        """Timeout for a plain connect attempt; never unbounded."""
        return self.cfg.timeout or CHECK_TIMEOUT


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
