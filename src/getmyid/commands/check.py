"""Check whether the daemon socket is reachable."""

import typer

from getmyid.app_context import use_context
from getmyid.client import is_connectable


def check(ctx: typer.Context) -> None:
    """Show whether the daemon socket exists and accepts connections."""
    app = use_context(ctx)
    path = app.cfg.socket_path
    exists = path.exists()
    connectable = exists and is_connectable(path, app.check_timeout)
    app.out.print_check(socket_path=path, exists=exists, connectable=connectable)
    if not connectable:
        raise typer.Exit(code=1)
