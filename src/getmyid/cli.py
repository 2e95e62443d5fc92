"""CLI entry point for getmyid."""

import tomllib
from pathlib import Path
from typing import Annotated, Any

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from getmyid.app_context import AppContext
from getmyid.commands.check import check
from getmyid.commands.identity import identity
from getmyid.config import ClientConfig
from getmyid.log import setup_logging
from getmyid.output import Output

app = TyperPlus(package_name="getmyid")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    config_path: Annotated[Path | None, typer.Option("--config", help="TOML configuration file.")] = None,
    socket_path: Annotated[Path | None, typer.Option("--socket", help="Daemon socket path.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Timeout in seconds.")] = None,
    no_timeout: Annotated[bool, typer.Option("--no-timeout", help="Disable the timeout.")] = False,
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Write debug log to this file.")] = None,
) -> None:
    """Query the whoami daemon for the identity of this process."""
    out = Output(json_mode=json_output)
    overrides: dict[str, Any] = {}
    if socket_path is not None:
        overrides["socket_path"] = socket_path
    if no_timeout:
        overrides["timeout"] = None
    elif timeout is not None:
        overrides["timeout"] = timeout

    try:
        if log_file is not None:
            setup_logging(log_file)
        cfg = ClientConfig.build(config_path)
        cfg = ClientConfig.model_validate({**cfg.model_dump(), **overrides})
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        out.print_error_and_exit("invalid_config", f"Invalid configuration: {e}")
    ctx.obj = AppContext(out=out, cfg=cfg)


app.command(aliases=["id"])(identity)
app.command()(check)
