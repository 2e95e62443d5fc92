"""Fetch the identity of this process from the daemon."""

from typing import Annotated

import typer

from getmyid.app_context import use_context
from getmyid.errors import GetMyIdError
from getmyid.types import RunnerRequest


def _build_runner(instance_id: int | None, timestamp: int | None, *, now: bool, fields: list[str]) -> RunnerRequest | None:
    """Build a runner request from CLI options, or None if none were given.

    Raises:
        ValueError: A field is not in KEY=VALUE form.

    """
    if instance_id is None and timestamp is None and not now and not fields:
        return None
    runner = RunnerRequest()
    if instance_id is not None:
        runner = runner.with_instance_id(instance_id)
    if now:
        runner = runner.with_current_timestamp()
    elif timestamp is not None:
        runner = runner.with_timestamp(timestamp)
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got '{item}'."
            raise ValueError(msg)
        runner = runner.with_field(key, value)
    return runner


def identity(
    ctx: typer.Context,
    *,
    instance_id: Annotated[int | None, typer.Option("--instance-id", min=0, help="Instance id to send.")] = None,
    timestamp: Annotated[int | None, typer.Option("--timestamp", min=0, help="Unix timestamp to send.")] = None,
    now: Annotated[bool, typer.Option("--now", help="Send the current time as timestamp.")] = False,
    field: Annotated[list[str] | None, typer.Option("--field", help="Extra runner field as KEY=VALUE.")] = None,
) -> None:
    """Show the identity of this process (sends runner context if any option is given)."""
    app = use_context(ctx)
    try:
        runner = _build_runner(instance_id, timestamp, now=now, fields=field or [])
    except ValueError as e:
        app.out.print_error_and_exit("invalid_field", str(e))

    try:
        result = app.client().get_identity_with_runner(runner)
    except GetMyIdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_identity(result)
