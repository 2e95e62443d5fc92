"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 -- this module is the output layer; print() is its sole mechanism for producing CLI output.

import json
import sys
from pathlib import Path
from typing import NoReturn

import typer

from getmyid.types import Identity


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_identity(self, identity: Identity) -> None:
        """Print the identity returned by the daemon."""
        runner = identity.runner
        lines = [
            f"Identity:   {identity.identity}",
            f"IDM URL:    {identity.idm_url}",
            f"Config URL: {identity.config_url}",
            f"Process:    {runner.process} (pid {runner.pid}, uid {runner.uid}, gid {runner.gid})",
        ]
        if runner.hostname:
            lines.append(f"Hostname:   {runner.hostname}")
        if runner.instance_id is not None:
            lines.append(f"Instance:   {runner.instance_id}")
        if runner.timestamp is not None:
            lines.append(f"Timestamp:  {runner.timestamp}")
        lines.extend(f"{key}: {value}" for key, value in sorted(runner.extra.items()))
        self._success(identity.model_dump(mode="json"), "\n".join(lines))

    def print_check(self, *, socket_path: Path, exists: bool, connectable: bool) -> None:
        """Print daemon socket status."""
        if not exists:
            state = "missing"
        elif connectable:
            state = "accepting connections"
        else:
            state = "not accepting connections"
        self._success(
            {"socket_path": str(socket_path), "exists": exists, "connectable": connectable},
            f"Socket {socket_path}: {state}.",
        )
