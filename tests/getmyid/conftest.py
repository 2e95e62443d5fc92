"""Shared fixtures: short socket paths and a threaded fake daemon."""

import contextlib
import copy
import json
import socket
import tempfile
import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

SUCCESS_DOC: dict[str, Any] = {
    "status": "ok",
    "identity": "BILLING_PROD",
    "idm_url": "https://auth.example.com/oauth2/billing",
    "config_url": "https://config.example.com/api/billing",
    "token": "tok_billing_xxx",
    "runner": {
        "identity": "BILLING_PROD",
        "hostname": "worker-01",
        "process": "billing-app",
        "pid": 1234,
        "uid": 1001,
        "gid": 1001,
    },
}

ERROR_DOC: dict[str, Any] = {
    "status": "error",
    "error_code": "E_NO_MATCH",
    "message": "No identity rule matches process 'unknown' (uid=1000)",
}


class FakeDaemon:
    """Single-connection Unix socket server standing in for the whoami daemon."""

    def __init__(self, path: Path, response: bytes, *, read_request: bool = False, hold: bool = False) -> None:
        self.path = path
        self.response = response
        self.read_request = read_request
        self.received: list[bytes] = []
        # Cleared while the daemon should stall before answering.
        self.release = threading.Event()
        if not hold:
            self.release.set()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(str(path))
        self._sock.listen(5)
        self._sock.settimeout(5.0)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            if self.read_request:
                chunks: list[bytes] = []
                while chunk := conn.recv(4096):
                    chunks.append(chunk)
                self.received.append(b"".join(chunks))
            self.release.wait(5.0)
            with contextlib.suppress(OSError):
                conn.sendall(self.response)

    def request_json(self) -> Any:  # noqa: ANN401
        """Decode the single request received by the daemon."""
        assert len(self.received) == 1
        return json.loads(self.received[0])

    def __enter__(self) -> "FakeDaemon":
        self._thread.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.release.set()
        with contextlib.suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()
        self._thread.join(5.0)


@pytest.fixture
def sock_path() -> Iterator[Path]:
    """Socket path in a short temporary directory (AF_UNIX paths are length-limited)."""
    with tempfile.TemporaryDirectory(prefix="getmyid-") as d:
        yield Path(d) / "whoami.sock"


@pytest.fixture
def success_doc() -> dict[str, Any]:
    """Well-formed success document (fresh copy per test)."""
    return copy.deepcopy(SUCCESS_DOC)


@pytest.fixture
def error_doc() -> dict[str, Any]:
    """Well-formed error document (fresh copy per test)."""
    return copy.deepcopy(ERROR_DOC)


@pytest.fixture
def success_bytes() -> bytes:
    """Encoded success response."""
    return json.dumps(SUCCESS_DOC).encode()


@pytest.fixture
def error_bytes() -> bytes:
    """Encoded error response."""
    return json.dumps(ERROR_DOC).encode()


@pytest.fixture
def fake_daemon(sock_path: Path) -> Callable[..., FakeDaemon]:
    """Factory for a FakeDaemon bound to sock_path; use as a context manager."""

    def make(response: bytes, *, read_request: bool = False, hold: bool = False) -> FakeDaemon:
        return FakeDaemon(sock_path, response, read_request=read_request, hold=hold)

    return make
