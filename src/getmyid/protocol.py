"""Wire protocol between a client and the whoami daemon.

JSON over a Unix socket, delimited by connection shutdown rather than by
newlines or length prefixes. The client optionally writes one request and
half-closes its write side; the daemon writes one response and closes.

Request:  {"runner": {"instance_id": 42, "timestamp": 1738512000, "custom": "value"}}
Success:  {"status": "ok", "identity": "BILLING_PROD", "idm_url": "...", "config_url": "...",
           "token": "...", "runner": {"identity": "...", "hostname": "...", "process": "...",
           "pid": 1234, "uid": 1001, "gid": 1001}}
Legacy:   {"status": "ok", "identity": "...", "idm_url": "...", "config_url": "...", "token"?: "...",
           "pid": 1234, "uid": 1001, "gid": 1001, "process": "billing-app"}
Error:    {"status": "error", "error_code": "E_NO_MATCH", "message": "..."}

The payload carries no tag of its own: its shape is validated against the
variant selected by the top-level "status" field.
"""

import json
import logging
from typing import Any, NoReturn

from pydantic import BaseModel, ConfigDict, ValidationError

from getmyid.errors import DaemonError, InvalidJsonError, MissingFieldError
from getmyid.types import Identity, Runner, RunnerRequest, UInt32

logger = logging.getLogger(__name__)

STATUS_OK = "ok"


class SuccessPayload(BaseModel):
    """Current success shape: identity fields, token and a nested runner."""

    identity: str
    idm_url: str
    config_url: str
    token: str
    runner: Runner

    def to_identity(self) -> Identity:
        """Project into the public Identity type."""
        return Identity(
            identity=self.identity, idm_url=self.idm_url, config_url=self.config_url, token=self.token, runner=self.runner
        )


class LegacySuccessPayload(BaseModel):
    """Earlier success shape: process fields at the top level, optional token, no runner."""

    identity: str
    idm_url: str
    config_url: str
    token: str = ""
    pid: UInt32
    uid: UInt32
    gid: UInt32
    process: str

    def to_identity(self) -> Identity:
        """Project into the public Identity type, folding process fields into a runner."""
        runner = Runner(identity=self.identity, process=self.process, pid=self.pid, uid=self.uid, gid=self.gid)
        return Identity(
            identity=self.identity, idm_url=self.idm_url, config_url=self.config_url, token=self.token, runner=runner
        )


class ErrorPayload(BaseModel):
    """Error shape reported by the daemon."""

    error_code: str
    message: str


class DaemonResponse(BaseModel):
    """Top-level response document: status discriminator plus the remaining fields."""

    model_config = ConfigDict(extra="allow")

    status: str

    @property
    def is_ok(self) -> bool:
        """Check if the status field is the success marker."""
        return self.status == STATUS_OK

    @property
    def payload(self) -> dict[str, Any]:
        """Document fields other than the status discriminator."""
        return dict(self.model_extra or {})


# Tried in order; the first shape that validates wins.
SUCCESS_SHAPES: tuple[type[SuccessPayload | LegacySuccessPayload], ...] = (SuccessPayload, LegacySuccessPayload)


def encode_request(runner: RunnerRequest) -> bytes:
    """Serialize a runner request into the single-key request envelope.

    Raises:
        InvalidJsonError: A value in the request cannot be represented as JSON.

    """
    try:
        return json.dumps({"runner": runner.to_wire()}, allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise InvalidJsonError(f"cannot encode runner request: {e}") from e


def _reject_constant(name: str) -> NoReturn:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


def parse_document(text: str | bytes) -> DaemonResponse:
    """Parse raw response text into a status-tagged document.

    Raises:
        InvalidJsonError: Not JSON (including NaN/Infinity and nesting too deep to parse),
            not an object, or no string "status" field.

    """
    try:
        obj = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise InvalidJsonError(str(e)) from e
    if not isinstance(obj, dict):
        raise InvalidJsonError(f"expected a JSON object, got {type(obj).__name__}")
    try:
        return DaemonResponse.model_validate(obj)
    except ValidationError as e:
        raise InvalidJsonError(f"missing or non-string 'status' field: {e.error_count()} error(s)") from e


def _match_success(payload: dict[str, Any]) -> Identity | None:
    for shape in SUCCESS_SHAPES:
        try:
            return shape.model_validate(payload).to_identity()
        except ValidationError:
            continue
    return None


def _match_error(payload: dict[str, Any]) -> ErrorPayload | None:
    try:
        return ErrorPayload.model_validate(payload)
    except ValidationError:
        return None


def decode_response(text: str | bytes) -> Identity:
    """Decode a daemon response into an Identity.

    Raises:
        InvalidJsonError: Response is not a JSON object with a string status.
        DaemonError: Daemon reported a well-formed error.
        MissingFieldError: Payload shape contradicts the status field.

    """
    doc = parse_document(text)
    payload = doc.payload

    if not doc.is_ok:
        error = _match_error(payload)
        if error is None:
            logger.debug("Error status %r without an error payload", doc.status)
            raise MissingFieldError("error_code")
        logger.debug("Daemon error %s: %s", error.error_code, error.message)
        raise DaemonError(error.error_code, error.message)

    identity = _match_success(payload)
    if identity is None:
        # Covers both an error-shaped payload under status=ok and a payload of no known shape.
        logger.debug("Success status without an identity payload")
        raise MissingFieldError("identity")
    logger.debug("Decoded identity %s", identity.identity)
    return identity
