"""Identity value types: what the daemon returns and what a client may send."""

import time
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field

# Wire integers: exact JSON integers only, no coercion from strings, bools or floats.
UInt32 = Annotated[int, Field(strict=True, ge=0, le=2**32 - 1)]
UInt64 = Annotated[int, Field(strict=True, ge=0, le=2**64 - 1)]


class Runner(BaseModel):
    """Merged runner context: daemon-verified process fields plus client-supplied context.

    Daemon-injected fields default to empty/zero when the daemon omits them.
    Unknown keys are kept and exposed through ``extra``.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    identity: str = Field(default="", description="Application identity name")
    hostname: str = Field(default="", description="Host the process runs on")
    process: str = Field(default="", description="Process name (from /proc/<pid>/comm)")
    pid: UInt32 = Field(default=0, description="Process ID of the caller")
    uid: UInt32 = Field(default=0, description="User ID of the caller")
    gid: UInt32 = Field(default=0, description="Group ID of the caller")
    instance_id: UInt64 | None = Field(default=None, description="Client-supplied instance id")
    timestamp: UInt64 | None = Field(default=None, description="Client-supplied Unix timestamp")

    @property
    def extra(self) -> dict[str, Any]:
        """Additional keys returned by the daemon beyond the known fields."""
        return dict(self.model_extra or {})


class RunnerRequest(BaseModel):
    """Client context sent to the daemon before it merges in verified fields.

    Built incrementally; every ``with_*`` method returns a new request.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    instance_id: UInt64 | None = None
    timestamp: UInt64 | None = None

    def with_instance_id(self, instance_id: int) -> Self:
        """Return a copy with the instance id set."""
        return self._replace({"instance_id": instance_id})

    def with_timestamp(self, timestamp: int) -> Self:
        """Return a copy with the timestamp (Unix seconds) set."""
        return self._replace({"timestamp": timestamp})

    def with_current_timestamp(self) -> Self:
        """Return a copy with the timestamp set to now."""
        return self._replace({"timestamp": int(time.time())})

    def with_field(self, key: str, value: Any) -> Self:  # noqa: ANN401
        """Return a copy with an additional key/value pair."""
        return self._replace({key: value})

    @property
    def extra(self) -> dict[str, Any]:
        """Additional key/value pairs set via ``with_field``."""
        return dict(self.model_extra or {})

    def to_wire(self) -> dict[str, Any]:
        """JSON object sent under the "runner" key; unset optional fields are omitted."""
        wire = self.model_dump()
        for name in ("instance_id", "timestamp"):
            if wire[name] is None:
                del wire[name]
        return wire

    def _replace(self, changes: dict[str, Any]) -> Self:
        # Re-validate so constraints apply to values set after construction.
        return type(self).model_validate({**self.model_dump(), **changes})


class Identity(BaseModel):
    """Verified identity of the calling process, as returned by the daemon."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(description="Application-level identity name")
    idm_url: str = Field(description="Identity management (OAuth2/OIDC) URL")
    config_url: str = Field(description="Configuration/API server URL")
    token: str = Field(default="", description="Opaque token issued by the daemon")
    runner: Runner = Field(default_factory=Runner, description="Merged runner context")

    @property
    def pid(self) -> int:
        """Process ID of the caller."""
        return self.runner.pid

    @property
    def uid(self) -> int:
        """User ID of the caller."""
        return self.runner.uid

    @property
    def gid(self) -> int:
        """Group ID of the caller."""
        return self.runner.gid

    @property
    def process(self) -> str:
        """Process name of the caller."""
        return self.runner.process
