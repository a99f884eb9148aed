"""Pydantic schemas for dockengine.

This module defines the value objects exchanged with callers: the engine
configuration, registry credentials and descriptors of active containers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from dockengine.core.constants import (
    DEFAULT_CHARSET,
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_PROTOCOL,
    DEFAULT_STOP_TIMEOUT,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EngineConfig(BaseModel):
    """Configuration of a DockerEngine.

    Attributes:
        base_url: Docker daemon URL (e.g. 'tcp://docker:2375'). None uses the
            environment (DOCKER_HOST, DOCKER_TLS_VERIFY, ...)
        timeout: Client request timeout in seconds
        api_version: Docker API version, 'auto' negotiates with the daemon
        stop_timeout: Seconds a container gets to stop before it is killed
        charset: Charset used to decode exec output
        log_level: When set, the engine configures dockengine's own log
            output at this level (see utils.logging.configure_logging)
        json_logs: Emit that log output as JSON lines
        log_file: Optional file that also receives that log output
    """

    base_url: str | None = Field(default=None, description="Docker daemon URL")
    timeout: int = Field(default=DEFAULT_CLIENT_TIMEOUT, ge=1, description="Request timeout")
    api_version: str = Field(default="auto", min_length=1, description="Docker API version")
    stop_timeout: int = Field(default=DEFAULT_STOP_TIMEOUT, ge=0, description="Stop grace period")
    charset: str = Field(default=DEFAULT_CHARSET, min_length=1)
    log_level: str | None = Field(default=None, description="dockengine log level")
    json_logs: bool = Field(default=False)
    log_file: Path | None = Field(default=None)

    model_config = {"extra": "forbid"}

    @field_validator("base_url")
    @classmethod
    def blank_url_is_none(cls, v: str | None) -> str | None:
        """Treat an empty daemon URL as 'use the environment'."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        """Normalize the level name and reject unknown ones."""
        if v is None:
            return None
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v!r}")
        return level


class AuthConfig(BaseModel):
    """Registry credentials passed along with pull and push."""

    username: str | None = None
    password: str | None = None
    email: str | None = None
    serveraddress: str | None = None
    identitytoken: str | None = None

    def to_docker(self) -> dict[str, str]:
        """Return the dict form accepted by the docker SDK, without unset fields."""
        return self.model_dump(exclude_none=True)


class PortInfo(BaseModel):
    """A port of an active container as reported by the runtime."""

    private_port: int
    public_port: int | None = None
    type: str = DEFAULT_PROTOCOL
    ip: str | None = None


class ContainerInfo(BaseModel):
    """Descriptor of an active container.

    Attributes:
        id: Container handle
        image: Image reference the container was created from
        names: Container names as reported by the runtime (with leading '/')
        state: Short state, e.g. 'running'
        status: Human-readable status, e.g. 'Up 3 seconds'
        ports: Exposed and published ports
    """

    id: str
    image: str = ""
    names: list[str] = Field(default_factory=list)
    state: str | None = None
    status: str | None = None
    ports: list[PortInfo] = Field(default_factory=list)

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> ContainerInfo:
        """Build a descriptor from an entry of the runtime's container list."""
        return cls(
            id=entry["Id"],
            image=entry.get("Image") or "",
            names=entry.get("Names") or [],
            state=entry.get("State"),
            status=entry.get("Status"),
            ports=[
                PortInfo(
                    private_port=p["PrivatePort"],
                    public_port=p.get("PublicPort"),
                    type=p.get("Type") or DEFAULT_PROTOCOL,
                    ip=p.get("IP"),
                )
                for p in entry.get("Ports") or []
            ],
        )

    @property
    def name(self) -> str | None:
        """Primary container name without the leading slash."""
        if not self.names:
            return None
        return self.names[0].lstrip("/")

    @property
    def published_ports(self) -> dict[str, list[int]]:
        """Published ports as {'7474/tcp': [17474]}.

        The runtime lists a binding once per host address family, so equal
        host ports of one container port are collapsed. Distinct host ports
        bound to the same container port are all kept, in ascending order.
        """
        published: dict[str, set[int]] = {}
        for p in self.ports:
            if p.public_port is not None:
                published.setdefault(f"{p.private_port}/{p.type}", set()).add(p.public_port)
        return {key: sorted(hosts) for key, hosts in published.items()}
