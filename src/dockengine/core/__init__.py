"""Core module - configuration, schemas and errors."""

from __future__ import annotations

from dockengine.core.config import load_config
from dockengine.core.constants import DEFAULT_CHARSET
from dockengine.core.errors import (
    BuildFailed,
    CommitFailed,
    EngineError,
    ExecFailed,
    InvalidPortSpec,
    ListFailed,
    MalformedIdentifier,
    PullFailed,
    PushFailed,
    StartFailed,
)
from dockengine.core.schemas import AuthConfig, ContainerInfo, EngineConfig, PortInfo

__all__ = [
    "AuthConfig",
    "BuildFailed",
    "CommitFailed",
    "ContainerInfo",
    "DEFAULT_CHARSET",
    "EngineConfig",
    "EngineError",
    "ExecFailed",
    "InvalidPortSpec",
    "ListFailed",
    "load_config",
    "MalformedIdentifier",
    "PortInfo",
    "PullFailed",
    "PushFailed",
    "StartFailed",
]
