"""dockengine - a synchronous facade over the Docker Engine API."""

from __future__ import annotations

from dockengine.core.config import load_config
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
from dockengine.images.identifier import ImageIdentifier
from dockengine.runners.engine import ContainerRequest, DockerEngine, ExecResult
from dockengine.utils.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "AuthConfig",
    "BuildFailed",
    "CommitFailed",
    "ContainerInfo",
    "ContainerRequest",
    "DockerEngine",
    "EngineConfig",
    "EngineError",
    "ExecFailed",
    "ExecResult",
    "ImageIdentifier",
    "InvalidPortSpec",
    "ListFailed",
    "MalformedIdentifier",
    "PortInfo",
    "PullFailed",
    "PushFailed",
    "StartFailed",
    "configure_logging",
    "load_config",
    "__version__",
]
