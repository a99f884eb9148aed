"""Runners module - Docker container lifecycle management."""

from __future__ import annotations

from dockengine.runners.engine import ContainerRequest, DockerEngine, ExecResult
from dockengine.runners.output import sanitize
from dockengine.runners.ports import PortBindingSet, to_bindings

__all__ = [
    "ContainerRequest",
    "DockerEngine",
    "ExecResult",
    "PortBindingSet",
    "sanitize",
    "to_bindings",
]
