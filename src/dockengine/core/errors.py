"""Exceptions raised by the engine.

Every failure surfaced by a propagating operation is an ``EngineError``
subclass raised ``from`` the collaborator's original exception, so the
runtime's own message and type stay reachable through ``__cause__``.
"""

from __future__ import annotations


class EngineError(RuntimeError):
    """Base class for all engine failures."""


class MalformedIdentifier(EngineError, ValueError):
    """An image reference could not be parsed."""


class InvalidPortSpec(EngineError, ValueError):
    """A flat host/container port sequence is unusable."""


class BuildFailed(EngineError):
    """The image build was rejected or reported an error."""


class PullFailed(EngineError):
    """An image could not be pulled."""


class PushFailed(EngineError):
    """An image could not be pushed."""


class StartFailed(EngineError):
    """A container could not be created or launched."""


class ExecFailed(EngineError):
    """A command could not be executed inside a container."""


class CommitFailed(EngineError):
    """A container could not be committed to an image."""


class ListFailed(EngineError):
    """Active containers could not be listed."""
