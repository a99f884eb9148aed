"""Images module - image reference handling."""

from __future__ import annotations

from dockengine.images.identifier import ImageIdentifier, parse_identifier

__all__ = ["ImageIdentifier", "parse_identifier"]
