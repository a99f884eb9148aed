"""Utils module - Shared utilities."""

from __future__ import annotations

from dockengine.utils.logging import PACKAGE_LOGGER, JsonFormatter, configure_logging

__all__ = ["configure_logging", "JsonFormatter", "PACKAGE_LOGGER"]
