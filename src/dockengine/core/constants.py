"""Shared constants for dockengine."""

from __future__ import annotations

# Charset used to decode exec output unless configured otherwise.
DEFAULT_CHARSET = "utf-8"

# Build manifest expected at the root of a build context.
DEFAULT_DOCKERFILE = "Dockerfile"

# Seconds a container gets to shut down before the runtime kills it.
DEFAULT_STOP_TIMEOUT = 10

# Client request timeout in seconds (docker SDK default).
DEFAULT_CLIENT_TIMEOUT = 60

# Valid TCP port range for published ports.
MIN_PORT = 1
MAX_PORT = 65535

DEFAULT_PROTOCOL = "tcp"
