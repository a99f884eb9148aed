"""Translation of flat host/container port pairs into runtime port bindings."""

from __future__ import annotations

from collections.abc import Sequence

from dockengine.core.constants import DEFAULT_PROTOCOL, MAX_PORT, MIN_PORT
from dockengine.core.errors import InvalidPortSpec

# Container port with protocol ('7474/tcp') -> host port, the form the docker
# SDK accepts for ``ports=`` on container creation.
PortBindingSet = dict[str, int]


def _check_port(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPortSpec(f"Port must be an integer, got {value!r}")
    if not MIN_PORT <= value <= MAX_PORT:
        raise InvalidPortSpec(f"Port {value} outside valid range {MIN_PORT}-{MAX_PORT}")
    return value


def to_bindings(pairs: Sequence[int]) -> PortBindingSet:
    """Convert a flat port sequence into a binding map.

    Args:
        pairs: Ports as [host1, container1, host2, container2, ...]

    Returns:
        Mapping of '<container>/tcp' to host port. A container port listed
        twice keeps the host port of its last pair.

    Raises:
        InvalidPortSpec: If the sequence has odd length or holds a value that
            is not a port number
    """
    if len(pairs) % 2 != 0:
        raise InvalidPortSpec(
            f"Port pairs must be (host, container) pairs, got {len(pairs)} values"
        )

    bindings: PortBindingSet = {}
    for i in range(0, len(pairs), 2):
        host = _check_port(pairs[i])
        container = _check_port(pairs[i + 1])
        bindings[f"{container}/{DEFAULT_PROTOCOL}"] = host
    return bindings
