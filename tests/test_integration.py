"""End-to-end lifecycle test against a real Docker daemon.

Skipped when no daemon is reachable.
"""

from pathlib import Path
from uuid import uuid4

import docker
import pytest

from dockengine.runners.engine import ContainerRequest, DockerEngine

FIXTURE_CONTEXT = Path(__file__).parent / "fixtures" / "image"


def _docker_available() -> bool:
    try:
        client = docker.from_env()
        client.ping()
        client.close()
        return True
    except Exception:
        return False


pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not _docker_available(), reason="Docker daemon not available"),
]


@pytest.fixture
def engine():
    with DockerEngine() as engine:
        yield engine


def test_image_lifecycle(engine: DockerEngine) -> None:
    """Build, run, inspect, exec, commit and tear down a container."""
    engine.build(FIXTURE_CONTEXT, "xxx:latest")

    name = f"dockengine-{uuid4().hex[:8]}"
    cid = engine.start(
        "xxx:latest", name, "sleep 30", ["CC_NAME=Me"], 17474, 7474, 17575, 7575
    )
    new_image = None
    second = None
    try:
        active = engine.list_active()
        assert cid in active
        info = active[cid]
        assert info.image == "xxx:latest"
        assert info.name == name
        assert info.published_ports == {"7474/tcp": [17474], "7575/tcp": [17575]}

        assert "CC_NAME=Me" in engine.exec(cid, "env")

        repository = f"dockengine-commit-{uuid4().hex[:8]}"
        new_image = engine.commit(cid, repository, "21x")
        assert new_image

        engine.stop(cid)
        engine.remove(cid)
        engine.stop(cid)
        engine.remove(cid)
        assert cid not in engine.list_active()

        def configure(request: ContainerRequest) -> None:
            request.command = ["sleep", "15"]

        second = engine.start_with(f"{repository}:21x", f"{name}-2", configure)
        assert "CC_NAME=Me" in engine.exec(second, "env")
    finally:
        for handle in (cid, second):
            if handle:
                engine.stop(handle)
                engine.remove(handle)
        if new_image:
            engine.remove_image(new_image)
        engine.remove_image("xxx:latest")
