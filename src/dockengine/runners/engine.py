"""Docker engine facade for the common container lifecycle.

This module wraps a single Docker client and exposes the operations most
callers need:
- Image build, pull, push and removal
- Container creation and launch with command, environment and ports
- Command execution inside a running container
- Commit of a container to a new image
- Stop and removal of containers
- Listing of active containers

Two failure policies coexist. Propagating operations wrap any collaborator
error into an ``EngineError`` subclass raised from the original. Teardown
operations (``stop``, ``remove``, ``remove_image``) never raise: they are
meant for cleanup paths where the target may already be gone, so callers
cannot tell "stopped" from "already stopped" from "rejected".
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import docker

from dockengine.core.config import load_config
from dockengine.core.constants import DEFAULT_DOCKERFILE
from dockengine.core.errors import (
    BuildFailed,
    CommitFailed,
    EngineError,
    ExecFailed,
    ListFailed,
    PullFailed,
    PushFailed,
    StartFailed,
)
from dockengine.core.schemas import AuthConfig, ContainerInfo, EngineConfig
from dockengine.images.identifier import ImageIdentifier
from dockengine.runners.output import sanitize
from dockengine.runners.ports import PortBindingSet, to_bindings
from dockengine.utils.logging import configure_logging

if TYPE_CHECKING:
    from docker import DockerClient

logger = logging.getLogger(__name__)


@dataclass
class ContainerRequest:
    """Creation request handed to a configurator before submission.

    ``options`` takes any other keyword accepted by
    ``docker.models.containers.ContainerCollection.create`` (volumes,
    network, mem_limit, ...).
    """

    image: str
    name: str | None = None
    command: list[str] | None = None
    environment: list[str] = field(default_factory=list)
    ports: PortBindingSet = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def to_create_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``client.containers.create``."""
        kwargs = dict(self.options)
        kwargs["image"] = self.image
        if self.name:
            kwargs["name"] = self.name
        if self.command:
            kwargs["command"] = list(self.command)
        if self.environment:
            kwargs["environment"] = list(self.environment)
        if self.ports:
            kwargs["ports"] = dict(self.ports)
        return kwargs


@dataclass
class ExecResult:
    """Result of a command executed inside a container."""

    exit_code: int | None
    output: str


@contextlib.contextmanager
def _raising(error: type[EngineError], action: str) -> Iterator[None]:
    """Wrap collaborator failures into ``error``; engine errors pass through."""
    try:
        yield
    except EngineError:
        raise
    except Exception as e:
        logger.error(f"Failed to {action}: {e}")
        raise error(f"Failed to {action}: {e}") from e


@contextlib.contextmanager
def _best_effort(action: str) -> Iterator[None]:
    """Run a teardown step and discard any failure."""
    try:
        yield
    except Exception as e:
        logger.debug(f"Ignoring failure to {action}: {e}")


def _auth(auth_config: AuthConfig | Mapping[str, str] | None) -> dict[str, str] | None:
    if auth_config is None:
        return None
    if isinstance(auth_config, AuthConfig):
        return auth_config.to_docker()
    return dict(auth_config)


def _drain(events: Iterable[dict[str, Any]], error: type[EngineError], action: str) -> None:
    """Consume a pull/push event stream to its end, failing on error events.

    The daemon reports registry failures inside the stream with a 200
    response, so the HTTP call alone does not signal them.
    """
    for event in events:
        message = event.get("error") or (event.get("errorDetail") or {}).get("message")
        if message:
            raise error(f"Failed to {action}: {message}")
        status = event.get("status")
        if status:
            progress = event.get("progress") or ""
            logger.debug(f"{event.get('id', '')} {status} {progress}".strip())


def _create_client(config: EngineConfig) -> DockerClient:
    if config.base_url:
        return docker.DockerClient(
            base_url=config.base_url,
            version=config.api_version,
            timeout=config.timeout,
        )
    return docker.from_env(version=config.api_version, timeout=config.timeout)


class DockerEngine:
    """Facade over a Docker daemon for single-container lifecycles.

    Every call is synchronous and blocks until the daemon reports completion.
    The engine keeps no state besides the client handle, so one instance can
    be shared between callers.

    Example:
        ```python
        with DockerEngine() as engine:
            engine.build(Path("./image"), "xxx", "latest")
            cid = engine.start(
                "xxx:latest", "demo", "sleep 30", ["CC_NAME=Me"], 17474, 7474
            )
            print(engine.exec(cid, "env"))
            engine.stop(cid)
            engine.remove(cid)
        ```
    """

    def __init__(
        self,
        docker_url: str | None = None,
        *,
        config: EngineConfig | None = None,
        client: DockerClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            docker_url: Docker daemon URL (e.g. 'tcp://docker:2375'), overrides
                config.base_url
            config: Engine configuration (defaults to EngineConfig())
            client: Existing Docker client to reuse instead of creating one

        Raises:
            EngineError: If no client could be created for the daemon
        """
        config = config or EngineConfig()
        if docker_url:
            config = config.model_copy(update={"base_url": docker_url})
        self._config = config

        if config.log_level:
            configure_logging(
                config.log_level, json_format=config.json_logs, log_file=config.log_file
            )

        if client is None:
            with _raising(EngineError, "connect to the Docker daemon"):
                client = _create_client(config)
        self._client = client

    @classmethod
    def from_config_file(
        cls, path: Path | str, *, client: DockerClient | None = None
    ) -> DockerEngine:
        """Create an engine from a YAML or JSON configuration file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file format or content is unusable
            EngineError: If no client could be created for the daemon
        """
        return cls(config=load_config(path), client=client)

    @property
    def client(self) -> DockerClient:
        """The shared Docker client, for operations this facade does not cover."""
        return self._client

    @property
    def config(self) -> EngineConfig:
        return self._config

    def build(
        self,
        source_dir: Path | str,
        repository: str,
        tag: str | None = None,
        *,
        dockerfile: str = DEFAULT_DOCKERFILE,
        build_args: dict[str, str] | None = None,
    ) -> str:
        """Build an image from a build context and tag it.

        Args:
            source_dir: Directory holding the Dockerfile and build context
            repository: Target repository, or a full 'repository:tag' when
                tag is None
            tag: Target tag
            dockerfile: Dockerfile path relative to the context
            build_args: Build arguments to pass

        Returns:
            The id of the built image

        Raises:
            BuildFailed: If the Dockerfile is missing or the build fails
        """
        identifier = ImageIdentifier.from_parts(repository, tag)
        context = Path(source_dir)
        manifest = context / dockerfile
        if not manifest.is_file():
            raise BuildFailed(f"Dockerfile not found: {manifest}")

        logger.info(f"Building image {identifier} from {context}")
        with _raising(BuildFailed, f"build image {identifier}"):
            image, build_log = self._client.images.build(
                path=str(context),
                dockerfile=dockerfile,
                buildargs=build_args or {},
                rm=True,
            )
            for chunk in build_log:
                line = str(chunk.get("stream", "")).strip()
                if line:
                    logger.debug(f"Build: {line}")
            image.tag(identifier.name, tag=identifier.tag)

        logger.info(f"Successfully built {identifier} ({image.short_id})")
        return image.id

    def pull(
        self, compound_ref: str, auth_config: AuthConfig | Mapping[str, str] | None = None
    ) -> None:
        """Pull an image, returning once every layer is downloaded.

        Args:
            compound_ref: Image reference (e.g., 'registry.my.com/repo:1.0')
            auth_config: Optional registry credentials

        Raises:
            MalformedIdentifier: If the reference cannot be parsed
            PullFailed: On network, auth or registry errors
        """
        identifier = ImageIdentifier.parse(compound_ref)
        action = f"pull image {identifier}"

        logger.info(f"Pulling image {identifier}...")
        with _raising(PullFailed, action):
            events = self._client.api.pull(
                identifier.name,
                tag=identifier.tag,
                auth_config=_auth(auth_config),
                stream=True,
                decode=True,
            )
            _drain(events, PullFailed, action)
        logger.info(f"Successfully pulled {identifier}")

    def push(
        self,
        repository: str,
        tag: str,
        auth_config: AuthConfig | Mapping[str, str] | None = None,
    ) -> None:
        """Push an image, returning once every layer is uploaded.

        Raises:
            MalformedIdentifier: If repository and tag do not form a reference
            PushFailed: On network, auth or registry errors
        """
        identifier = ImageIdentifier.from_parts(repository, tag)
        action = f"push image {identifier}"

        logger.info(f"Pushing image {identifier}...")
        with _raising(PushFailed, action):
            events = self._client.api.push(
                identifier.name,
                tag=identifier.tag,
                auth_config=_auth(auth_config),
                stream=True,
                decode=True,
            )
            _drain(events, PushFailed, action)
        logger.info(f"Successfully pushed {identifier}")

    def start(
        self,
        image: str,
        name: str | None,
        command: str | None = None,
        env: Sequence[str] | None = None,
        *port_pairs: int,
    ) -> str:
        """Create and start a container.

        Args:
            image: Image reference to run
            name: Container name
            command: Command line, split on whitespace. None keeps the
                image's default command
            env: Environment as 'NAME=VALUE' strings
            port_pairs: Published ports as host, container, host, container...

        Returns:
            The container handle

        Raises:
            InvalidPortSpec: If port_pairs is not a valid pair sequence
            StartFailed: If the container cannot be created or started
        """
        bindings = to_bindings(port_pairs)
        tokens = command.split() if command else []

        def configure(request: ContainerRequest) -> None:
            request.command = tokens or None
            request.ports = bindings
            if env is not None:
                request.environment = list(env)

        return self.start_with(image, name, configure)

    def start_with(
        self,
        image: str,
        name: str | None,
        configure: Callable[[ContainerRequest], None] | None = None,
    ) -> str:
        """Create and start a container configured by a caller-supplied step.

        ``configure`` receives the ContainerRequest and may change any of its
        fields, including ``options`` for settings ``start`` does not cover.

        Returns:
            The container handle

        Raises:
            StartFailed: If the container cannot be created or started
        """
        request = ContainerRequest(image=image, name=name)
        if configure is not None:
            configure(request)

        logger.info(f"Creating container {name} from {image}")
        with _raising(StartFailed, f"create container from {image}"):
            container = self._client.containers.create(**request.to_create_kwargs())

        try:
            with _raising(StartFailed, f"start container {container.short_id}"):
                container.start()
        except StartFailed:
            # Leave no dead container behind holding the name.
            with _best_effort(f"remove container {container.short_id}"):
                container.remove(force=True)
            raise

        logger.info(f"Started container {container.short_id}")
        return container.id

    def exec_result(self, container_id: str, *command: str) -> ExecResult:
        """Run a command to completion inside a running container.

        Returns:
            ExecResult with the exit code and sanitized stdout+stderr

        Raises:
            ExecFailed: If the container is missing or not running, or the
                session cannot attach
        """
        if not command:
            raise ExecFailed(f"No command given for container {container_id}")

        with _raising(ExecFailed, f"execute {' '.join(command)!r} in {container_id}"):
            container = self._client.containers.get(container_id)
            result = container.exec_run(list(command), stdout=True, stderr=True, tty=True)

        logger.debug(f"Exec {command[0]!r} in {container_id} exited with {result.exit_code}")
        return ExecResult(
            exit_code=result.exit_code,
            output=sanitize(result.output, self._config.charset),
        )

    def exec(self, container_id: str, *command: str) -> str:
        """Run a command inside a running container and return its output.

        A non-zero exit code is not an error here; use exec_result to see it.
        """
        return self.exec_result(container_id, *command).output

    def stop(self, container_id: str) -> None:
        """Stop a container and wait until it has stopped, ignoring any errors."""
        with _best_effort(f"stop container {container_id}"):
            container = self._client.containers.get(container_id)
            container.stop(timeout=self._config.stop_timeout)
            container.wait()

    def remove(self, container_id: str) -> None:
        """Remove a container, ignoring any errors."""
        with _best_effort(f"remove container {container_id}"):
            self._client.containers.get(container_id).remove()

    def remove_image(self, image_id: str) -> None:
        """Force removal of an image, ignoring any errors."""
        logger.info(f"Removing image {image_id}")
        with _best_effort(f"remove image {image_id}"):
            self._client.images.remove(image=image_id, force=True)

    def commit(self, container_id: str, repository: str, tag: str) -> str:
        """Commit a container's filesystem as a new image.

        Returns:
            The id of the new image

        Raises:
            CommitFailed: If the container cannot be committed
        """
        with _raising(CommitFailed, f"commit container {container_id} to {repository}:{tag}"):
            container = self._client.containers.get(container_id)
            image = container.commit(repository=repository, tag=tag)

        logger.info(f"Committed container {container_id} as {repository}:{tag}")
        return image.id

    def list_active(self) -> dict[str, ContainerInfo]:
        """Return running containers keyed by container handle.

        Raises:
            ListFailed: If the daemon cannot be queried
        """
        with _raising(ListFailed, "list active containers"):
            entries = self._client.api.containers(all=False)
            return {entry["Id"]: ContainerInfo.from_api(entry) for entry in entries}

    def close(self) -> None:
        """Release the client connection."""
        with contextlib.suppress(Exception):
            self._client.close()

    def __enter__(self) -> DockerEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
