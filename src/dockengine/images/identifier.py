"""Compound image reference parsing.

Parses references of the form ``[registry/]repository[:tag]``, such as
``alpine``, ``alpine:3.18`` or ``registry.my.com:5000/team/app:1.0``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from dockengine.core.errors import MalformedIdentifier


def _is_registry(segment: str) -> bool:
    # Docker's rule: a leading segment is a registry host only if it looks like one.
    return "." in segment or ":" in segment or segment == "localhost"


class ImageIdentifier(BaseModel):
    """Parsed image reference.

    Examples:
        - alpine -> path='alpine', tag=None
        - alpine:3.18 -> path='alpine', tag='3.18'
        - registry.my.com/somerepo:1.0.0.2x -> registry='registry.my.com',
          path='somerepo', tag='1.0.0.2x'

    An absent tag is left absent; the runtime applies its own default.
    """

    registry: str | None = None
    path: str = Field(..., min_length=1)
    tag: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, compound: str) -> ImageIdentifier:
        """Parse a compound image reference.

        The tag separator is the last colon after the last slash, so a
        registry port (``host:5000/repo``) is never taken for a tag.

        Args:
            compound: Reference string (e.g., 'registry.my.com/somerepo:1.0')

        Returns:
            Parsed ImageIdentifier

        Raises:
            MalformedIdentifier: If the reference is empty, has no path
                segment, has an empty tag or carries a digest
        """
        if not isinstance(compound, str) or not compound.strip():
            raise MalformedIdentifier("Empty image reference")

        reference = compound.strip()
        if "@" in reference:
            raise MalformedIdentifier(f"Digest references are not supported: {compound!r}")

        last_slash = reference.rfind("/")
        last_colon = reference.rfind(":")

        tag = None
        repository = reference
        if last_colon > last_slash:
            repository, tag = reference[:last_colon], reference[last_colon + 1 :]
            if not tag:
                raise MalformedIdentifier(f"Empty tag in image reference: {compound!r}")

        segments = repository.split("/")
        if not all(segments):
            raise MalformedIdentifier(f"Missing path segment in image reference: {compound!r}")

        registry = None
        path = repository
        if len(segments) > 1 and _is_registry(segments[0]):
            registry = segments[0]
            path = "/".join(segments[1:])

        if ":" in path:
            raise MalformedIdentifier(f"Unexpected ':' in repository path: {compound!r}")

        return cls(registry=registry, path=path, tag=tag)

    @classmethod
    def from_parts(cls, repository: str, tag: str | None = None) -> ImageIdentifier:
        """Build an identifier from a separate repository and tag.

        With no tag, ``repository`` is parsed as a compound reference.
        """
        if tag is None:
            return cls.parse(repository)
        return cls.parse(f"{repository}:{tag}")

    @property
    def name(self) -> str:
        """Registry-qualified repository, as sent to the runtime."""
        if self.registry:
            return f"{self.registry}/{self.path}"
        return self.path

    @property
    def reference(self) -> str:
        """Full compound reference."""
        if self.tag:
            return f"{self.name}:{self.tag}"
        return self.name

    def __str__(self) -> str:
        return self.reference


def parse_identifier(compound: str) -> ImageIdentifier:
    """Parse a compound image reference. See ImageIdentifier.parse."""
    return ImageIdentifier.parse(compound)
