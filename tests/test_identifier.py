"""Tests for compound image reference parsing."""

import pytest
from pydantic import ValidationError

from dockengine.core.errors import MalformedIdentifier
from dockengine.images.identifier import ImageIdentifier, parse_identifier


class TestParse:
    """Tests for ImageIdentifier.parse."""

    def test_bare_repository(self):
        """A bare name has no tag and no registry."""
        ident = ImageIdentifier.parse("alpine")
        assert ident.path == "alpine"
        assert ident.name == "alpine"
        assert ident.tag is None
        assert ident.registry is None

    def test_repository_with_tag(self):
        """Test name:tag splits on the colon."""
        ident = ImageIdentifier.parse("alpine:3.18")
        assert ident.path == "alpine"
        assert ident.tag == "3.18"

    def test_registry_qualified(self):
        """Test registry host is kept in the name but not in the path."""
        ident = ImageIdentifier.parse("registry.my.com/somerepo:1.0.0.2x")
        assert ident.name == "registry.my.com/somerepo"
        assert ident.path == "somerepo"
        assert ident.registry == "registry.my.com"
        assert ident.tag == "1.0.0.2x"

    def test_registry_port_is_not_a_tag(self):
        """Test colon before the last slash belongs to the registry."""
        ident = ImageIdentifier.parse("registry.my.com:5000/repo:tag")
        assert ident.registry == "registry.my.com:5000"
        assert ident.path == "repo"
        assert ident.tag == "tag"

    def test_registry_port_without_tag(self):
        """Test registry port with an untagged repository."""
        ident = ImageIdentifier.parse("localhost:5000/team/app")
        assert ident.registry == "localhost:5000"
        assert ident.path == "team/app"
        assert ident.tag is None

    def test_user_namespace_is_not_a_registry(self):
        """Test a plain first segment stays part of the path."""
        ident = ImageIdentifier.parse("myuser/myimage:v1")
        assert ident.registry is None
        assert ident.path == "myuser/myimage"
        assert ident.name == "myuser/myimage"

    def test_surrounding_whitespace_ignored(self):
        """Test leading and trailing whitespace is dropped."""
        assert ImageIdentifier.parse("  alpine:3.18 \n").reference == "alpine:3.18"

    @pytest.mark.parametrize(
        "compound",
        ["", "   ", ":tag", "registry.my.com/", "alpine:", "a//b", "/alpine"],
    )
    def test_malformed(self, compound):
        """Test references without a usable path or tag are rejected."""
        with pytest.raises(MalformedIdentifier):
            ImageIdentifier.parse(compound)

    @pytest.mark.parametrize(
        "compound",
        ["alpine@sha256:abcd", "registry.my.com:5000/repo:1.0@sha256:abcd"],
    )
    def test_digest_rejected(self, compound):
        """Test digest references are rejected instead of read as a tag."""
        with pytest.raises(MalformedIdentifier, match="Digest"):
            ImageIdentifier.parse(compound)

    def test_malformed_is_value_error(self):
        """Test MalformedIdentifier can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_identifier("")


class TestIdentifier:
    """Tests for ImageIdentifier helpers."""

    def test_reference_round_trip(self):
        """Test the compound reference is rebuilt unchanged."""
        compound = "registry.my.com:5000/team/app:1.2"
        assert str(ImageIdentifier.parse(compound)) == compound

    def test_reference_without_tag(self):
        """Test no default tag is synthesized."""
        assert ImageIdentifier.parse("alpine").reference == "alpine"

    def test_from_parts(self):
        """Test repository and tag given separately."""
        ident = ImageIdentifier.from_parts("registry.my.com/somerepo", "21x")
        assert ident.name == "registry.my.com/somerepo"
        assert ident.tag == "21x"

    def test_from_parts_compound_repository(self):
        """Test a compound repository is parsed when no tag is given."""
        ident = ImageIdentifier.from_parts("xxx:latest")
        assert ident.path == "xxx"
        assert ident.tag == "latest"

    def test_from_parts_rejects_double_tag(self):
        """Test a tagged repository plus a tag is malformed."""
        with pytest.raises(MalformedIdentifier):
            ImageIdentifier.from_parts("xxx:latest", "v1")

    def test_immutable(self):
        """Test identifiers cannot be modified."""
        ident = ImageIdentifier.parse("alpine")
        with pytest.raises(ValidationError):
            ident.tag = "edge"
