"""Tests for env tag parsing."""

import dataclasses
from dataclasses import dataclass

from envbind.tags import TAG_KEY, TagDirectives, env_field, field_tag, parse_tag


class TestParseTag:
    """Test parsing raw tag text."""

    def test_empty_tag(self):
        """Test that an empty tag yields no directives."""
        assert parse_tag("") == TagDirectives()

    def test_name_only(self):
        """Test an explicit name with no directives."""
        tag = parse_tag("JWT_TTL")
        assert tag.name == "JWT_TTL"
        assert tag.has_default is False
        assert tag.required is False

    def test_name_is_trimmed(self):
        """Test surrounding whitespace is removed from the name."""
        assert parse_tag("  AUTH  ").name == "AUTH"
        assert parse_tag("   ,required").name == ""

    def test_skip(self):
        """Test the skip sentinel."""
        assert parse_tag("-").skip is True
        assert parse_tag("-,required default=x").skip is True
        assert parse_tag("NAME").skip is False

    def test_required(self):
        """Test the bare required directive."""
        tag = parse_tag(",required")
        assert tag.name == ""
        assert tag.required is True

    def test_required_case_insensitive(self):
        """Test directive keys ignore case."""
        assert parse_tag(",REQUIRED").required is True
        assert parse_tag(",Default=blue").default == "blue"

    def test_default(self):
        """Test the default directive."""
        tag = parse_tag(",default=blue")
        assert tag.default == "blue"
        assert tag.has_default is True

    def test_default_space_escape(self):
        """Test that \\s in defaults becomes a space."""
        assert parse_tag(",default=John\\sDoe").default == "John Doe"

    def test_default_keeps_equals(self):
        """Test only the first = separates key and value."""
        assert parse_tag(",default=a=b").default == "a=b"

    def test_empty_default_is_present(self):
        """Test an empty default still counts as a default."""
        tag = parse_tag(",default=")
        assert tag.default == ""
        assert tag.has_default is True

    def test_required_and_default(self):
        """Test combined directives."""
        tag = parse_tag("NAME,required default=John\\sDoe")
        assert tag == TagDirectives(name="NAME", default="John Doe", required=True)

    def test_malformed_tokens_ignored(self):
        """Test that unknown and malformed tokens are ignored."""
        tag = parse_tag(",optional  bogus required=yes color=red default=x")
        assert tag.required is False
        assert tag.default == "x"


class TestEnvField:
    """Test declaring tagged dataclass fields."""

    def test_env_field_metadata(self):
        """Test the tag is stored in field metadata."""

        @dataclass
        class Config:
            name: str = env_field("NAME,required", default="x")
            plain: str = ""

        name, plain = dataclasses.fields(Config)
        assert field_tag(name) == "NAME,required"
        assert field_tag(plain) == ""
        assert Config().name == "x"

    def test_env_field_merges_metadata(self):
        """Test caller metadata is preserved."""

        @dataclass
        class Config:
            port: int = env_field("PORT", default=0, metadata={"doc": "listen port"})

        (port,) = dataclasses.fields(Config)
        assert port.metadata["doc"] == "listen port"
        assert port.metadata[TAG_KEY] == "PORT"

    def test_env_field_default_factory(self):
        """Test default_factory is passed through."""

        @dataclass
        class Config:
            tags: list = env_field("-", default_factory=list)

        assert Config().tags == []
