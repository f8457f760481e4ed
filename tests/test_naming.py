"""Tests for environment variable name derivation."""

import pytest

from envbind.naming import derive_name


class TestDeriveName:
    """Test deriving variable names from field identifiers."""

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("JSONString", "JSON_STRING"),
            ("fooBar", "FOO_BAR"),
            ("fooJSON", "FOO_JSON"),
            ("MagicMike", "MAGIC_MIKE"),
            ("JSON1String", "JSON_1_STRING"),
            ("TTLSeconds", "TTL_SECONDS"),
            ("URL", "URL"),
            ("SigningKey", "SIGNING_KEY"),
            ("MaxAge", "MAX_AGE"),
            ("DeleteUser", "DELETE_USER"),
            ("UnsupportedType", "UNSUPPORTED_TYPE"),
            ("aB", "A_B"),
            ("v2", "V_2"),
            ("http2Server", "HTTP_2_SERVER"),
        ],
    )
    def test_camel_case(self, identifier, expected):
        """Test boundaries in camel case and acronym identifiers."""
        assert derive_name(identifier) == expected

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("signing_key", "SIGNING_KEY"),
            ("ttl_seconds", "TTL_SECONDS"),
            ("url", "URL"),
            ("max_age2", "MAX_AGE_2"),
            ("database__host", "DATABASE_HOST"),
            ("trailing_", "TRAILING"),
        ],
    )
    def test_snake_case(self, identifier, expected):
        """Test that existing underscores are kept as single boundaries."""
        assert derive_name(identifier) == expected

    def test_edge_cases(self):
        """Test empty and single character identifiers."""
        assert derive_name("") == ""
        assert derive_name("x") == "X"
        assert derive_name("X") == "X"
        assert derive_name("7") == "7"

    @pytest.mark.parametrize(
        "identifier", ["JSONString", "fooBar", "JSON1String", "signing_key", "MagicMike"]
    )
    def test_stable_on_own_output(self, identifier):
        """Test that deriving from a derived name changes nothing."""
        derived = derive_name(identifier)
        assert derive_name(derived) == derived

    def test_no_leading_underscore(self):
        """Test that a leading upper case word does not produce a separator."""
        assert not derive_name("Name").startswith("_")
        assert not derive_name("_private").startswith("_")
