"""Tests for column tag parsing and name normalizers."""

import pytest

from domoschema.codes import ColumnType
from domoschema.errors import ConfigurationError
from domoschema.kernel.tags import get_normalizer, parse_tag, snake_case


def test_parse_tag_names_only():
    parsed = parse_tag("baz,Baz")
    assert parsed.names == ("baz", "Baz")
    assert parsed.column_type is None
    assert parsed.omit_empty is False
    assert parsed.has_name


def test_parse_tag_omitempty_does_not_take_a_name_slot():
    parsed = parse_tag("obar,omitempty")
    assert parsed.names == ("obar",)
    assert parsed.omit_empty is True
    assert parsed.column_type is None


def test_parse_tag_omitempty_with_leading_space_is_a_name():
    """Tokens are not stripped: ' omitempty' is just another name candidate."""
    parsed = parse_tag("obaz, omitempty")
    assert parsed.names == ("obaz", " omitempty")
    assert parsed.omit_empty is False


def test_parse_tag_type_token_overrides():
    parsed = parse_tag("firstBlahDay,DATE")
    assert parsed.names == ("firstBlahDay",)
    assert parsed.column_type is ColumnType.DATE


def test_parse_tag_type_only_has_no_name():
    parsed = parse_tag("DECIMAL")
    assert parsed.names == ()
    assert parsed.column_type is ColumnType.DECIMAL
    assert not parsed.has_name


def test_parse_tag_type_tokens_are_case_sensitive():
    parsed = parse_tag("long")
    assert parsed.names == ("long",)
    assert parsed.column_type is None


@pytest.mark.parametrize("tag", [None, ""])
def test_parse_tag_empty(tag):
    parsed = parse_tag(tag)
    assert parsed.names == ("",)
    assert not parsed.has_name
    assert not parsed.excluded


def test_parse_tag_exclusion_marker():
    assert parse_tag("-").excluded
    assert parse_tag("-,omitempty").excluded
    assert parse_tag("-,LONG").excluded


def test_parse_tag_dash_with_other_names_is_not_excluded():
    parsed = parse_tag("-,other")
    assert not parsed.excluded
    assert parsed.names[0] == "-"


def test_parse_tag_custom_separator():
    parsed = parse_tag("bar;LONG;omitempty", separator=";")
    assert parsed.names == ("bar",)
    assert parsed.column_type is ColumnType.LONG
    assert parsed.omit_empty


def test_parse_tag_applies_normalizer_to_names_only():
    parsed = parse_tag("FirstName,omitempty,STRING", normalizer=str.lower)
    assert parsed.names == ("firstname",)
    assert parsed.column_type is ColumnType.STRING


@pytest.mark.parametrize("name,expected", [
    ("FirstBlahDay", "first_blah_day"),
    ("firstBlahTime", "first_blah_time"),
    ("HTTPStatus", "http_status"),
    ("already_snake", "already_snake"),
    ("Id", "id"),
])
def test_snake_case(name, expected):
    assert snake_case(name) == expected


def test_get_normalizer_known_names():
    assert get_normalizer("identity")("MixedCase") == "MixedCase"
    assert get_normalizer("lower")("MixedCase") == "mixedcase"
    assert get_normalizer("upper")("MixedCase") == "MIXEDCASE"
    assert get_normalizer("snake_case")("MixedCase") == "mixed_case"


def test_get_normalizer_unknown_name():
    with pytest.raises(ConfigurationError, match="Unknown normalizer"):
        get_normalizer("kebab")
