"""Unit tests for the CLI option callbacks.

These tests exercise flowcheck.entrypoints.cli.helpers.option_parsers,
covering defaults, override order, input normalization (commas, spaces and
newlines), case-insensitivity, and error handling for malformed input.
"""

import logging
import types

import click
import pytest

from flowcheck.entrypoints.cli.helpers.option_parsers import (
    parse_headers,
    parse_log_level,
)


def make_ctx():
    """Create a minimal Click context stub; the callbacks never use it."""
    return types.SimpleNamespace()


class TestParseLogLevel:
    """NAME=LEVEL pairs."""

    @staticmethod
    def test_empty_uses_defaults():
        assert parse_log_level(make_ctx(), None, ()) == {
            "httpx": logging.WARNING,
            "httpcore": logging.WARNING,
        }

    @staticmethod
    def test_repeated_flags_override_order():
        out = parse_log_level(make_ctx(), None, ("httpx=INFO", "flowcheck=ERROR", "httpx=DEBUG"))
        assert out["httpx"] == logging.DEBUG
        assert out["flowcheck"] == logging.ERROR

    @staticmethod
    def test_envvar_string_with_commas_and_spaces():
        out = parse_log_level(make_ctx(), None, "httpx=INFO,  asyncio=WARNING flowcheck=debug")
        assert out == {
            "httpx": logging.INFO,
            "httpcore": logging.WARNING,
            "asyncio": logging.WARNING,
            "flowcheck": logging.DEBUG,
        }

    @staticmethod
    @pytest.mark.parametrize("value", ["not-a-pair", "=INFO", "httpx=LOUD"])
    def test_invalid_items_raise(value):
        with pytest.raises(click.BadParameter):
            parse_log_level(make_ctx(), None, (value,))


class TestParseHeaders:
    """'Name: value' header lines."""

    @staticmethod
    def test_repeated_flags():
        out = parse_headers(
            make_ctx(), None, ("Authorization: Bearer abc", "X-Trace:  on ")
        )
        assert out == {"Authorization": "Bearer abc", "X-Trace": "on"}

    @staticmethod
    def test_newline_separated_string():
        out = parse_headers(make_ctx(), None, "Accept: application/json\nX-Empty:")
        assert out == {"Accept": "application/json", "X-Empty": ""}

    @staticmethod
    def test_value_may_contain_colons():
        out = parse_headers(make_ctx(), None, ("X-Url: http://example.com:8080",))
        assert out == {"X-Url": "http://example.com:8080"}

    @staticmethod
    @pytest.mark.parametrize("value", ["no colon here", ": value"])
    def test_invalid_items_raise(value):
        with pytest.raises(click.BadParameter):
            parse_headers(make_ctx(), None, (value,))

    @staticmethod
    def test_nothing_given():
        assert not parse_headers(make_ctx(), None, ())
