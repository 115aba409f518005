"""Unit tests for the phrase helpers shared by the capability adapters."""

import pytest

from flowcheck.adapters.capabilities import phrases


def test_quoted_handles_straight_and_curly_quotes():
    assert phrases.quoted('Fill in "Name" with “Demo”') == ["Name", "Demo"]
    assert phrases.quoted("Click Save") == []


def test_unquoted_drops_arguments_and_lowercases():
    words = phrases.unquoted('Click "Create Project" Button')
    assert "create" not in words
    assert words.split() == ["click", "button"]


@pytest.mark.parametrize(
    ("description", "word"),
    [("Navigate, then wait", "navigate"), ("  Click:", "click"), ("", "")],
)
def test_first_word(description, word):
    assert phrases.first_word(description) == word


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Navigate to /projects/1.", "/projects/1"),
        ("Open https://example.com/login", "https://example.com/login"),
        ("Go to the home page", "/"),
        ("Visit the Landing Page", "/"),
        ('Click "/not/a/route"', None),
        ("Choose and/or confirm", None),
    ],
)
def test_route(description, expected):
    assert phrases.route(description) == expected


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Expect 201", 201),
        ("Verify status is 404", 404),
        ("Verify 1234 items", None),
        ('Verify "500" is shown', None),
        ("Verify 600", None),
    ],
)
def test_status_code(description, expected):
    assert phrases.status_code(description) == expected


class TestRequestPattern:
    """Recognising HTTP request actions."""

    @staticmethod
    def test_with_json_body():
        match = phrases.REQUEST_PATTERN.search('POST /api/projects with {"name": "Demo"}')
        assert match is not None
        assert match.group("method") == "POST"
        assert match.group("target") == "/api/projects"
        assert match.group("body") == '{"name": "Demo"}'

    @staticmethod
    def test_with_body_keyword():
        match = phrases.REQUEST_PATTERN.search("Send PUT /items/3 with body hello")
        assert match is not None
        assert match.group("body") == "hello"

    @staticmethod
    def test_without_body():
        match = phrases.REQUEST_PATTERN.search("GET https://example.com/health")
        assert match is not None
        assert match.group("target") == "https://example.com/health"
        assert match.group("body") is None

    @staticmethod
    def test_lowercase_method_is_not_a_request():
        assert phrases.REQUEST_PATTERN.search("get /health") is None


def test_unsupported():
    assert phrases.unsupported("Dance") == "unsupported step: Dance"
