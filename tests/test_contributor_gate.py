"""Tests for stage 1: past-contributor lookup."""

import pytest

from pr_approval_agent.errors import TransportError
from pr_approval_agent.github_client import ApiResponse
from pr_approval_agent.stage_1_contributor_gate import is_past_contributor

CONTRIBUTORS_PATH = "contributors?per_page=100&page=1"


def test_found_on_first_page(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [
        ApiResponse(200, [{"login": "alice"}, {"login": "bob"}]),
    ]

    assert is_past_contributor(fake_github, "bob") is True


def test_match_is_case_insensitive(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [ApiResponse(200, [{"login": "BoB"}])]

    assert is_past_contributor(fake_github, "bob") is True


def test_found_on_second_page(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [
        ApiResponse(200, [{"login": "alice"}]),
        ApiResponse(200, [{"login": "bob"}]),
    ]

    assert is_past_contributor(fake_github, "bob") is True
    assert fake_github.calls.count(("PAGE", CONTRIBUTORS_PATH)) == 2


def test_stops_at_first_match(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [
        ApiResponse(200, [{"login": "bob"}]),
        ApiResponse(200, [{"login": "carol"}]),
    ]

    assert is_past_contributor(fake_github, "bob") is True
    assert fake_github.calls.count(("PAGE", CONTRIBUTORS_PATH)) == 1


def test_not_found_when_pages_exhausted(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [
        ApiResponse(200, [{"login": "alice"}]),
        ApiResponse(200, [{"login": "carol"}]),
    ]

    assert is_past_contributor(fake_github, "bob") is False


@pytest.mark.parametrize("page", [
    ApiResponse(403, {"message": "Forbidden"}),
    ApiResponse(204, None),
    ApiResponse(200, None),
    ApiResponse(200, {"unexpected": "shape"}),
])
def test_unusable_page_means_not_a_contributor(fake_github, page):
    fake_github.pages[CONTRIBUTORS_PATH] = [page, ApiResponse(200, [{"login": "bob"}])]

    assert is_past_contributor(fake_github, "bob") is False


def test_entries_without_login_are_ignored(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [
        ApiResponse(200, [{"type": "Anonymous"}, None, {"login": "bob"}]),
    ]

    assert is_past_contributor(fake_github, "bob") is True


def test_transport_error_propagates(fake_github):
    fake_github.pages[CONTRIBUTORS_PATH] = [TransportError("boom")]

    with pytest.raises(TransportError):
        is_past_contributor(fake_github, "bob")
