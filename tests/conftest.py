"""
Shared fixtures for the approval pipeline tests.

Stages are tested against FakeGitHub, an in-memory stand-in for
GitHubAPI that serves canned ApiResponse objects by path and records
every call. The real GitHubAPI is tested separately against a mocked
requests.Session in test_github_client.py.
"""

import pytest

from pr_approval_agent.approval_config import ApprovalConfig
from pr_approval_agent.github_client import ApiResponse
from pr_approval_agent.models import PullRequestContext

ISSUE_URL = "https://api.github.com/repos/acme/widgets/issues/5"
REFERENCE_URL = "https://github.com/acme/widgets/issues/5#issuecomment-9"


class FakeGitHub:
    """Serves canned responses; unknown GET paths answer 404."""

    def __init__(self):
        self.responses = {}
        self.pages = {}
        self.send_responses = {}
        self.calls = []

    def get(self, path):
        self.calls.append(("GET", path))
        result = self.responses.get(path, ApiResponse(404, {"message": "Not Found"}))
        if isinstance(result, Exception):
            raise result
        return result

    def get_paged(self, path):
        self.calls.append(("GET_PAGED", path))
        for page in self.pages.get(path, []):
            if isinstance(page, Exception):
                raise page
            self.calls.append(("PAGE", path))
            yield page
            if not page.ok:
                return

    def send(self, method, path, json_body):
        self.calls.append((method, path, json_body))
        result = self.send_responses.get((method, path), ApiResponse(200, {}))
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def paths(self):
        return [call[1] for call in self.calls]

    def sent(self, method):
        return [call for call in self.calls if call[0] == method]


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def approved_github(fake_github):
    """
    acme/widgets with comment 9 on open issue 5, written by carol (write
    access), approving bob.
    """
    fake_github.responses.update({
        "issues/comments/9": ApiResponse(200, {
            "id": 9,
            "user": {"login": "carol"},
            "body": "@bob PR approved",
            "issue_url": ISSUE_URL,
        }),
        ISSUE_URL: ApiResponse(200, {"number": 5, "state": "open"}),
        "collaborators/carol/permission": ApiResponse(200, {"permission": "write"}),
    })
    return fake_github


@pytest.fixture
def pr_context():
    return PullRequestContext(
        owner="acme",
        repo="widgets",
        number=17,
        author="bob",
        body=f"Adds a gizmo.\n\nApproval: {REFERENCE_URL}\n",
        changed_files=3,
        changed_lines=40,
    )


@pytest.fixture
def cfg():
    return ApprovalConfig()
