"""
Data Model — PR Approval Gate

Invocation-scoped values passed between the pipeline stages. Everything here
is frozen: a PullRequestContext is built once from the event payload, the
GitHub objects are built once from API responses, and a CheckOutcome is
built once at the end of the run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class PullRequestContext:
    """
    Snapshot of the pull request under check.

    owner, repo and author are lowercased on construction by
    action_io.pull_request_from_event(). changed_files / changed_lines are
    None when the event payload does not carry them.
    """

    owner: str
    repo: str
    number: int
    author: str
    body: str
    changed_files: Optional[int] = None
    changed_lines: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ApprovalReference:
    """Coordinates of the approval comment, parsed from the PR body."""

    owner: str
    repo: str
    issue_number: int
    comment_id: int
    url: str


@dataclass(frozen=True)
class Comment:
    id: int
    author: Optional[str]
    body: str
    issue_url: Optional[str]

    @classmethod
    def from_api(cls, data: dict) -> "Comment":
        user = data.get("user") or {}
        return cls(
            id=data.get("id", 0),
            author=user.get("login") or None,
            body=data.get("body") or "",
            issue_url=data.get("issue_url") or None,
        )


@dataclass(frozen=True)
class Issue:
    number: int
    state: str

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @classmethod
    def from_api(cls, data: dict) -> "Issue":
        return cls(number=data.get("number", 0), state=data.get("state") or "")


class PermissionLevel(str, Enum):
    """Values of `permission` from GET /collaborators/{user}/permission."""

    NONE = "none"
    READ = "read"
    TRIAGE = "triage"
    WRITE = "write"
    MAINTAIN = "maintain"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PermissionLevel"]:
        try:
            return cls(value or "")
        except ValueError:
            return None

    @property
    def is_privileged(self) -> bool:
        return self in PRIVILEGED_PERMISSIONS


# The permission endpoint folds maintain into write and triage into read, so
# these two cover every role at or above write.
PRIVILEGED_PERMISSIONS = frozenset({PermissionLevel.WRITE, PermissionLevel.ADMIN})


@dataclass(frozen=True)
class RemediationResult:
    """What the auto-close path actually managed to do."""

    commented: bool
    closed: bool
    errors: tuple = ()


class OutcomeStatus(str, Enum):
    APPROVED = "approved"
    SKIPPED = "skipped"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckOutcome:
    """
    Terminal result of one invocation.

    `reason` explains SKIPPED / CLOSED / FAILED; for APPROVED it names the
    approver. `remediation` is only set on CLOSED outcomes, after the
    pull request has been commented on and closed.
    """

    status: OutcomeStatus
    reason: str = ""
    remediation: Optional[RemediationResult] = None

    @classmethod
    def approved(cls, reason: str = "") -> "CheckOutcome":
        return cls(OutcomeStatus.APPROVED, reason)

    @classmethod
    def skipped(cls, reason: str) -> "CheckOutcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def closed(cls, reason: str) -> "CheckOutcome":
        return cls(OutcomeStatus.CLOSED, reason)

    @classmethod
    def failed(cls, reason: str) -> "CheckOutcome":
        return cls(OutcomeStatus.FAILED, reason)

    @property
    def is_failure(self) -> bool:
        return self.status is OutcomeStatus.FAILED
