"""
Error taxonomy — PR Approval Gate

Every failure the pipeline can hit is one of these types. The split that
matters is which ones close the pull request:

    ApprovalReferenceError, PolicyViolation
        Confirmed, author-visible violations. The pull request is commented
        on and closed.

    ConfigError, TransportError, ApiStatusError, IntegrityError
        Infrastructure or data anomalies. Reported as a failed run; the pull
        request is left untouched.
"""

from typing import Optional


class ApprovalGateError(Exception):
    """Base class for all errors raised by the approval pipeline."""


class ConfigError(ApprovalGateError):
    """Bad templates, missing token, unreadable event payload."""


class TransportError(ApprovalGateError):
    """Network-level failure talking to the GitHub API (includes timeouts)."""


class ApiStatusError(ApprovalGateError):
    """Unexpected non-2xx status from an endpoint the pipeline depends on."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class IntegrityError(ApprovalGateError):
    """The API returned data that is structurally incomplete (e.g. no author)."""


class PolicyViolation(ApprovalGateError):
    """Comment missing, issue closed, wrong phrase, under-privileged approver."""


# ---------------------------------------------------------------------------
# REFERENCE ERRORS
# ---------------------------------------------------------------------------
# Raised by stage 2 when the pull request body does not carry a usable
# approval reference. All three close the pull request.
# ---------------------------------------------------------------------------


class ApprovalReferenceError(ApprovalGateError):
    """No valid approval reference is present in the pull request body."""


class ReferenceNotFound(ApprovalReferenceError):
    pass


class MalformedReferenceURL(ApprovalReferenceError):
    def __init__(self, message: str, url_text: str = ""):
        super().__init__(message)
        self.url_text = url_text


class ReferenceCrossRepository(ApprovalReferenceError):
    def __init__(self, message: str, expected: str, actual: str):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
