"""
Stage 4: Close Pull Request — PR Approval Gate

PURPOSE:
    Remediation for a CLOSED outcome. Posts the configured auto-close message
    plus the specific reason as a comment on the pull request, then sets the
    pull request state to closed.

CALLED BY:
    approval_pipeline_main.run_approval_check() — only for CLOSED outcomes.

DEPENDS ON:
    - POST  /repos/{owner}/{repo}/issues/{number}/comments
    - PATCH /repos/{owner}/{repo}/pulls/{number}

BEHAVIOUR:
    Best effort. The comment and the close are attempted independently; a
    failure in either is logged and recorded in the returned
    RemediationResult, never raised. The rejection decision has already been
    made by stage 3 at this point.
"""

import logging

from pr_approval_agent.errors import TransportError
from pr_approval_agent.github_client import GitHubAPI
from pr_approval_agent.models import RemediationResult

logger = logging.getLogger(__name__)


def close_pull_request(
    gh: GitHubAPI,
    pr_number: int,
    autoclose_message: str,
    reason: str,
) -> RemediationResult:
    """
    Comment on and close pull request `pr_number`.

    This is the ONLY public function in this file.
    """
    logger.info(reason)
    errors = []

    comment_body = _format_close_comment(autoclose_message, reason)
    commented = _attempt(
        gh, "POST", f"issues/{pr_number}/comments", {"body": comment_body},
        f"posting auto-close comment on PR #{pr_number}", errors,
    )
    closed = _attempt(
        gh, "PATCH", f"pulls/{pr_number}", {"state": "closed"},
        f"closing PR #{pr_number}", errors,
    )

    if closed:
        logger.info("Closed PR #%d.", pr_number)
    return RemediationResult(commented=commented, closed=closed, errors=tuple(errors))


def _attempt(gh: GitHubAPI, method: str, path: str, payload: dict, action: str, errors: list) -> bool:
    try:
        resp = gh.send(method, path, payload)
    except TransportError as e:
        message = f"error {action}: {e}"
        logger.warning(message)
        errors.append(message)
        return False

    if not resp.ok:
        message = f"error {action} (status {resp.status})."
        logger.warning(message)
        errors.append(message)
        return False
    return True


def _format_close_comment(autoclose_message: str, reason: str) -> str:
    return f"{autoclose_message}\n\n**Reason:** {reason}"
