"""
Stage 3: Verify Approval — PR Approval Gate

PURPOSE:
    The central check. Decides whether the pull request is backed by a
    maintainer's approval comment on an open issue in the same repository.

    Steps, each of which can end the run:

        1. Contributor gate (optional)      -> SKIPPED
        2. Extract reference from PR body   -> CLOSED on any reference error
        3. Fetch the approval comment       -> CLOSED on 404, FAILED on other errors
        4. Fetch the comment's issue        -> FAILED on error, CLOSED if not open
        5. Check the approval phrase        -> CLOSED if absent
        6. Resolve the comment author       -> FAILED if missing
        7. Check the author's permission    -> FAILED on error, CLOSED if < write
        8. All passed                       -> APPROVED

CALLED BY:
    approval_pipeline_main.run_approval_check()

DEPENDS ON:
    - stage_1_contributor_gate, stage_2_extract_reference
    - GET /repos/{o}/{r}/issues/comments/{id}
    - GET {comment.issue_url}
    - GET /repos/{o}/{r}/collaborators/{user}/permission

ERROR MAPPING:
    Each step raises a typed error from errors.py. verify_approval() is the
    single place that maps them to a CheckOutcome:

        ApprovalReferenceError, PolicyViolation           -> CLOSED
        TransportError, ApiStatusError, IntegrityError    -> FAILED

    Only CLOSED triggers stage 4. An API hiccup must never close a
    contributor's pull request.
"""

import logging

from pr_approval_agent.approval_config import ApprovalConfig
from pr_approval_agent.errors import (
    ApiStatusError,
    ApprovalReferenceError,
    IntegrityError,
    PolicyViolation,
    TransportError,
)
from pr_approval_agent.github_client import GitHubAPI
from pr_approval_agent.models import (
    ApprovalReference,
    CheckOutcome,
    Comment,
    Issue,
    PermissionLevel,
    PullRequestContext,
)
from pr_approval_agent.stage_1_contributor_gate import is_past_contributor
from pr_approval_agent.stage_2_extract_reference import extract_approval_reference

logger = logging.getLogger(__name__)


def verify_approval(
    gh: GitHubAPI,
    pr: PullRequestContext,
    cfg: ApprovalConfig,
) -> CheckOutcome:
    """
    Run steps 1-8 for one pull request and return the terminal outcome.

    This is the ONLY public function in this file. It never raises for the
    error types listed in the module docstring.
    """
    logger.info("Verifying PR #%d by @%s in %s", pr.number, pr.author, pr.full_name)

    try:
        if cfg.exclude_past_contributors:
            logger.info("exclude_past_contributors is enabled. Checking contributor list")
            if is_past_contributor(gh, pr.author):
                return CheckOutcome.skipped(
                    f"@{pr.author} is a past contributor. Skipping approval check."
                )
            logger.info("@%s is not a past contributor. Continuing with approval check.", pr.author)

        reference = extract_approval_reference(pr.body, cfg.reference_template, pr.owner, pr.repo)
        logger.info("Found comment URL: %s", reference.url)

        comment = _fetch_comment(gh, reference)
        _require_open_issue(gh, comment)
        _require_approval_phrase(comment, cfg.expected_phrase(pr.author))
        approver = _require_author(comment)
        level = _require_privileged_role(gh, approver)

    except (ApprovalReferenceError, PolicyViolation) as e:
        return CheckOutcome.closed(str(e))
    except (TransportError, ApiStatusError, IntegrityError) as e:
        return CheckOutcome.failed(str(e))

    return CheckOutcome.approved(
        f"PR #{pr.number} has valid approval from @{approver} ({level.value})."
    )


# ---------------------------------------------------------------------------
# STEPS
# ---------------------------------------------------------------------------


def _fetch_comment(gh: GitHubAPI, reference: ApprovalReference) -> Comment:
    resp = gh.get(f"issues/comments/{reference.comment_id}")

    if resp.status == 404:
        raise PolicyViolation(
            f"Approval comment not found: comment {reference.comment_id} does not exist."
        )
    if resp.status != 200:
        raise ApiStatusError(
            f"GitHub API returned status {resp.status} while fetching comment.",
            status=resp.status,
        )
    if not isinstance(resp.body, dict) or not resp.body:
        raise PolicyViolation(
            f"Approval comment not found: comment {reference.comment_id} returned no data."
        )
    return Comment.from_api(resp.body)


def _require_open_issue(gh: GitHubAPI, comment: Comment) -> Issue:
    if not comment.issue_url:
        raise IntegrityError("The referenced approval comment has no parent issue URL.")

    resp = gh.get(comment.issue_url)
    if resp.status != 200 or not isinstance(resp.body, dict) or not resp.body:
        raise ApiStatusError(f"error fetching issue (status {resp.status}).", status=resp.status)

    issue = Issue.from_api(resp.body)
    if not issue.is_open:
        raise PolicyViolation(
            f"Approval issue closed: issue #{issue.number} behind the referenced "
            "approval comment is no longer open."
        )
    return issue


def _require_approval_phrase(comment: Comment, expected: str) -> None:
    if expected not in comment.body:
        raise PolicyViolation(
            f'Approval phrase not found: "{expected}" does not appear in the referenced comment.'
        )


def _require_author(comment: Comment) -> str:
    if not comment.author:
        raise IntegrityError("The referenced approval comment does not have a valid author.")
    return comment.author


def _require_privileged_role(gh: GitHubAPI, approver: str) -> PermissionLevel:
    resp = gh.get(f"collaborators/{approver}/permission")
    if resp.status != 200 or not isinstance(resp.body, dict) or not resp.body:
        raise ApiStatusError(
            f"error checking permissions for @{approver} (status {resp.status}).",
            status=resp.status,
        )

    raw = resp.body.get("permission")
    level = PermissionLevel.parse(raw)
    if level is None or not level.is_privileged:
        raise PolicyViolation(
            f"Approver lacks sufficient role: @{approver} has '{raw or 'none'}' access "
            "to this repository; write or admin is required."
        )
    return level
