"""
Approval Pipeline Main — PR Approval Gate

PURPOSE:
    Entry point run by the GitHub Actions step on every pull request event.
    Wires the stages together for one pull request:

        config + event -> owner / diff-size pre-filters
        -> Stage 3 verify (uses Stages 1 and 2)
        -> Stage 4 close (only for CLOSED outcomes)

EXIT STATUS:
    0   approved, skipped, or closed (enforcement completed)
    1   failed (config error, API error, transport error, integrity error);
        the pull request is left untouched for a maintainer to look at

OUTPUTS:
    result   approved | skipped | closed | failed
    reason   human-readable explanation
"""

import dataclasses
import logging
import sys
from typing import Optional

from pr_approval_agent.action_io import (
    configure_logging,
    load_event,
    pull_request_from_event,
    report_failure,
    set_output,
)
from pr_approval_agent.approval_config import (
    ApprovalConfig,
    load_api_url,
    load_config,
    load_token,
    validate_config,
)
from pr_approval_agent.errors import ConfigError
from pr_approval_agent.github_client import GitHubAPI
from pr_approval_agent.models import CheckOutcome, OutcomeStatus, PullRequestContext
from pr_approval_agent.stage_3_verify_approval import verify_approval
from pr_approval_agent.stage_4_close_pull_request import close_pull_request

logger = logging.getLogger(__name__)


def run_approval_check(
    pr: PullRequestContext,
    cfg: ApprovalConfig,
    gh: GitHubAPI,
) -> CheckOutcome:
    """
    Run the full check for one pull request and return its outcome.

    Closes the pull request (stage 4) when the outcome is CLOSED; the
    RemediationResult is attached to the returned outcome.
    """
    try:
        validate_config(cfg)
    except ConfigError as e:
        return CheckOutcome.failed(str(e))

    skip_reason = _pre_filter(pr, cfg)
    if skip_reason:
        return CheckOutcome.skipped(skip_reason)

    outcome = verify_approval(gh, pr, cfg)

    if outcome.status is OutcomeStatus.CLOSED:
        remediation = close_pull_request(gh, pr.number, cfg.autoclose_message, outcome.reason)
        outcome = dataclasses.replace(outcome, remediation=remediation)

    return outcome


def _pre_filter(pr: PullRequestContext, cfg: ApprovalConfig) -> Optional[str]:
    """Reason the checks do not apply to this pull request, or None."""
    if pr.author == pr.owner and not cfg.force_validate_owner_prs:
        return "PR author is the same as the repo owner. Skipping approval checks."

    if cfg.min_diff_files and pr.changed_files is not None and pr.changed_files < cfg.min_diff_files:
        return (
            f"PR changes {pr.changed_files} file(s), below min_diff_files="
            f"{cfg.min_diff_files}. Skipping approval checks."
        )

    if cfg.min_diff_lines and pr.changed_lines is not None and pr.changed_lines < cfg.min_diff_lines:
        return (
            f"PR changes {pr.changed_lines} line(s), below min_diff_lines="
            f"{cfg.min_diff_lines}. Skipping approval checks."
        )

    return None


def main(environ: Optional[dict] = None) -> int:
    configure_logging(environ)

    try:
        event = load_event(environ)
        pr = pull_request_from_event(event)
        token = load_token(environ)
        cfg = load_config(environ)
    except ConfigError as e:
        report_failure(str(e))
        set_output("result", OutcomeStatus.FAILED.value, environ)
        set_output("reason", str(e), environ)
        return 1

    with GitHubAPI(pr.owner, pr.repo, token, api_url=load_api_url(environ)) as gh:
        outcome = run_approval_check(pr, cfg, gh)

    if outcome.is_failure:
        report_failure(outcome.reason)
    else:
        logger.info(outcome.reason)
    if outcome.remediation and outcome.remediation.errors:
        logger.warning("Auto-close was incomplete: %s", "; ".join(outcome.remediation.errors))

    set_output("result", outcome.status.value, environ)
    set_output("reason", outcome.reason, environ)
    return 1 if outcome.is_failure else 0


if __name__ == "__main__":
    sys.exit(main())
