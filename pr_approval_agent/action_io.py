"""
Action I/O — PR Approval Gate

The plumbing between the GitHub Actions runner and the pipeline: reading the
event payload, writing step outputs, and the diagnostics sink (log lines plus
`::error::` workflow commands).
"""

import json
import logging
import os
import sys
from typing import Optional

from pr_approval_agent.errors import ConfigError
from pr_approval_agent.models import PullRequestContext

logger = logging.getLogger(__name__)


def configure_logging(environ: Optional[dict] = None) -> None:
    """Plain message lines on stdout; DEBUG when the runner has debug logging on."""
    env = os.environ if environ is None else environ
    level = logging.DEBUG if env.get("RUNNER_DEBUG") == "1" else logging.INFO
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout, force=True)
    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# EVENT SOURCE
# ---------------------------------------------------------------------------


def load_event(environ: Optional[dict] = None) -> dict:
    env = os.environ if environ is None else environ
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path:
        raise ConfigError("Missing GITHUB_EVENT_PATH.")

    try:
        with open(event_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read GitHub event payload: {e}") from e


def pull_request_from_event(event: dict) -> PullRequestContext:
    """
    Build the PullRequestContext from a `pull_request` / `pull_request_target`
    event payload.
    """
    pr = event.get("pull_request")
    if not isinstance(pr, dict):
        raise ConfigError("This action must be triggered by the `pull_request` event.")

    try:
        base_repo = pr["base"]["repo"]
        owner = base_repo["owner"]["login"]
        repo = base_repo["name"]
        author = pr["user"]["login"]
        number = int(pr["number"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Pull request payload is missing a required field: {e}") from e

    changed_lines = None
    if isinstance(pr.get("additions"), int) and isinstance(pr.get("deletions"), int):
        changed_lines = pr["additions"] + pr["deletions"]
    changed_files = pr.get("changed_files") if isinstance(pr.get("changed_files"), int) else None

    return PullRequestContext(
        owner=owner.lower(),
        repo=repo.lower(),
        number=number,
        author=author.lower(),
        body=pr.get("body") or "",
        changed_files=changed_files,
        changed_lines=changed_lines,
    )


# ---------------------------------------------------------------------------
# DIAGNOSTICS SINK
# ---------------------------------------------------------------------------


def report_failure(message: str) -> None:
    """Log `message` and emit it as an Actions error annotation."""
    logger.error(message)
    print(f"::error::{escape_workflow_command(message)}", flush=True)


def escape_workflow_command(value: str) -> str:
    if value is None:
        return ""
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(name: str, value: str, environ: Optional[dict] = None) -> None:
    """Append `name=value` to $GITHUB_OUTPUT. No-op outside the runner."""
    env = os.environ if environ is None else environ
    output_path = env.get("GITHUB_OUTPUT")
    if not output_path:
        return
    single_line = " ".join(str(value).splitlines())
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}={single_line}\n")
