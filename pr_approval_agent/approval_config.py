"""
Approval Config — PR Approval Gate

PURPOSE:
    Holds the immutable ApprovalConfig value that every stage receives, the
    built-in defaults, and the loader that builds it from GitHub Actions
    inputs.

CONFIGURATION:
    GitHub Actions exposes each `with:` input of a step as an environment
    variable named INPUT_<NAME> (upper-cased). The inputs read here are:

        github_token               required, bearer credential for the API
        approval_str               default "{user} PR approved"
        reference_str              default "Approval: {url}"
        pr_autoclose_message       default DEFAULT_AUTOCLOSE_MESSAGE
        exclude_past_contributors  "true" to skip checks for past contributors
        force_validate_owner_prs   "true" to check the repo owner's PRs too
        min_diff_files             only check PRs touching at least N files
        min_diff_lines             only check PRs changing at least N lines

    GITHUB_API_URL is honoured for GitHub Enterprise installs.
"""

import os
from dataclasses import dataclass
from typing import Optional

from pr_approval_agent.errors import ConfigError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_APPROVAL_TEMPLATE = "{user} PR approved"
DEFAULT_REFERENCE_TEMPLATE = "Approval: {url}"
DEFAULT_AUTOCLOSE_MESSAGE = (
    "This PR was automatically closed because the reference to approval (issue) "
    "could not be found. Please open an issue first, get approval from the "
    "maintainer, and reference the approval comment URL in your PR body in the "
    "format `Approval: {url}`."
)

USER_PLACEHOLDER = "{user}"
URL_PLACEHOLDER = "{url}"


@dataclass(frozen=True)
class ApprovalConfig:
    approval_template: str = DEFAULT_APPROVAL_TEMPLATE
    reference_template: str = DEFAULT_REFERENCE_TEMPLATE
    autoclose_message: str = DEFAULT_AUTOCLOSE_MESSAGE
    exclude_past_contributors: bool = False
    force_validate_owner_prs: bool = False
    min_diff_files: int = 0
    min_diff_lines: int = 0

    def expected_phrase(self, author: str) -> str:
        """The approval text a maintainer must write for `author`."""
        return self.approval_template.replace(USER_PLACEHOLDER, f"@{author}")


def validate_config(cfg: ApprovalConfig) -> None:
    """Raise ConfigError if either template is missing its placeholder."""
    url_count = cfg.reference_template.count(URL_PLACEHOLDER)
    if url_count == 0:
        raise ConfigError("`reference_str` must contain the `{url}` placeholder.")
    if url_count > 1:
        raise ConfigError("`reference_str` must contain exactly one `{url}` placeholder.")

    if USER_PLACEHOLDER not in cfg.approval_template:
        raise ConfigError("`approval_str` must contain the `{user}` placeholder.")

    if cfg.min_diff_files < 0 or cfg.min_diff_lines < 0:
        raise ConfigError("`min_diff_files` and `min_diff_lines` must not be negative.")


def get_input(name: str, default: str = "", environ: Optional[dict] = None) -> str:
    """Read an Actions input. Empty values fall back to `default`."""
    env = os.environ if environ is None else environ
    value = env.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    return value or default


def load_config(environ: Optional[dict] = None) -> ApprovalConfig:
    """Build and validate an ApprovalConfig from INPUT_* variables."""
    cfg = ApprovalConfig(
        approval_template=get_input("approval_str", DEFAULT_APPROVAL_TEMPLATE, environ),
        reference_template=get_input("reference_str", DEFAULT_REFERENCE_TEMPLATE, environ),
        autoclose_message=get_input("pr_autoclose_message", DEFAULT_AUTOCLOSE_MESSAGE, environ),
        exclude_past_contributors=_parse_bool(get_input("exclude_past_contributors", "", environ)),
        force_validate_owner_prs=_parse_bool(get_input("force_validate_owner_prs", "", environ)),
        min_diff_files=_parse_count("min_diff_files", get_input("min_diff_files", "0", environ)),
        min_diff_lines=_parse_count("min_diff_lines", get_input("min_diff_lines", "0", environ)),
    )
    validate_config(cfg)
    return cfg


def load_token(environ: Optional[dict] = None) -> str:
    token = get_input("github_token", "", environ)
    if not token:
        raise ConfigError("github_token input is required.")
    return token


def load_api_url(environ: Optional[dict] = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")


def _parse_bool(value: str) -> bool:
    return value.lower() == "true"


def _parse_count(name: str, value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise ConfigError(f"`{name}` must be a whole number, got {value!r}.") from None
    if count < 0:
        raise ConfigError(f"`{name}` must not be negative, got {count}.")
    return count
