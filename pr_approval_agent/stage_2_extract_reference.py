"""
Stage 2: Extract Approval Reference — PR Approval Gate

PURPOSE:
    Find the approval-comment URL the contributor embedded in the pull request
    body and turn it into an ApprovalReference. Pure string work, zero API
    calls.

CALLED BY:
    stage_3_verify_approval.verify_approval()

FORMAT:
    The configured reference template (default "Approval: {url}") is split on
    its {url} placeholder. The text before and after the placeholder must
    appear literally in the body around a URL of exactly this shape:

        https://github.com/{owner}/{repo}/issues/{issue}#issuecomment-{id}

    Template text is escaped, so characters like "(" or "*" in the template
    are matched as themselves.

ERRORS:
    ReferenceNotFound        template text not present around any URL
    MalformedReferenceURL    template text present, but the URL in it is not
                             an issue comment URL
    ReferenceCrossRepository URL points at a different owner/repo
"""

import re

from pr_approval_agent.approval_config import URL_PLACEHOLDER
from pr_approval_agent.errors import (
    MalformedReferenceURL,
    ReferenceCrossRepository,
    ReferenceNotFound,
)
from pr_approval_agent.models import ApprovalReference

_COMMENT_URL = r"https://github\.com/([^/]+)/([^/]+)/issues/(\d+)#issuecomment-(\d+)"
COMMENT_URL_RE = re.compile(rf"^{_COMMENT_URL}$")

# Same shape without capture groups, for embedding between template literals.
_COMMENT_URL_UNGROUPED = r"https://github\.com/[^/]+/[^/]+/issues/\d+#issuecomment-\d+"

# A well-formed comment URL with trailing text: the template suffix is what
# is missing, not the URL.
_COMMENT_URL_PREFIX_RE = re.compile(_COMMENT_URL_UNGROUPED)


def extract_approval_reference(
    pr_body: str,
    reference_template: str,
    owner: str,
    repo: str,
) -> ApprovalReference:
    """
    Locate and parse the approval reference in `pr_body`.

    This is the ONLY public function in this file.

    Args:
        pr_body:            Raw Markdown body of the pull request.
        reference_template: Template with one {url} placeholder.
        owner, repo:        The pull request's own repository. Compared
                            case-insensitively with the referenced one.

    Returns:
        ApprovalReference with lowercased owner/repo.
    """
    prefix, suffix = _split_template(reference_template)
    body = pr_body or ""

    # -----------------------------------------------------------------------
    # STEP 1: Template text around a well-formed comment URL
    # -----------------------------------------------------------------------

    strict = re.compile(
        f"{re.escape(prefix)}({_COMMENT_URL_UNGROUPED}){re.escape(suffix)}"
    )
    match = strict.search(body)

    if not match:
        # Template text around something that is a URL but not a comment URL
        # gets a more useful message than "not found". The token must end at
        # whitespace, so a suffix like "." or "/" cannot match inside a URL.
        loose = re.compile(f"{re.escape(prefix)}(https?://\\S+){re.escape(suffix)}(?=\\s|$)")
        bad = loose.search(body)
        if bad and not _COMMENT_URL_PREFIX_RE.match(bad.group(1)):
            raise MalformedReferenceURL(
                f"The referenced URL is not the correct GitHub issue comment URL: {bad.group(1)}",
                url_text=bad.group(1),
            )
        raise ReferenceNotFound("No approval comment URL found in the PR body.")

    # -----------------------------------------------------------------------
    # STEP 2: Parse the URL into its pieces
    # -----------------------------------------------------------------------

    comment_url = match.group(1)
    parts = COMMENT_URL_RE.match(comment_url)
    if not parts:
        raise MalformedReferenceURL(
            f"The referenced URL is not the correct GitHub issue comment URL: {comment_url}",
            url_text=comment_url,
        )

    # -----------------------------------------------------------------------
    # STEP 3: Must point at this repository
    # -----------------------------------------------------------------------

    ref_owner, ref_repo = parts.group(1).lower(), parts.group(2).lower()
    expected = f"{owner.lower()}/{repo.lower()}"
    actual = f"{parts.group(1)}/{parts.group(2)}"
    if f"{ref_owner}/{ref_repo}" != expected:
        raise ReferenceCrossRepository(
            f"The referenced comment URL should belong to {expected}, not {actual}.",
            expected=expected,
            actual=actual,
        )

    return ApprovalReference(
        owner=ref_owner,
        repo=ref_repo,
        issue_number=int(parts.group(3)),
        comment_id=int(parts.group(4)),
        url=comment_url,
    )


def _split_template(reference_template: str) -> tuple:
    """Literal text before and after the {url} placeholder."""
    prefix, _, suffix = reference_template.partition(URL_PLACEHOLDER)
    return prefix, suffix
