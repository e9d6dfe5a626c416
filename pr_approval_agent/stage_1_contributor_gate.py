"""
Stage 1: Contributor Gate — PR Approval Gate

PURPOSE:
    Optional pre-check. When `exclude_past_contributors` is enabled, people
    who already appear in the repository's contributor roster do not need an
    approval reference; the remaining stages are skipped for them.

CALLED BY:
    stage_3_verify_approval.verify_approval() — only when the config flag
    is set.

DEPENDS ON:
    - GET /repos/{owner}/{repo}/contributors?per_page=100&page=N

BEHAVIOUR:
    This check is advisory. A non-2xx page, or a page whose body is not a
    list, ends the walk with False ("could not confirm"), which simply sends
    the pull request through full verification. Transport failures are not
    swallowed here; they propagate as TransportError.
"""

import logging

from pr_approval_agent.github_client import GitHubAPI

logger = logging.getLogger(__name__)

CONTRIBUTORS_PAGE_SIZE = 100


def is_past_contributor(gh: GitHubAPI, author: str) -> bool:
    """
    Return True if `author` (case-insensitive) is in the contributor roster.

    This is the ONLY public function in this file.
    """
    wanted = author.lower()
    path = f"contributors?per_page={CONTRIBUTORS_PAGE_SIZE}&page=1"

    for page_number, page in enumerate(gh.get_paged(path), start=1):
        if page.status != 200 or not isinstance(page.body, list):
            logger.info(
                "Contributor list page %d unavailable (status %s); treating @%s as new",
                page_number, page.status, author,
            )
            return False

        for contributor in page.body:
            if not isinstance(contributor, dict):
                continue
            login = contributor.get("login") or ""
            if login.lower() == wanted:
                logger.debug("Found @%s on contributor page %d", author, page_number)
                return True

    return False
