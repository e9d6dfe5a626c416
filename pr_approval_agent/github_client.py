"""
GitHub API Client — PR Approval Gate

PURPOSE:
    Thin wrapper around the GitHub REST API for the handful of calls the
    approval pipeline makes. It knows about authentication, the API version
    header, JSON bodies and Link-header pagination. It knows nothing about
    approvals.

DEPENDS ON:
    - requests (Session, Response.links for Link-header parsing)
    - The GITHUB_TOKEN provided to the action, which needs:
        issues:write         (post the auto-close comment)
        pull-requests:write  (close the pull request)
        contents:read        (contributors, collaborator permission)

FAILURE SEMANTICS:
    - Any requests.RequestException (connection reset, DNS, timeout) is
      re-raised as TransportError.
    - An absolute URL outside api_url raises IntegrityError; no request is
      made.
    - Non-2xx statuses are NOT raised. They come back inside ApiResponse and
      each caller decides what a 404 or a 500 means for its endpoint.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import requests

from pr_approval_agent.approval_config import DEFAULT_API_URL
from pr_approval_agent.errors import IntegrityError, TransportError

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"
DEFAULT_TIMEOUT_SECONDS = 30
MAX_PAGES = 100


@dataclass(frozen=True)
class ApiResponse:
    """Status, decoded JSON body (None for 204 / non-JSON) and headers."""

    status: int
    body: Any = None
    headers: dict = field(default_factory=dict)
    next_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class GitHubAPI:
    """
    Repository-scoped GitHub REST client.

    Paths are relative to /repos/{owner}/{repo} ("issues/comments/9").
    Absolute URLs are used as-is, which is how the comment's `issue_url`
    and pagination `next` links are followed, but only when they live under
    `api_url`. Anything else raises IntegrityError before the token is sent.

    Usable as a context manager; the underlying session is closed on exit.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.base_url = f"{self.api_url}/repos/{owner}/{repo}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        })

    def get(self, path: str) -> ApiResponse:
        """Single GET. Does not follow pagination."""
        return self._request("GET", path)

    def get_paged(self, path: str, max_pages: int = MAX_PAGES) -> Iterator[ApiResponse]:
        """
        Yield one ApiResponse per page, following rel="next" links.

        The walk ends when a page has no next link, when a page is not 2xx
        (that page is still yielded so the caller can see the status), or
        after `max_pages` pages. A TransportError mid-walk propagates out of
        the generator.
        """
        url: Optional[str] = path
        pages = 0
        while url and pages < max_pages:
            page = self._request("GET", url)
            pages += 1
            yield page
            if not page.ok:
                return
            url = page.next_url
        if url:
            logger.warning("Stopped following pagination for %s after %d pages", path, pages)

    def send(self, method: str, path: str, json_body: dict) -> ApiResponse:
        """POST / PATCH / PUT with a JSON payload."""
        return self._request(method, path, json_body=json_body)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "GitHubAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _url(self, path: str) -> str:
        if "://" not in path:
            return f"{self.base_url}/{path.lstrip('/')}"
        # The session carries the bearer token; never send it off the API host.
        if path == self.api_url or path.startswith(self.api_url + "/"):
            return path
        raise IntegrityError(f"Refusing to call a URL outside {self.api_url}: {path}")

    def _request(self, method: str, path: str, json_body: Optional[dict] = None) -> ApiResponse:
        url = self._url(path)
        try:
            resp = self.session.request(method, url, json=json_body, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"error calling GitHub API ({method} {url}): {e}") from e

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return ApiResponse(
            status=resp.status_code,
            body=_decode_body(resp),
            headers=dict(resp.headers),
            next_url=_next_link(resp),
        )


def _decode_body(resp: requests.Response) -> Any:
    if resp.status_code == 204 or not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def _next_link(resp: requests.Response) -> Optional[str]:
    """URL of the rel="next" page, or None if absent or unparseable."""
    try:
        links = resp.links
    except (ValueError, TypeError, AttributeError):
        return None
    next_link = links.get("next") if isinstance(links, dict) else None
    url = next_link.get("url") if isinstance(next_link, dict) else None
    return url or None
