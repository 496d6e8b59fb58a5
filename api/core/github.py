"""
GitHub REST API helpers.

Used endpoints:
- GET /repos/{owner}/{repo}/contributors  -> [{"login": ..., "contributions": ...}, ...]

Pagination is driven by the `Link` response header; see
`contributors/pagination.py`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# GitHub failures are explicit and separable from other runtime errors.
class GitHubError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


@dataclass(frozen=True)
class ContributorPage:
    url: str
    records: list[dict[str, Any]] = field(default_factory=list)
    link_header: str | None = None


def contributors_url(user: str, repo: str, *, anon: bool, api_base_url: str) -> str:
    """
    URL of the first contributors page. `anon=1` is only ever set here;
    later pages inherit whatever query the server puts in its `Link` header.
    """
    base = api_base_url.rstrip("/")
    return f"{base}/repos/{user}/{repo}/contributors?" + ("anon=1" if anon else "")


def auth_headers(access_token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    token = (access_token or "").strip()
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str],
) -> ContributorPage:
    """
    Fetch one page of contributor records. Single attempt, no retry.
    """
    try:
        resp = await client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("github_request_failed url=%s error=%s", url, exc)
        raise GitHubError(f"GitHub request failed: {exc}", url=url) from exc

    if not resp.is_success:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:300]
        logger.warning("github_request_failed url=%s status=%s", url, resp.status_code)
        raise GitHubError(
            f"GitHub contributors request failed: {resp.status_code} {body}",
            status_code=resp.status_code,
            url=url,
        )

    # An empty repository answers 204 with no body.
    if resp.status_code == 204 or not resp.content:
        return ContributorPage(url=url, records=[], link_header=resp.headers.get("link"))

    try:
        data: Any = resp.json()
    except ValueError as exc:
        raise GitHubError("GitHub returned a non-JSON contributors page.", url=url) from exc

    if not isinstance(data, list):
        raise GitHubError("GitHub returned an unexpected contributors payload.", url=url)

    return ContributorPage(url=url, records=data, link_header=resp.headers.get("link"))
