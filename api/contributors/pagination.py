"""
`Link` header pagination for GitHub list endpoints.

GitHub sends something like:

    <https://api.github.com/repositories/1/contributors?page=2>; rel="next",
    <https://api.github.com/repositories/1/contributors?page=5>; rel="last"

Only the `last` relation matters here: it tells us how many pages exist and
gives a URL we can reuse for every other page by swapping `page=`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import httpx

_URL_RE = re.compile(r"<([^>]*)>")


@dataclass(frozen=True)
class PageLinks:
    page_count: int
    base_url: str

    @property
    def has_more_pages(self) -> bool:
        return self.page_count > 1

    def page_url(self, page: int) -> str:
        return str(httpx.URL(self.base_url).copy_set_param("page", page))

    def remaining_pages(self) -> range:
        return range(2, self.page_count + 1)


@dataclass(frozen=True)
class NoPaginationLink:
    """The first page is the only page."""


@dataclass(frozen=True)
class MalformedPaginationLink:
    link: str
    reason: str


PaginationResult = PageLinks | NoPaginationLink | MalformedPaginationLink


def _last_relation(link_header: str) -> str | None:
    for part in link_header.split(","):
        if '"last"' in part:
            return part.strip()
    return None


def resolve_pages(link_header: str | None) -> PaginationResult:
    """
    Work out the total page count from a `Link` header.

    A missing header or a header without `rel="last"` is the normal
    single-page case. A `last` relation we cannot read is reported as
    malformed so the caller can fail instead of truncating the result.
    """
    if not link_header or not link_header.strip():
        return NoPaginationLink()

    last = _last_relation(link_header)
    if last is None:
        return NoPaginationLink()

    match = _URL_RE.search(last)
    if match is None or not match.group(1).strip():
        return MalformedPaginationLink(link=last, reason="missing <url> in last relation")

    try:
        url = httpx.URL(match.group(1).strip())
    except httpx.InvalidURL:
        return MalformedPaginationLink(link=last, reason="invalid url in last relation")

    raw_page = url.params.get("page")
    if raw_page is None:
        return MalformedPaginationLink(link=last, reason="no page parameter in last relation")
    if not raw_page.isdigit() or int(raw_page) < 1:
        return MalformedPaginationLink(link=last, reason=f"invalid page number {raw_page!r}")

    return PageLinks(page_count=int(raw_page), base_url=str(url.copy_remove_param("page")))
