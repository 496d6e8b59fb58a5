"""
Contributors feed service.

This file contains logic that is independent of FastAPI's routing layer:
- fetch the first contributors page from GitHub
- resolve `Link` pagination and fetch the remaining pages in parallel
- sort by contribution count and map records to feed items
"""

from __future__ import annotations

import asyncio
import logging
from html import escape
from typing import Iterable

import httpx
from fastapi import HTTPException, status
from pydantic import ValidationError

from core import github
from core.settings import GitHubSettings

from . import pagination
from .schemas import AnonymousContributor, Contributor, Feed, FeedItem, NamedContributor, parse_contributor

logger = logging.getLogger(__name__)


class PaginationError(github.GitHubError):
    pass


def _raise_for_pagination(result: pagination.PaginationResult) -> pagination.PageLinks | None:
    if isinstance(result, pagination.MalformedPaginationLink):
        raise PaginationError(f"Malformed pagination link ({result.reason}): {result.link[:200]}")
    if isinstance(result, pagination.NoPaginationLink):
        return None
    return result


def parse_page(page: github.ContributorPage) -> list[Contributor]:
    """
    Parse one page of raw records. A record we cannot read fails the page.
    """
    try:
        return [parse_contributor(raw) for raw in page.records]
    except (ValidationError, TypeError) as exc:
        logger.warning("github_record_invalid url=%s error=%s", page.url, exc)
        raise github.GitHubError(
            "GitHub returned an unexpected contributor record.",
            url=page.url,
        ) from exc


async def fetch_remaining_pages(
    client: httpx.AsyncClient,
    links: pagination.PageLinks,
    *,
    headers: dict[str, str],
    into: list[Contributor],
    max_concurrency: int = 0,
) -> int:
    """
    Fetch pages 2..N concurrently and append each page to `into` as it lands.

    Append order follows completion, not page number; callers sort afterwards.
    If any page fails, the rest are cancelled and the error propagates.
    Returns the number of extra pages fetched.
    """
    pages = list(links.remaining_pages())
    if not pages:
        return 0

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def fetch_one(page: int) -> None:
        url = links.page_url(page)
        if semaphore is None:
            result = await github.fetch_page(client, url, headers=headers)
        else:
            async with semaphore:
                result = await github.fetch_page(client, url, headers=headers)
        into.extend(parse_page(result))

    tasks = [asyncio.ensure_future(fetch_one(page)) for page in pages]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return len(pages)


def sort_contributors(contributors: Iterable[Contributor], *, order: str | None = None) -> list[Contributor]:
    """
    Ascending by contributions, then reversed unless `order == "asc"`.
    """
    ordered = sorted(contributors, key=lambda c: c.contributions)
    if order != "asc":
        ordered.reverse()
    return ordered


def to_feed_item(contributor: Contributor) -> FeedItem:
    if isinstance(contributor, AnonymousContributor):
        name = contributor.name or ""
        return FeedItem(
            title=f"Contributor: {name}",
            description=(
                "<p>Anonymous contributor</p>"
                f"<p>Name: {escape(name)}</p>"
                f"<p>E-mail: {escape(contributor.email or '')}</p>"
                f"<p>Contributions: {contributor.contributions}</p>"
            ),
            guid=f"anon-{name}",
        )

    if isinstance(contributor, NamedContributor):
        html_url = contributor.html_url or ""
        return FeedItem(
            title=f"Contributor: {contributor.login}",
            description=(
                f'<img src="{escape(contributor.avatar_url or "")}"></img>'
                f'<p><a href="{escape(html_url)}">{escape(contributor.login)}</a></p>'
                f"<p>Contributions: {contributor.contributions}</p>"
            ),
            link=html_url or None,
            guid=str(contributor.id),
        )

    raise TypeError(f"Unsupported contributor type: {type(contributor).__name__}")


def build_feed(user: str, repo: str, contributors: Iterable[Contributor], *, order: str | None = None) -> Feed:
    return Feed(
        title=f"{user}/{repo} Contributors",
        link=f"https://github.com/{user}/{repo}/graphs/contributors",
        description=f"New contributors for {user}/{repo}",
        item=[to_feed_item(c) for c in sort_contributors(contributors, order=order)],
    )


async def collect_contributors(
    client: httpx.AsyncClient,
    user: str,
    repo: str,
    *,
    anon: bool,
    settings: GitHubSettings,
) -> tuple[list[Contributor], int]:
    """
    Fetch every contributors page for a repository.

    Returns the parsed records (unordered across pages) and the page count.
    """
    headers = github.auth_headers(settings.access_token)
    first = await github.fetch_page(
        client,
        github.contributors_url(user, repo, anon=anon, api_base_url=settings.api_base_url),
        headers=headers,
    )
    contributors = parse_page(first)

    page_count = 1
    links = _raise_for_pagination(pagination.resolve_pages(first.link_header))
    if links is not None and links.has_more_pages:
        page_count += await fetch_remaining_pages(
            client,
            links,
            headers=headers,
            into=contributors,
            max_concurrency=settings.max_concurrency,
        )

    return contributors, page_count


async def contributors_feed(
    user: str,
    repo: str,
    *,
    order: str | None = None,
    anon: bool = False,
    settings: GitHubSettings,
    client: httpx.AsyncClient | None = None,
) -> Feed:
    """
    Build the contributors feed for `user/repo`.

    This is what the FastAPI router should call. Any upstream failure,
    including a malformed pagination link, aborts the whole feed.
    """
    try:
        if client is not None:
            contributors, page_count = await collect_contributors(
                client, user, repo, anon=anon, settings=settings
            )
        else:
            async with httpx.AsyncClient(timeout=settings.timeout_s) as own_client:
                contributors, page_count = await collect_contributors(
                    own_client, user, repo, anon=anon, settings=settings
                )
    except PaginationError as exc:
        logger.error("contributors_pagination_malformed user=%s repo=%s error=%s", user, repo, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="GitHub returned a malformed pagination link.",
        ) from exc
    except github.GitHubError as exc:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Repository not found.") from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"GitHub contributors request failed: {str(exc)[:300]}",
        ) from exc

    feed = build_feed(user, repo, contributors, order=order)
    logger.info(
        "contributors_feed_built user=%s repo=%s pages=%s items=%s order=%s anon=%s",
        user,
        repo,
        page_count,
        len(feed.item),
        "asc" if order == "asc" else "desc",
        anon,
    )
    return feed
