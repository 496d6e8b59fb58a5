"""
FastAPI router for the GitHub contributors feed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from core.settings import GitHubSettings, get_github_settings

from . import feed as feed_rendering
from . import service
from .schemas import Feed

router = APIRouter()

# GitHub owner/repo names: letters, digits, `-`, `_` and `.`.
NAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


@router.get("/github/contributors/{user}/{repo}", response_model=None)
@router.get("/github/contributors/{user}/{repo}/{order}", response_model=None)
@router.get("/github/contributors/{user}/{repo}/{order}/{anon}", response_model=None)
async def contributors(
    user: str = Path(..., min_length=1, max_length=100, pattern=NAME_PATTERN),
    repo: str = Path(..., min_length=1, max_length=100, pattern=NAME_PATTERN),
    order: str = "desc",
    anon: str | None = None,
    output_format: str = Query(default="json", alias="format", pattern="^(json|rss)$"),
    settings: GitHubSettings = Depends(get_github_settings),
) -> Feed | Response:
    """
    Repository contributors, most contributions first unless `order` is `asc`.

    `order` and `anon` come from the path when the longer routes match and
    from the query string otherwise. Any non-empty `anon` includes
    anonymous contributors.
    """
    result = await service.contributors_feed(
        user,
        repo,
        order=order,
        anon=bool(anon),
        settings=settings,
    )
    if output_format == "rss":
        return Response(content=feed_rendering.render_rss(result), media_type=feed_rendering.RSS_MEDIA_TYPE)
    return result
