"""Pytest configuration and fixtures.

GitHub is never called for real: `github_api` installs a respx router that
serves contributor pages from an in-memory mapping and emits `Link`
headers the way GitHub does.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio
import respx
from httpx import ASGITransport, AsyncClient

from core.settings import GitHubSettings
from tests.helpers import API, link_header


class FakeGitHub:
    """Serves `pages[n]` for page n; page 1 is the repo contributors URL."""

    def __init__(self, pages: dict[int, list[dict[str, Any]]], *, query: str = "") -> None:
        self.pages = pages
        self.query = query
        self.failures: dict[int, int] = {}
        self.requests: list[httpx.Request] = []

    def fail(self, page: int, status_code: int) -> None:
        self.failures[page] = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.startswith("/repos/"):
            page = 1
        else:
            page = int(request.url.params.get("page", "1"))

        if page in self.failures:
            return httpx.Response(self.failures[page], json={"message": "boom"})
        if page not in self.pages:
            return httpx.Response(404, json={"message": "Not Found"})

        last = max(self.pages)
        headers = {}
        link = link_header(page, last, query=self.query)
        if link:
            headers["Link"] = link
        return httpx.Response(200, json=self.pages[page], headers=headers)

    def requested_pages(self) -> list[int]:
        out = []
        for request in self.requests:
            if request.url.path.startswith("/repos/"):
                out.append(1)
            else:
                out.append(int(request.url.params["page"]))
        return out


@pytest.fixture
def settings() -> GitHubSettings:
    return GitHubSettings(access_token=None, api_base_url=API, timeout_s=5.0)


@pytest.fixture(autouse=True)
def _clean_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GITHUB_ACCESS_TOKEN",
        "GITHUB_TOKEN",
        "GITHUB_API_BASE_URL",
        "GITHUB_TIMEOUT_S",
        "GITHUB_MAX_CONCURRENCY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def github_api() -> Callable[..., FakeGitHub]:
    with respx.mock(assert_all_called=False) as router:

        def install(pages: dict[int, list[dict[str, Any]]], *, query: str = "") -> FakeGitHub:
            fake = FakeGitHub(pages, query=query)
            router.route(host="api.github.com").mock(side_effect=fake)
            return fake

        yield install


@pytest_asyncio.fixture
async def client():
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
