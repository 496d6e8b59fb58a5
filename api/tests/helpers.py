"""Builders for GitHub contributor payloads and `Link` headers used across tests."""

from __future__ import annotations

import zlib
from typing import Any

API = "https://api.github.com"
PAGED_BASE = f"{API}/repositories/1/contributors"


def named(login: str, contributions: int, *, user_id: int | None = None) -> dict[str, Any]:
    return {
        "login": login,
        "id": user_id if user_id is not None else zlib.crc32(login.encode()),
        "avatar_url": f"https://avatars.githubusercontent.com/u/{login}?v=4",
        "html_url": f"https://github.com/{login}",
        "type": "User",
        "contributions": contributions,
    }


def anonymous(name: str, contributions: int, *, email: str | None = None) -> dict[str, Any]:
    return {
        "name": name,
        "email": email or f"{name.lower()}@example.com",
        "type": "Anonymous",
        "contributions": contributions,
    }


def link_header(page: int, last: int, *, query: str = "") -> str:
    prefix = f"{PAGED_BASE}?{query}&" if query else f"{PAGED_BASE}?"
    parts = []
    if page < last:
        parts.append(f'<{prefix}page={page + 1}>; rel="next"')
        parts.append(f'<{prefix}page={last}>; rel="last"')
    if page > 1:
        parts.append(f'<{prefix}page=1>; rel="first"')
        parts.append(f'<{prefix}page={page - 1}>; rel="prev"')
    return ", ".join(parts)


