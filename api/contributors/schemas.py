"""
Pydantic schemas for the contributors feed.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class NamedContributor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    id: int | str
    avatar_url: str | None = None
    html_url: str | None = None
    contributions: int = 0


class AnonymousContributor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    contributions: int = 0
    type: Literal["Anonymous"] = "Anonymous"


Contributor = NamedContributor | AnonymousContributor


def parse_contributor(raw: dict[str, Any]) -> Contributor:
    """
    GitHub marks anonymous entries with `type: "Anonymous"`; everything else
    (`User`, `Bot`, `Organization`) carries a login and a stable id.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"Contributor record must be an object, got {type(raw).__name__}.")
    if raw.get("type") == "Anonymous":
        return AnonymousContributor.model_validate(raw)
    return NamedContributor.model_validate(raw)


class FeedItem(BaseModel):
    title: str
    description: str
    link: str | None = None
    guid: str


class Feed(BaseModel):
    title: str
    link: str
    description: str
    item: list[FeedItem]
