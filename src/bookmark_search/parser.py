"""Parse Twitter API v2 bookmark pages into model objects.

A relayed page looks like:
    {
        "data": [{"id", "text", "author_id", "created_at", "context_annotations"}],
        "includes": {"users": [{"id", "name", "username", "verified", ...}]},
        "meta": {"next_token": "...", "result_count": 10}
    }

Only ``data`` is required. ``includes`` and ``meta`` may be missing entirely.
"""

import logging
from datetime import datetime

from .models import Author, Item, Page, PageMeta, Tag

logger = logging.getLogger(__name__)


def parse_page(response: dict) -> Page:
    """Decode one upstream response. The caller checks that ``data`` is a list."""
    items = parse_items(response.get("data") or [])
    includes = response.get("includes")
    users = includes.get("users") if isinstance(includes, dict) else None
    authors = parse_authors(users if isinstance(users, list) else [])
    return Page(items=items, authors=authors, meta=parse_meta(response.get("meta")))


def parse_meta(raw_meta: object) -> PageMeta | None:
    """Return None when the page carried no metadata object at all."""
    if not isinstance(raw_meta, dict):
        return None
    return PageMeta(
        next_token=raw_meta.get("next_token") or None,
        result_count=raw_meta.get("result_count"),
    )


def parse_items(raw_items: list[dict]) -> list[Item]:
    items = []
    for raw in raw_items:
        try:
            items.append(_parse_item(raw))
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed tweet %r: %s", raw, e)
    return items


def parse_authors(raw_users: list[dict]) -> list[Author]:
    authors = []
    for raw in raw_users:
        try:
            authors.append(
                Author(
                    id=raw["id"],
                    name=str(raw.get("name") or ""),
                    username=str(raw.get("username") or ""),
                    verified=bool(raw.get("verified", False)),
                    profile_image_url=raw.get("profile_image_url"),
                )
            )
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed user %r: %s", raw, e)
    return authors


def _parse_item(raw: dict) -> Item:
    tags = tuple(
        tag
        for tag in map(_parse_tag, raw.get("context_annotations") or [])
        if tag is not None
    )
    return Item(
        id=raw["id"],
        text=str(raw.get("text") or ""),
        author_id=raw.get("author_id") or "",
        created_at=_parse_timestamp(raw.get("created_at")),
        tags=tags,
    )


def _parse_timestamp(value: str | None) -> datetime | None:
    # API v2 format: "2025-02-10T18:30:00.000Z"
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable created_at %r", value)
        return None


def _parse_tag(annotation: object) -> Tag | None:
    # A bad annotation drops only its own tag, never the tweet
    if not isinstance(annotation, dict):
        return None
    entity = annotation.get("entity") or {}
    domain = annotation.get("domain") or {}
    if not isinstance(entity, dict) or not entity.get("name"):
        return None
    return Tag(
        name=str(entity["name"]),
        domain=domain.get("name") if isinstance(domain, dict) else None,
    )
