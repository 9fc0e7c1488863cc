"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from bookmark_search.models import AccumulatedDocument, Author, Item, Tag

BACKEND_URL = "http://relay.test"
RELAY_URL = f"{BACKEND_URL}/request"


def make_page(tweet_ids, next_token=None, users=None, include_meta=True) -> dict:
    """Build a relay envelope around one v2 bookmarks page."""
    response: dict = {
        "data": [
            {
                "id": tweet_id,
                "text": f"tweet {tweet_id}",
                "author_id": "111",
                "created_at": "2025-02-10T18:30:00.000Z",
            }
            for tweet_id in tweet_ids
        ],
        "includes": {
            "users": users
            if users is not None
            else [{"id": "111", "name": "Test User", "username": "testuser"}]
        },
    }
    if include_meta:
        meta: dict = {"result_count": len(tweet_ids)}
        if next_token:
            meta["next_token"] = next_token
        response["meta"] = meta
    return {"response": response}


@pytest.fixture
def authors() -> list[Author]:
    return [
        Author(id="111", name="Jane Doe", username="janed", verified=True),
        Author(id="222", name="Photo User", username="photouser"),
    ]


@pytest.fixture
def items() -> list[Item]:
    return [
        Item(
            id="1",
            text="hello world",
            author_id="111",
            created_at=datetime(2025, 2, 10, 18, 30, tzinfo=timezone.utc),
            tags=(Tag(name="Politics", domain="Politics"),),
        ),
        Item(
            id="2",
            text="Check out this image",
            author_id="222",
            created_at=datetime(2025, 2, 9, 12, 0, tzinfo=timezone.utc),
        ),
        Item(
            id="3",
            text="Orphaned tweet about cats",
            author_id="999",
            tags=(Tag(name="Animals"),),
        ),
    ]


@pytest.fixture
def document(items, authors) -> AccumulatedDocument:
    return AccumulatedDocument(items=items, authors=authors, next_token=None)
