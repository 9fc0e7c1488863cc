"""Fetch every bookmark page through the relay.

Pagination follows the v2 API contract: each page reports
``meta.next_token`` and the next request carries it back as the
``paginationToken`` query parameter. Pages depend on the previous cursor, so
they are fetched strictly one after another.
"""

import logging

import httpx

from .models import AccumulatedDocument
from .parser import parse_page
from .relay import RelayClient, RelayError

logger = logging.getLogger(__name__)

API_BASE = "https://api.twitter.com/2"

# Hard cap on relay calls per run, whether or not more pages remain
MAX_PAGES = 5

PAGINATION_PARAM = "paginationToken"


def bookmarks_url(user_id: str) -> httpx.URL:
    """Bookmarks endpoint for ``user_id`` with the fields search relies on."""
    return httpx.URL(
        f"{API_BASE}/users/{user_id}/bookmarks",
        params={
            "tweet.fields": "context_annotations,created_at",
            "expansions": "author_id",
            "user.fields": "verified,profile_image_url",
        },
    )


def fetch_current_user_id(relay: RelayClient) -> str:
    """Look up the authenticated user's id."""
    result = relay.send(f"{API_BASE}/users/me")
    response = result.response
    if not result.ok or response is None:
        raise RelayError(
            f"Could not look up the current user (relay status {result.status_code})."
        )
    user_id = (response.get("data") or {}).get("id")
    if not user_id:
        raise RelayError("Current user lookup returned no user id.")
    return user_id


def fetch_all(
    relay: RelayClient,
    base_url: str | httpx.URL,
    method: str = "GET",
    body: str = "",
) -> AccumulatedDocument:
    """Fetch up to MAX_PAGES pages and merge them into one document.

    A failed or malformed page ends the run quietly and contributes nothing;
    whatever was collected before it is returned. Transport errors from the
    relay are not caught here.
    """
    document = AccumulatedDocument()
    url = httpx.URL(base_url)

    for page_num in range(MAX_PAGES):
        if document.next_token:
            url = url.copy_set_param(PAGINATION_PARAM, document.next_token)

        logger.info("Fetching bookmarks page %d...", page_num + 1)
        result = relay.send(url, method, body)
        response = result.response

        if (
            not result.ok
            or response is None
            or not isinstance(response.get("data"), list)
        ):
            logger.warning(
                "Stopping pagination at page %d: relay status %d, %s",
                page_num + 1,
                result.status_code,
                "missing or malformed data" if result.ok else "request failed",
            )
            break

        page = parse_page(response)
        document.items.extend(page.items)
        document.authors.extend(page.authors)

        if page.meta is None:
            document.next_token = None
        else:
            document.next_token = page.meta.next_token

        logger.info(
            "Fetched %d bookmarks (total: %d)",
            len(page.items),
            len(document.items),
        )

        if not document.next_token:
            logger.info("No more pages. Pagination complete.")
            break
    else:
        if document.next_token:
            logger.info(
                "Reached the %d page limit; more bookmarks remain.", MAX_PAGES
            )

    return document
