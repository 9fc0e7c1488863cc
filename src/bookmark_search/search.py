"""Local search over fetched bookmarks.

Matching is a case-insensitive substring test against the tweet text, the
author's display name and handle, and every context annotation name. There is
no tokenizing or ranking; matches keep their original order.
"""

from .models import AccumulatedDocument, Author, FilteredView, Item


def filter_bookmarks(document: AccumulatedDocument, query: str) -> FilteredView:
    """Return the bookmarks in ``document`` that match ``query``.

    An empty query returns a view over the document's own item list. The
    document itself is never modified.
    """
    if not query:
        items = document.items
    else:
        needle = query.lower()
        authors = document.author_index()
        items = [
            item
            for item in document.items
            if _matches(item, authors.get(item.author_id), needle)
        ]

    return FilteredView(
        items=items,
        authors=document.authors,
        next_token=document.next_token,
        query=query,
    )


def searchable_fields(item: Item, author: Author | None) -> list[str]:
    """Text fields a query is matched against.

    Unresolved authors contribute nothing.
    """
    fields = [item.text]
    if author is not None:
        fields.extend([author.name, author.username])
    fields.extend(tag.name for tag in item.tags)
    return fields


def _matches(item: Item, author: Author | None, needle: str) -> bool:
    return any(needle in field.lower() for field in searchable_fields(item, author))
