"""Data models for fetched bookmark data."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Tag:
    name: str  # context annotation entity name
    domain: str | None = None  # context annotation domain name


@dataclass(frozen=True)
class Author:
    id: str
    name: str  # display name
    username: str  # handle without @
    verified: bool = False
    profile_image_url: str | None = None


# Stand-in for an author id missing from the includes; search never matches it
UNKNOWN_AUTHOR = Author(id="", name="", username="")


@dataclass(frozen=True)
class Item:
    id: str
    text: str
    author_id: str
    created_at: datetime | None = None
    tags: tuple[Tag, ...] = ()


@dataclass
class PageMeta:
    next_token: str | None = None
    result_count: int | None = None


@dataclass
class Page:
    """A single decoded page of upstream results.

    ``meta is None`` means the page carried no metadata object at all, which
    is not the same as ``meta.next_token is None``.
    """

    items: list[Item] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)
    meta: PageMeta | None = None


@dataclass
class AccumulatedDocument:
    """Everything collected by one pagination run, in fetch order.

    Authors are appended per page and are not deduplicated, so lookups
    resolve to the first author with a matching id.
    """

    items: list[Item] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)
    next_token: str | None = None

    def author_index(self) -> dict[str, Author]:
        index: dict[str, Author] = {}
        for author in self.authors:
            index.setdefault(author.id, author)
        return index

    def author_for(self, item: Item) -> Author:
        return find_author(self.authors, item.author_id)


@dataclass
class FilteredView:
    """A read-only projection of an AccumulatedDocument."""

    items: list[Item]
    authors: list[Author]
    next_token: str | None = None
    query: str = ""

    def author_for(self, item: Item) -> Author:
        return find_author(self.authors, item.author_id)


def find_author(authors: list[Author], author_id: str) -> Author:
    """Return the first author with ``author_id``, or UNKNOWN_AUTHOR."""
    for author in authors:
        if author.id == author_id:
            return author
    return UNKNOWN_AUTHOR
