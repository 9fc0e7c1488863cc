"""View state for the bookmark browser.

The view is always in exactly one of four states:

    Unauthenticated  - no usable token; show the authorize link
    Loading          - a fetch run is in flight
    Ready            - bookmarks loaded; holds the document and current view
    Errored          - the last run failed; offer a retry

Transitions are plain functions that return a new state.
BookmarksController drives them from the host UI: ``start()`` once on launch,
``retry()`` after an error and ``search()`` on every query change.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from .models import AccumulatedDocument, FilteredView
from .paginator import bookmarks_url, fetch_all, fetch_current_user_id
from .relay import RelayClient, RelayError
from .search import filter_bookmarks

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Cannot read your bookmarks."


@dataclass(frozen=True)
class Unauthenticated:
    authorize_url: str


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Ready:
    document: AccumulatedDocument
    view: FilteredView


@dataclass(frozen=True)
class Errored:
    message: str


ViewState = Unauthenticated | Loading | Ready | Errored


def begin_loading(state: ViewState) -> ViewState:
    return Loading()


def finish_loading(state: ViewState, document: AccumulatedDocument) -> ViewState:
    return Ready(document=document, view=filter_bookmarks(document, ""))


def fail(state: ViewState, message: str = FETCH_ERROR_MESSAGE) -> ViewState:
    return Errored(message=message)


def apply_query(state: ViewState, query: str) -> ViewState:
    """Recompute the view for ``query``. Only meaningful once Ready."""
    if not isinstance(state, Ready):
        return state
    return Ready(document=state.document, view=filter_bookmarks(state.document, query))


class BookmarksController:
    def __init__(
        self,
        relay: RelayClient,
        token_check: Callable[[], bool],
        authorize_url: str,
    ):
        self._relay = relay
        self._token_check = token_check
        self._authorize_url = authorize_url
        self.state: ViewState = Loading()
        self._running = False

    @property
    def busy(self) -> bool:
        return self._running

    def start(self) -> ViewState:
        """Check the token, then fetch every bookmark from scratch."""
        if self._running:
            logger.warning("Ignoring start: a fetch is already in progress.")
            return self.state

        if not self._token_check():
            logger.info("No valid token; authorization required.")
            self.state = Unauthenticated(authorize_url=self._authorize_url)
            return self.state

        self._running = True
        self.state = begin_loading(self.state)
        try:
            user_id = fetch_current_user_id(self._relay)
            document = fetch_all(self._relay, bookmarks_url(user_id))
        except (httpx.HTTPError, RelayError) as e:
            logger.error("Failed to fetch bookmarks: %s", e)
            self.state = fail(self.state)
        else:
            logger.info("Loaded %d bookmarks.", len(document.items))
            self.state = finish_loading(self.state, document)
        finally:
            self._running = False
        return self.state

    def retry(self) -> ViewState:
        """Start a fresh run after a failure."""
        if self._running:
            logger.warning("Ignoring retry: a fetch is already in progress.")
            return self.state
        return self.start()

    def search(self, query: str) -> ViewState:
        self.state = apply_query(self.state, query)
        return self.state
