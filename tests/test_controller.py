"""Tests for the bookmark view state machine."""

import httpx
import pytest
import respx

from bookmark_search.controller import (
    FETCH_ERROR_MESSAGE,
    BookmarksController,
    Errored,
    Loading,
    Ready,
    Unauthenticated,
    apply_query,
    begin_loading,
    fail,
    finish_loading,
)
from bookmark_search.relay import RelayClient, RelayResult

from conftest import BACKEND_URL, RELAY_URL, make_page

ME_RESPONSE = {"response": {"data": {"id": "42"}}}
AUTHORIZE_URL = f"{BACKEND_URL}/authorize/twitter"


class ReentrantRelay:
    """Relay stub that tries to retry while a fetch is in flight."""

    def __init__(self):
        self.controller = None
        self.nested = []

    def send(self, target_url, method="GET", body=""):
        self.nested.append(self.controller.retry())
        return RelayResult(ok=False, status_code=500)


@pytest.fixture
def relay():
    with RelayClient(BACKEND_URL) as client:
        yield client


@pytest.fixture
def controller(relay):
    return BookmarksController(relay, lambda: True, AUTHORIZE_URL)


class TestTransitions:
    def test_finish_loading_shows_everything(self, document):
        state = finish_loading(Loading(), document)
        assert isinstance(state, Ready)
        assert state.document is document
        assert state.view.items is document.items

    def test_apply_query_filters_from_document(self, document):
        ready = finish_loading(Loading(), document)
        narrowed = apply_query(ready, "jane")
        widened = apply_query(narrowed, "")

        assert [item.id for item in narrowed.view.items] == ["1"]
        assert widened.view.items is document.items
        assert narrowed.document is document

    def test_apply_query_ignored_outside_ready(self):
        state = Errored(message="boom")
        assert apply_query(state, "jane") is state
        loading = Loading()
        assert apply_query(loading, "jane") is loading

    def test_fail_and_begin_loading(self, document):
        ready = finish_loading(Loading(), document)
        assert fail(ready) == Errored(message=FETCH_ERROR_MESSAGE)
        assert isinstance(begin_loading(Errored(message="x")), Loading)


class TestBookmarksController:
    def test_starts_in_loading(self, controller):
        assert isinstance(controller.state, Loading)
        assert controller.busy is False

    def test_unauthenticated_without_token(self, relay):
        controller = BookmarksController(relay, lambda: False, AUTHORIZE_URL)

        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(RELAY_URL)
            state = controller.start()

        assert state == Unauthenticated(authorize_url=AUTHORIZE_URL)
        assert route.call_count == 0

    @respx.mock
    def test_start_loads_all_pages(self, controller):
        route = respx.post(RELAY_URL)
        route.side_effect = [
            httpx.Response(200, json=ME_RESPONSE),
            httpx.Response(200, json=make_page(["1", "2"], next_token="abc")),
            httpx.Response(200, json=make_page(["3"])),
        ]

        state = controller.start()

        assert isinstance(state, Ready)
        assert [item.id for item in state.view.items] == ["1", "2", "3"]
        assert controller.busy is False

    @respx.mock
    def test_search_narrows_and_restores(self, controller):
        route = respx.post(RELAY_URL)
        route.side_effect = [
            httpx.Response(200, json=ME_RESPONSE),
            httpx.Response(200, json=make_page(["1", "2"])),
        ]
        controller.start()

        state = controller.search("tweet 2")
        assert [item.id for item in state.view.items] == ["2"]

        state = controller.search("")
        assert [item.id for item in state.view.items] == ["1", "2"]

    @respx.mock
    def test_transport_failure_sets_error(self, controller):
        respx.post(RELAY_URL).mock(side_effect=httpx.ConnectError("refused"))

        state = controller.start()

        assert state == Errored(message=FETCH_ERROR_MESSAGE)
        assert controller.busy is False

    @respx.mock
    def test_user_lookup_failure_sets_error(self, controller):
        respx.post(RELAY_URL).mock(return_value=httpx.Response(401))

        assert isinstance(controller.start(), Errored)

    @respx.mock
    def test_failed_bookmarks_page_is_not_an_error(self, controller):
        route = respx.post(RELAY_URL)
        route.side_effect = [
            httpx.Response(200, json=ME_RESPONSE),
            httpx.Response(503),
        ]

        state = controller.start()

        assert isinstance(state, Ready)
        assert state.view.items == []

    @respx.mock
    def test_retry_refetches_from_scratch(self, controller):
        route = respx.post(RELAY_URL)
        route.side_effect = [
            httpx.ConnectError("refused"),
            httpx.Response(200, json=ME_RESPONSE),
            httpx.Response(200, json=make_page(["1"])),
        ]

        assert isinstance(controller.start(), Errored)
        state = controller.retry()

        assert isinstance(state, Ready)
        assert [item.id for item in state.view.items] == ["1"]
        assert route.call_count == 3

    def test_retry_refused_while_running(self):
        relay = ReentrantRelay()
        controller = BookmarksController(relay, lambda: True, AUTHORIZE_URL)
        relay.controller = controller

        state = controller.start()

        assert relay.nested == [Loading()]
        assert isinstance(state, Errored)

    def test_search_before_ready_is_ignored(self, controller):
        state = controller.search("jane")
        assert isinstance(state, Loading)

    @respx.mock
    def test_malformed_bookmarks_page_keeps_earlier_pages(self, controller):
        route = respx.post(RELAY_URL)
        route.side_effect = [
            httpx.Response(200, json=ME_RESPONSE),
            httpx.Response(200, json=make_page(["1"], next_token="abc")),
            httpx.Response(200, json={"response": {"data": True}}),
        ]

        state = controller.start()

        assert isinstance(state, Ready)
        assert [item.id for item in state.view.items] == ["1"]
