"""Tests for PaginationDriver."""

import asyncio

import pytest

from conftest import SEARCH_URL, FakeControl, FakePage
from service.page_actions import PageActions, PageActionsConfig
from service.pagination_service import PaginationDriver
from utils.locale_patterns import LABELED_NEXT_SELECTOR, REL_NEXT_SELECTOR

PAGE_2 = SEARCH_URL + "&page=2"
PAGE_3 = SEARCH_URL + "&page=3"

SITE = {
    SEARCH_URL: "<html><body><main></main></body></html>",
    PAGE_2: "<html><body><main></main></body></html>",
    PAGE_3: "<html><body><main></main></body></html>",
}


class StalledLoadPage(FakePage):
    """A page whose DOM never finishes loading after a navigation attempt."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.load_wait_cancelled = False

    async def wait_for_load_state(self, state: str = "load", timeout=None):
        if state != "domcontentloaded":
            return None
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.load_wait_cancelled = True
            raise


def _driver(page: FakePage, max_pages: int) -> PaginationDriver:
    actions = PageActions(page, PageActionsConfig(expander_delay=0, scroll_delay=0))
    return PaginationDriver(actions, max_pages=max_pages, settle_delay=0)


async def _collect(driver: PaginationDriver, start_url: str = SEARCH_URL) -> list[int]:
    return [number async for number in driver.pages(start_url)]


@pytest.mark.asyncio
async def test_stops_at_page_bound():
    page = FakePage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_2)},
        PAGE_2: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_3)},
    })
    driver = _driver(page, max_pages=2)

    assert await _collect(driver) == [1, 2]
    assert page.visited == [SEARCH_URL, PAGE_2]
    assert driver.pages_visited == 2


@pytest.mark.asyncio
async def test_stops_when_no_next_control():
    page = FakePage(SITE)
    driver = _driver(page, max_pages=5)

    assert await _collect(driver) == [1]
    assert page.visited == [SEARCH_URL]


@pytest.mark.asyncio
async def test_first_page_is_loaded_once():
    page = FakePage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_2)},
        PAGE_2: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_3)},
    })

    await _collect(_driver(page, max_pages=3))

    assert page.visited == [SEARCH_URL, PAGE_2, PAGE_3]


@pytest.mark.asyncio
async def test_labeled_control_used_when_rel_next_hidden():
    rel_next = FakeControl(target=PAGE_3, visible=False)
    labeled = FakeControl(target=PAGE_2)
    page = FakePage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: rel_next, LABELED_NEXT_SELECTOR: labeled},
    })

    assert await _collect(_driver(page, max_pages=5)) == [1, 2]
    assert rel_next.clicks == 0
    assert labeled.clicks == 1
    assert page.url == PAGE_2


@pytest.mark.asyncio
async def test_rel_next_preferred_over_labeled_control():
    rel_next = FakeControl(target=PAGE_2)
    labeled = FakeControl(target=PAGE_3)
    page = FakePage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: rel_next, LABELED_NEXT_SELECTOR: labeled},
    })

    await _collect(_driver(page, max_pages=2))

    assert rel_next.clicks == 1
    assert labeled.clicks == 0


@pytest.mark.asyncio
async def test_failed_click_ends_pagination():
    page = FakePage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_2, fails=True)},
    })
    driver = _driver(page, max_pages=5)

    assert await _collect(driver) == [1]
    assert driver.pages_visited == 1


@pytest.mark.asyncio
async def test_cookie_consent_is_dismissed():
    consent = FakeControl()
    page = FakePage(SITE, controls={SEARCH_URL: {'button:has-text("Accept")': consent}})

    await _collect(_driver(page, max_pages=1))

    assert consent.clicks == 1


@pytest.mark.asyncio
async def test_unreachable_first_page_raises():
    driver = _driver(FakePage({}), max_pages=3)

    with pytest.raises(RuntimeError):
        await _collect(driver)
    assert driver.pages_visited == 0


@pytest.mark.asyncio
async def test_failed_click_cancels_pending_load_wait():
    page = StalledLoadPage(SITE, controls={
        SEARCH_URL: {REL_NEXT_SELECTOR: FakeControl(target=PAGE_2, fails=True)},
    })

    assert await _collect(_driver(page, max_pages=5)) == [1]
    assert page.load_wait_cancelled is True
