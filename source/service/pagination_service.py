import asyncio
from typing import AsyncIterator, Optional

from playwright.async_api import Locator

from service.page_actions import PageActions
from utils.locale_patterns import (
    JOB_ANCHOR_WAIT_SELECTOR,
    LABELED_NEXT_SELECTOR,
    REL_NEXT_SELECTOR,
)
from utils.logging import RUNTIME, setup_logger

logger = setup_logger(__name__)

# =============================================================================
# Pagination Driver
# =============================================================================


class PaginationDriver:
    """Walks listing pages: rel="next" first, then a visible "Next" control.

    Stops when neither control is visible or after `max_pages` pages,
    whichever comes first. Both outcomes are normal termination.
    """

    NEXT_CONTROL_SELECTORS = (REL_NEXT_SELECTOR, LABELED_NEXT_SELECTOR)

    def __init__(
        self,
        actions: PageActions,
        max_pages: int,
        settle_delay: float = 0.8,
        click_timeout: int = 2000,
        navigation_wait_timeout: int = 20000,
    ):
        self._actions = actions
        self._max_pages = max_pages
        self._settle_delay = settle_delay
        self._click_timeout = click_timeout
        self._navigation_wait_timeout = navigation_wait_timeout
        self.pages_visited = 0

    async def find_next_control(self) -> Optional[Locator]:
        for selector in self.NEXT_CONTROL_SELECTORS:
            control = await self._visible_control(selector)
            if control is not None:
                return control
        return None

    async def _visible_control(self, selector: str) -> Optional[Locator]:
        control = self._actions.page.locator(selector).first
        try:
            if await control.count() and await control.is_visible():
                return control
        except Exception as e:
            logger.debug("Next control probe failed", extra={"selector": selector, "error": str(e)})
        return None

    async def advance(self) -> bool:
        """Moves to the next listing page. Returns False on the last page."""
        await self._actions.accept_cookies()
        control = await self.find_next_control()
        if control is None:
            logger.info(
                "Last listing page reached",
                extra={"operation": str(RUNTIME.PAGINATION), "pages_visited": self.pages_visited},
            )
            return False

        navigation = asyncio.create_task(
            self._actions.wait_for_load_state("domcontentloaded", self._navigation_wait_timeout)
        )
        try:
            await control.click(timeout=self._click_timeout)
            await navigation
        except Exception as e:
            navigation.cancel()
            await asyncio.gather(navigation, return_exceptions=True)
            logger.warning(
                "Next page control could not be activated",
                extra={"operation": str(RUNTIME.PAGINATION), "error": str(e)},
            )
            return False

        await self._actions.wait_for_network_idle()
        return True

    async def _prepare_page(self) -> None:
        await self._actions.wait_for_network_idle()
        await self._actions.accept_cookies()
        await asyncio.sleep(self._settle_delay)
        await self._actions.wait_for_selector(JOB_ANCHOR_WAIT_SELECTOR)
        await self._actions.scroll_to_load()

    async def pages(self, start_url: str) -> AsyncIterator[int]:
        """Yields the 1-based page number once each listing page is ready.

        Navigation to `start_url` is not guarded: if the first listing page
        cannot be loaded the whole scrape fails.
        """
        await self._actions.goto(start_url)
        while self.pages_visited < self._max_pages:
            await self._prepare_page()
            self.pages_visited += 1
            logger.info(
                "Listing page ready",
                extra={"operation": str(RUNTIME.PAGINATION), "page": self.pages_visited},
            )
            yield self.pages_visited

            if self.pages_visited >= self._max_pages:
                logger.info(
                    "Page bound reached",
                    extra={"operation": str(RUNTIME.PAGINATION), "max_pages": self._max_pages},
                )
                break
            if not await self.advance():
                break
