import asyncio
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from utils.locale_patterns import CONSENT_SELECTORS, EXPANDER_SELECTORS
from utils.logging import setup_logger

logger = setup_logger(__name__)


@dataclass
class PageActionsConfig:
    navigation_timeout: int = 60000
    network_idle_timeout: int = 15000
    consent_timeout: int = 1000
    expander_timeout: int = 500
    expander_limit: int = 5
    expander_delay: float = 0.15
    job_links_timeout: int = 8000
    scroll_rounds: int = 3
    scroll_delay: float = 0.4


class PageActions:
    """Best-effort interactions shared by the listing and detail stages.

    Everything except `goto` swallows its own failures: consent dialogs,
    expanders and lazy content may legitimately be absent.
    """

    def __init__(self, page: Page, config: Optional[PageActionsConfig] = None):
        self._page = page
        self._config = config or PageActionsConfig()

    @property
    def page(self) -> Page:
        return self._page

    async def goto(self, url: str) -> None:
        await self._page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self._config.navigation_timeout,
        )

    async def wait_for_load_state(self, state: str, timeout: int) -> None:
        try:
            await self._page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightTimeoutError:
            logger.debug("Timeout waiting for load state", extra={"state": state})

    async def wait_for_network_idle(self) -> None:
        await self.wait_for_load_state("networkidle", self._config.network_idle_timeout)

    async def accept_cookies(self) -> bool:
        for selector in CONSENT_SELECTORS:
            try:
                button = self._page.locator(selector).first
                if await button.is_visible(timeout=self._config.consent_timeout):
                    await button.click(timeout=self._config.consent_timeout)
                    logger.debug("Cookie consent dismissed", extra={"selector": selector})
                    return True
            except Exception as e:
                logger.debug(
                    "Cookie selector not found or failed",
                    extra={"selector": selector, "error": str(e)},
                )
        return False

    async def expand_sections(self) -> int:
        expanded = 0
        for selector in EXPANDER_SELECTORS:
            try:
                buttons = self._page.locator(selector)
                count = await buttons.count()
                for i in range(min(count, self._config.expander_limit)):
                    button = buttons.nth(i)
                    if not await button.is_visible(timeout=self._config.expander_timeout):
                        continue
                    try:
                        await button.click(timeout=self._config.expander_timeout)
                        expanded += 1
                    except Exception as e:
                        logger.debug(
                            "Expander click failed",
                            extra={"selector": selector, "index": i, "error": str(e)},
                        )
                    await asyncio.sleep(self._config.expander_delay)
            except Exception as e:
                logger.debug(
                    "Expander selector failed",
                    extra={"selector": selector, "error": str(e)},
                )
        return expanded

    async def wait_for_selector(self, selector: str) -> bool:
        try:
            await self._page.wait_for_selector(selector, timeout=self._config.job_links_timeout)
            return True
        except PlaywrightTimeoutError:
            logger.debug("Selector did not appear", extra={"selector": selector})
            return False

    async def scroll_to_load(self) -> None:
        try:
            for _ in range(self._config.scroll_rounds):
                await self._page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
                await asyncio.sleep(self._config.scroll_delay)
        except Exception as e:
            logger.warning("Scroll to load failed", extra={"error": str(e)})

    async def content(self) -> str:
        return await self._page.content()
