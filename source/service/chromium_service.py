import asyncio
from dataclasses import dataclass, field
from typing import Optional

import aiohttp
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from core.config import settings
from utils.logging import setup_logger

logger = setup_logger(__name__)


class BrowserLaunchError(RuntimeError):
    """Raised when no usable browser could be started or reached."""


# =============================================================================
# Chromium Manager
# =============================================================================


@dataclass
class ChromiumConfig:
    headless: bool = True
    user_agent: str = settings.USER_AGENT
    locale: str = settings.LOCALE
    accept_language: str = settings.ACCEPT_LANGUAGE
    # Set to reuse an already running Chromium instead of launching one.
    cdp_url: Optional[str] = None
    startup_timeout: int = 20
    health_check_interval: float = 1.0
    health_check_timeout: float = 1.0
    launch_args: list[str] = field(default_factory=lambda: [
        # Containerized hosts have no sandbox and a tiny /dev/shm
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ])

    @classmethod
    def from_settings(cls) -> "ChromiumConfig":
        return cls(headless=settings.HEADLESS, cdp_url=settings.BROWSER_CDP_URL)


class ChromiumManager:
    """One browser, one context and two pages (listing + detail) per scrape."""

    def __init__(self, config: Optional[ChromiumConfig] = None):
        self.config = config or ChromiumConfig.from_settings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._listing_page: Optional[Page] = None
        self._detail_page: Optional[Page] = None

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    @property
    def listing_page(self) -> Optional[Page]:
        return self._listing_page

    @property
    def detail_page(self) -> Optional[Page]:
        return self._detail_page

    async def _wait_for_cdp_ready(self) -> bool:
        timeout = aiohttp.ClientTimeout(total=self.config.health_check_timeout)

        for _ in range(self.config.startup_timeout):
            try:
                async with aiohttp.ClientSession() as session:
                    async with session.get(
                        f"{self.config.cdp_url}/json/version",
                        timeout=timeout,
                    ) as response:
                        if response.status == 200:
                            return True
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.debug(
                    "CDP endpoint not ready yet",
                    extra={"cdp_url": self.config.cdp_url, "error": str(e)},
                )

            await asyncio.sleep(self.config.health_check_interval)

        return False

    async def _open_browser(self) -> Browser:
        if self.config.cdp_url:
            if not await self._wait_for_cdp_ready():
                raise BrowserLaunchError(
                    f"Chromium CDP endpoint {self.config.cdp_url} is not reachable."
                )
            logger.info("Connecting to Chromium over CDP", extra={"cdp_url": self.config.cdp_url})
            return await self._playwright.chromium.connect_over_cdp(self.config.cdp_url)

        logger.info("Launching Chromium", extra={"headless": self.config.headless})
        try:
            return await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.launch_args,
            )
        except Exception as e:
            raise BrowserLaunchError(f"Chromium failed to launch: {e}") from e

    async def start(self) -> None:
        if self._browser is not None:
            raise RuntimeError("Chromium is already running.")

        self._playwright = await async_playwright().start()
        self._browser = await self._open_browser()
        self._context = await self._browser.new_context(
            user_agent=self.config.user_agent,
            locale=self.config.locale,
            extra_http_headers={"Accept-Language": self.config.accept_language},
        )
        self._listing_page = await self._context.new_page()
        self._detail_page = await self._context.new_page()
        logger.debug("Browser context ready")

    async def cleanup(self) -> None:
        """Closes context, browser and Playwright. Never raises, so an error
        already propagating out of the session is the one callers see."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as e:
                logger.debug("Closing browser context failed", extra={"error": str(e)})
            self._context = None
            self._listing_page = None
            self._detail_page = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning("Closing browser failed", extra={"error": str(e)})
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning("Stopping Playwright failed", extra={"error": str(e)})
            self._playwright = None
        logger.debug("Browser torn down")

    async def __aenter__(self) -> "ChromiumManager":
        try:
            await self.start()
        except BaseException:
            await self.cleanup()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.cleanup()
