from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import urlencode, urljoin

from core.config import settings
from models.job_models import JobSummary
from service.chromium_service import ChromiumManager
from service.detail_enricher import DetailEnricher
from service.listing_extractor import ListingExtractor
from service.page_actions import PageActions, PageActionsConfig
from service.pagination_service import PaginationDriver
from utils.logging import RUNTIME, setup_logger

logger = setup_logger(__name__)


@dataclass
class ScraperConfig:
    base_url: str = settings.BASE_URL
    search_path: str = settings.SEARCH_PATH
    publication_date_days: int = settings.PUBLICATION_DATE_DAYS
    default_max_pages: int = settings.MAX_PAGES
    listing_settle_delay: float = 0.8
    detail_settle_delay: float = 1.2
    detail_polite_delay: float = 0.2
    actions: PageActionsConfig = field(default_factory=PageActionsConfig)

    @property
    def source_url(self) -> str:
        query = urlencode({"publication-date": self.publication_date_days})
        return f"{urljoin(self.base_url, self.search_path)}?{query}"

    def build_search_url(self, term: str) -> str:
        query = urlencode({"term": term, "publication-date": self.publication_date_days})
        return f"{urljoin(self.base_url, self.search_path)}?{query}"


def merge_jobs(accumulator: dict[str, JobSummary], jobs: list[JobSummary]) -> int:
    """Adds unseen jobs keyed by link; the first-seen variant is kept."""
    added = 0
    for job in jobs:
        if job.link not in accumulator:
            accumulator[job.link] = job
            added += 1
    return added


class JobsScraper:
    """Search, paginate and enrich: one browser session per call to `scrape`."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        browser_factory: Optional[Callable[[], Any]] = None,
    ):
        self.config = config or ScraperConfig()
        self._browser_factory = browser_factory or ChromiumManager
        self._listing_extractor = ListingExtractor()

    async def scrape(self, term: str, max_pages: Optional[int] = None) -> list[JobSummary]:
        max_pages = max_pages or self.config.default_max_pages
        search_url = self.config.build_search_url(term)
        logger.info(
            "Starting scrape",
            extra={"operation": str(RUNTIME.SCRAPE), "term": term, "max_pages": max_pages, "search_url": search_url},
        )

        jobs: dict[str, JobSummary] = {}
        async with self._browser_factory() as browser:
            listing = PageActions(browser.listing_page, self.config.actions)
            pagination = PaginationDriver(
                listing,
                max_pages=max_pages,
                settle_delay=self.config.listing_settle_delay,
            )
            async for page_number in pagination.pages(search_url):
                found = self._listing_extractor.extract(await listing.content(), listing.page.url)
                added = merge_jobs(jobs, found)
                logger.info(
                    "Listing page scraped",
                    extra={
                        "operation": str(RUNTIME.LISTING),
                        "page": page_number,
                        "jobs_found": len(found),
                        "jobs_added": added,
                    },
                )

            enricher = DetailEnricher(
                PageActions(browser.detail_page, self.config.actions),
                settle_delay=self.config.detail_settle_delay,
                polite_delay=self.config.detail_polite_delay,
            )
            enriched = await enricher.enrich_all(list(jobs.values()))

        logger.info(
            "Scrape completed",
            extra={
                "operation": str(RUNTIME.SCRAPE),
                "term": term,
                "pages_visited": pagination.pages_visited,
                "jobs": len(jobs),
                "enriched": enriched,
            },
        )
        return list(jobs.values())
