"""
FastAPI Routes for the vacancy scraper
Handles the scrape and health endpoints
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from core.config import settings
from schemas.api_schemas import ErrorResponse, HealthResponse, ScrapeMeta, ScrapeResponse
from service.scraper_service import JobsScraper
from utils.logging import RUNTIME, setup_logger

logger = setup_logger(__name__)

router = APIRouter(tags=["Scraper"])

DEFAULT_TERM = "software engineer"
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def get_scraper() -> JobsScraper:
    """Dependency to get the scraper service"""
    return JobsScraper()


def parse_term(raw: Optional[str]) -> str:
    term = (raw or "").strip()
    return term or DEFAULT_TERM


def parse_max_pages(raw: Optional[str], default: int) -> int:
    """Lenient integer parsing: "3", " 3 ", "3abc" -> 3; anything else -> default."""
    match = _LEADING_INT.match(raw or "")
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default


@router.get("/healthz", response_model=HealthResponse)
async def health_check():
    logger.debug("Health check", extra={"operation": str(RUNTIME.HEALTHCHECK)})
    return HealthResponse()


@router.get(
    "/scrape",
    response_model=ScrapeResponse,
    responses={500: {"model": ErrorResponse}},
)
async def scrape_jobs(
    term: Optional[str] = Query(None, description="Search term"),
    max_pages: Optional[str] = Query(None, alias="maxPages", description="Maximum listing pages to crawl"),
    scraper: JobsScraper = Depends(get_scraper),
):
    """
    Search vacancies published in the last days and enrich every hit
    with its detail page.

    - **term**: search term, defaults to "software engineer"
    - **maxPages**: page bound, defaults to the configured MAX_PAGES
    """
    search_term = parse_term(term)
    page_bound = parse_max_pages(max_pages, scraper.config.default_max_pages or settings.MAX_PAGES)

    try:
        data = await scraper.scrape(search_term, page_bound)
    except Exception as e:
        logger.error(
            "Scrape failed",
            extra={"operation": str(RUNTIME.SCRAPE), "term": search_term, "error": str(e)},
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Scrape failed", message=str(e) or e.__class__.__name__).model_dump(),
        )

    return ScrapeResponse(
        meta=ScrapeMeta(
            term=search_term,
            max_pages=page_bound,
            publication_date_days=scraper.config.publication_date_days,
            count=len(data),
            source=scraper.config.source_url,
        ),
        data=data,
    )
