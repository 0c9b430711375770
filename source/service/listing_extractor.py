from typing import Optional

from bs4 import BeautifulSoup, Tag

from models.job_models import JobSummary
from utils.locale_patterns import (
    CARD_HEADING_SELECTOR,
    CARD_METADATA_PATTERN,
    FALLBACK_ANCHOR_SELECTOR,
    LISTING_ANCHOR_SELECTOR,
    VACANCY_PATH_PATTERN,
)
from utils.logging import RUNTIME, setup_logger
from utils.text_processor import TextProcessor, first_match

logger = setup_logger(__name__)

# =============================================================================
# Listing Extractor
# =============================================================================

FALLBACK_TITLE_LENGTH = 140


def _heading_in_card(anchor: Tag) -> Optional[str]:
    heading = anchor.select_one(CARD_HEADING_SELECTOR)
    return TextProcessor.strip_html(heading.decode_contents()) if heading else None


def _heading_in_article(anchor: Tag) -> Optional[str]:
    # A card with its own heading, even an empty one, falls back to its first line.
    if anchor.select_one(CARD_HEADING_SELECTOR) is not None:
        return None
    article = anchor.find_parent("article")
    heading = article.select_one(CARD_HEADING_SELECTOR) if article else None
    return TextProcessor.strip_html(heading.decode_contents()) if heading else None


CARD_TITLE_STRATEGIES = (_heading_in_card, _heading_in_article)


class ListingExtractor:
    """Turns a rendered search-results page into job summaries in DOM order."""

    def extract(self, html: str, page_url: str) -> list[JobSummary]:
        soup = BeautifulSoup(html, "html.parser")
        jobs = self._extract_cards(soup, page_url)
        if not jobs:
            # Markup may differ; a broad selector still finds the detail links.
            jobs = self._extract_fallback(soup, page_url)
            logger.info(
                "Listing fallback selector used",
                extra={"operation": str(RUNTIME.LISTING), "jobs_found": len(jobs)},
            )
        logger.debug(
            "Listing page extracted",
            extra={"operation": str(RUNTIME.LISTING), "page_url": page_url, "jobs_found": len(jobs)},
        )
        return jobs

    def _extract_cards(self, soup: BeautifulSoup, page_url: str) -> list[JobSummary]:
        results: list[JobSummary] = []
        seen: set[str] = set()

        for anchor in soup.select(LISTING_ANCHOR_SELECTOR):
            try:
                url = TextProcessor.resolve_url(anchor.get("href"), page_url)
                if not url or not VACANCY_PATH_PATTERN.search(url) or url in seen:
                    continue
                seen.add(url)

                text = TextProcessor.strip_html(anchor.decode_contents())
                # Navigation links to vacancy pages never carry card metadata.
                if not CARD_METADATA_PATTERN.search(text):
                    continue

                fields = TextProcessor.parse_card_text_to_fields(TextProcessor.inner_text(anchor))
                title = first_match(CARD_TITLE_STRATEGIES, anchor) or fields.title
                results.append(
                    JobSummary(
                        title=title,
                        company=fields.company,
                        location=fields.location,
                        workload=fields.workload,
                        contract_type=fields.contract_type,
                        posted_text=fields.posted_text,
                        link=url,
                    )
                )
            except Exception as e:
                logger.debug("Skipping listing anchor", extra={"error": str(e)})
        return results

    def _extract_fallback(self, soup: BeautifulSoup, page_url: str) -> list[JobSummary]:
        results: list[JobSummary] = []
        seen: set[str] = set()

        for anchor in soup.select(FALLBACK_ANCHOR_SELECTOR):
            try:
                url = TextProcessor.resolve_url(anchor.get("href"), page_url)
                if not url or url in seen:
                    continue
                seen.add(url)
                text = TextProcessor.strip_html(anchor.decode_contents())
                results.append(JobSummary(title=text[:FALLBACK_TITLE_LENGTH], link=url))
            except Exception as e:
                logger.debug("Skipping fallback anchor", extra={"error": str(e)})
        return results
