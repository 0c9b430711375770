"""
Detail page enrichment.

A detail page is parsed once into a `DetailDocument`; every field is then
resolved by an ordered chain of pure strategies where the first non-empty
result wins:

  title        h1 in <main>, then any h1
  company      company selectors (boilerplate filtered), then label synonyms
  description  recognized section headings, then the longest text block
  key facts    <dl> pairs, then scanned "Label: value" blocks, then a
               prefix walk over the content tree
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from models.job_models import JobDetail, JobSummary, KeyInfo
from service.page_actions import PageActions
from utils.locale_patterns import (
    COMPANY_BOILERPLATE,
    COMPANY_MAX_LENGTH,
    COMPANY_SELECTORS,
    KEY_FACT_CANONICAL_LABELS,
    KEY_FACT_SYNONYMS,
    SECTION_HEADING_PATTERN,
)
from utils.logging import RUNTIME, setup_logger
from utils.text_processor import TextProcessor, first_match

logger = setup_logger(__name__)

CONTENT_ROOTS_SELECTOR = "main, article, section"
SECTION_HEADING_TAGS = ["h2", "h3"]
SCANNED_BLOCK_SELECTOR = "p, li, div"
SCANNED_BLOCK_MAX_LENGTH = 600
SECTION_BODY_MIN_LENGTH = 60
SIBLING_MIN_WORDS = 5
FALLBACK_BLOCK_MIN_WORDS = 20

_text = TextProcessor.inner_text


@dataclass
class DetailDocument:
    soup: BeautifulSoup
    # Normalized label and canonical key -> value, from <dt>/<dd> pairs.
    definition_values: dict[str, str] = field(default_factory=dict)
    # Canonical synonym key -> value, from short "Label: value" blocks.
    scanned_pairs: dict[str, str] = field(default_factory=dict)

    @property
    def content_root(self) -> Tag:
        for name in ("main", "article"):
            element = self.soup.find(name)
            if element is not None:
                return element
        return self._body

    @property
    def _body(self) -> Tag:
        return self.soup.body if self.soup.body is not None else self.soup

    def scan_roots(self) -> list[Tag]:
        return self.soup.select(CONTENT_ROOTS_SELECTOR) or [self._body]


def _all_synonyms() -> list[str]:
    return [label for labels in KEY_FACT_SYNONYMS.values() for label in labels]


def parse_definition_lists(soup: BeautifulSoup) -> dict[str, str]:
    values: dict[str, str] = {}
    for dl in soup.find_all("dl"):
        for dt in dl.find_all("dt"):
            label = TextProcessor.normalize_label(_text(dt))
            if not label:
                continue
            dd = dt.find_next_sibling()
            if dd is None or dd.name != "dd":
                continue
            value = _text(dd).strip()
            if not value:
                continue
            values[TextProcessor.canonical_key(label)] = value
            values[label] = value
    return values


def scan_label_pairs(roots: list[Tag], labels: list[str]) -> dict[str, str]:
    patterns = [(TextProcessor.canonical_key(label), TextProcessor.label_value_pattern(label)) for label in labels]
    pairs: dict[str, str] = {}
    for root in roots:
        for element in root.select(SCANNED_BLOCK_SELECTOR):
            text = _text(element).strip()
            if not text or len(text) > SCANNED_BLOCK_MAX_LENGTH or ":" not in text:
                continue
            for key, pattern in patterns:
                match = pattern.match(text)
                if match and match.group(1):
                    pairs[key] = match.group(1).strip()
    return pairs


def lookup_by_synonyms(values: dict[str, str], synonyms: tuple[str, ...]) -> Optional[str]:
    canonical = [TextProcessor.canonical_key(synonym) for synonym in synonyms]
    for key, value in values.items():
        key = key.lower()
        for synonym_key in canonical:
            if key == synonym_key or synonym_key in key:
                return value
    return None


def _walk_elements(root: Tag) -> Iterator[Tag]:
    for element in root.descendants:
        if isinstance(element, Tag):
            yield element


def find_value_by_prefix(roots: list[Tag], prefix: str) -> Optional[str]:
    # Runs over every element, prose included, so only `Label: value` counts.
    pattern = TextProcessor.label_value_pattern(prefix, require_colon=True)
    for root in roots:
        for element in _walk_elements(root):
            text = _text(element)
            if not text:
                continue
            match = pattern.match(text)
            if match and match.group(1):
                return match.group(1).strip()
            if text.replace(":", "", 1).strip().lower() == prefix.lower():
                sibling = element.find_next_sibling()
                if sibling is not None:
                    return _text(sibling)
    return None


# =============================================================================
# Field strategies
# =============================================================================

FieldStrategy = Callable[[DetailDocument], Optional[str]]


def _from_definition_list(name: str) -> FieldStrategy:
    def strategy(doc: DetailDocument) -> Optional[str]:
        return lookup_by_synonyms(doc.definition_values, KEY_FACT_SYNONYMS[name])
    return strategy


def _from_scanned_pairs(name: str) -> FieldStrategy:
    def strategy(doc: DetailDocument) -> Optional[str]:
        return lookup_by_synonyms(doc.scanned_pairs, KEY_FACT_SYNONYMS[name])
    return strategy


def _from_prefix_walk(name: str) -> FieldStrategy:
    def strategy(doc: DetailDocument) -> Optional[str]:
        roots = doc.soup.select(CONTENT_ROOTS_SELECTOR)
        for synonym in KEY_FACT_SYNONYMS[name]:
            value = find_value_by_prefix(roots, synonym)
            if value:
                return value
        return None
    return strategy


def label_strategies(name: str) -> tuple[FieldStrategy, ...]:
    return (_from_definition_list(name), _from_scanned_pairs(name), _from_prefix_walk(name))


def _title_in_main(doc: DetailDocument) -> Optional[str]:
    return _text(doc.soup.select_one("main h1")) or None


def _title_anywhere(doc: DetailDocument) -> Optional[str]:
    return _text(doc.soup.find("h1")) or None


def _is_company_name(text: str) -> bool:
    return bool(text) and len(text) <= COMPANY_MAX_LENGTH and text.lower() not in COMPANY_BOILERPLATE


def _company_from_selector(selector: str) -> FieldStrategy:
    def strategy(doc: DetailDocument) -> Optional[str]:
        text = _text(doc.soup.select_one(selector))
        return text if _is_company_name(text) else None
    return strategy


def _description_from_sections(doc: DetailDocument) -> Optional[str]:
    sections: list[str] = []
    for heading in doc.content_root.find_all(SECTION_HEADING_TAGS):
        heading_text = _text(heading)
        if not SECTION_HEADING_PATTERN.search(heading_text):
            continue
        body = _collect_until_next_heading(heading)
        if body and len(body) > SECTION_BODY_MIN_LENGTH:
            sections.extend((heading_text, body))
    return "\n\n".join(sections) or None


def _collect_until_next_heading(heading: Tag) -> str:
    chunks: list[str] = []
    for sibling in heading.find_next_siblings():
        if sibling.name in SECTION_HEADING_TAGS:
            break
        blocks = sibling.select("p, li")
        if blocks:
            chunks.extend(text for text in map(_text, blocks) if text)
        else:
            text = _text(sibling)
            if text and TextProcessor.count_words(text) > SIBLING_MIN_WORDS:
                chunks.append(text)
    return "\n".join(chunks)


def _description_from_longest_block(doc: DetailDocument) -> Optional[str]:
    best = ""
    for element in doc.content_root.select("p, li"):
        text = _text(element)
        if TextProcessor.count_words(text) > FALLBACK_BLOCK_MIN_WORDS and len(text) > len(best):
            best = text
    return best or None


TITLE_STRATEGIES = (_title_in_main, _title_anywhere)
COMPANY_STRATEGIES = tuple(_company_from_selector(s) for s in COMPANY_SELECTORS) + label_strategies("company")
DESCRIPTION_STRATEGIES = (_description_from_sections, _description_from_longest_block)
KEY_INFO_STRATEGIES = {name: label_strategies(name) for name in KEY_FACT_CANONICAL_LABELS}


def build_document(html: str) -> DetailDocument:
    soup = BeautifulSoup(html, "html.parser")
    doc = DetailDocument(soup=soup, definition_values=parse_definition_lists(soup))
    doc.scanned_pairs = scan_label_pairs(doc.scan_roots(), _all_synonyms())
    return doc


def parse_detail(html: str) -> JobDetail:
    doc = build_document(html)
    key_info = {
        name: TextProcessor.strip_label_prefix(first_match(strategies, doc), KEY_FACT_CANONICAL_LABELS[name])
        for name, strategies in KEY_INFO_STRATEGIES.items()
    }
    return JobDetail(
        title=first_match(TITLE_STRATEGIES, doc),
        company=first_match(COMPANY_STRATEGIES, doc),
        description=first_match(DESCRIPTION_STRATEGIES, doc),
        key_info=KeyInfo(**key_info),
    )


def apply_detail(job: JobSummary, detail: JobDetail) -> None:
    job.description = detail.description
    job.key_info = detail.key_info
    if detail.title:
        job.title = detail.title
    if detail.company:
        job.company = detail.company
    if detail.key_info.place_of_work:
        job.location = detail.key_info.place_of_work
    if detail.key_info.workload:
        job.workload = detail.key_info.workload
    if detail.key_info.contract_type:
        job.contract_type = detail.key_info.contract_type


# =============================================================================
# Detail Enricher
# =============================================================================


class DetailEnricher:
    def __init__(
        self,
        actions: PageActions,
        settle_delay: float = 1.2,
        polite_delay: float = 0.2,
    ):
        self._actions = actions
        self._settle_delay = settle_delay
        self._polite_delay = polite_delay

    async def fetch(self, link: str) -> JobDetail:
        await self._actions.goto(link)
        await self._actions.wait_for_network_idle()
        await self._actions.accept_cookies()
        # Client-rendered content has no reliable readiness signal.
        await asyncio.sleep(self._settle_delay)
        await self._actions.expand_sections()
        return parse_detail(await self._actions.content())

    async def enrich(self, job: JobSummary) -> bool:
        """Enriches `job` in place. Failures keep the listing data."""
        try:
            detail = await self.fetch(job.link)
        except Exception as e:
            logger.warning(
                "Detail enrichment failed, keeping listing data",
                extra={"operation": str(RUNTIME.DETAIL), "link": job.link, "error": str(e)},
            )
            job.description = job.description or ""
            return False

        apply_detail(job, detail)
        logger.debug(
            "Job enriched",
            extra={
                "operation": str(RUNTIME.DETAIL),
                "link": job.link,
                "description_length": len(job.description),
            },
        )
        await asyncio.sleep(self._polite_delay)
        return True

    async def enrich_all(self, jobs: list[JobSummary]) -> int:
        enriched = 0
        for index, job in enumerate(jobs, start=1):
            logger.debug(
                "Enriching job",
                extra={"operation": str(RUNTIME.DETAIL), "index": index, "total": len(jobs)},
            )
            if await self.enrich(job):
                enriched += 1
        return enriched
