"""Pytest configuration and shared fixtures.

The fakes below stand in for the small part of Playwright's async page API
the scraper touches, so every test runs without a browser or network.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import pytest

from service.page_actions import PageActionsConfig
from service.scraper_service import ScraperConfig

SEARCH_URL = "https://www.jobs.ch/en/vacancies/?term=nurse&publication-date=7"
DETAIL_URL_1 = "https://www.jobs.ch/en/vacancies/detail/1001/?source=search"
DETAIL_URL_2 = "https://www.jobs.ch/en/vacancies/detail/1002/"


@dataclass
class FakeControl:
    """A clickable element; clicking navigates to `target` when set."""
    target: Optional[str] = None
    visible: bool = True
    fails: bool = False
    clicks: int = 0


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    def nth(self, index: int) -> "FakeLocator":
        return self

    def _control(self) -> Optional[FakeControl]:
        return self._page.controls.get(self._page.url, {}).get(self._selector)

    async def count(self) -> int:
        return 1 if self._control() is not None else 0

    async def is_visible(self, timeout: Optional[int] = None) -> bool:
        control = self._control()
        return bool(control and control.visible)

    async def click(self, timeout: Optional[int] = None) -> None:
        await asyncio.sleep(0)
        control = self._control()
        if control is None or control.fails:
            raise RuntimeError(f"Timeout {timeout}ms exceeded clicking {self._selector}")
        control.clicks += 1
        if control.target:
            self._page.url = control.target
            self._page.visited.append(control.target)


class FakePage:
    def __init__(self, site: dict[str, str], controls: Optional[dict] = None):
        self.site = site
        self.controls = controls or {}
        self.url = "about:blank"
        self.visited: list[str] = []

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None):
        if url not in self.site:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.url = url
        self.visited.append(url)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None):
        return None

    async def wait_for_selector(self, selector: str, timeout: Optional[int] = None):
        return None

    async def evaluate(self, expression: str):
        return None

    async def content(self) -> str:
        return self.site[self.url]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)


@dataclass
class FakeBrowser:
    site: dict[str, str]
    controls: dict = field(default_factory=dict)
    fail_on_start: Optional[Exception] = None
    closed: bool = False

    def __post_init__(self):
        self.listing_page = FakePage(self.site, self.controls)
        self.detail_page = FakePage(self.site, self.controls)

    async def __aenter__(self) -> "FakeBrowser":
        if self.fail_on_start is not None:
            raise self.fail_on_start
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed = True


def listing_card(href: str, *lines: str, heading: Optional[str] = None) -> str:
    body = "".join(f"<p>{line}</p>" for line in lines)
    title = f"<h3>{heading}</h3>" if heading else ""
    return f'<article><a href="{href}">{title}{body}</a></article>'


LISTING_HTML = """
<html><body>
<header><a href="/en/vacancies/">All vacancies</a></header>
<main>
  <nav><a href="/en/vacancies/?region=zurich">Jobs in Zurich</a></nav>
  <article>
    <a href="/en/vacancies/detail/1001/?source=search">
      <h3>Registered Nurse</h3>
      <p>Spital Z&uuml;rich AG</p>
      <p>Place of work: Zurich</p>
      <p>Workload: 80 &ndash; 100%</p>
      <p>Contract type: Unlimited employment</p>
      <span>Easy apply</span>
      <p>3 days ago</p>
    </a>
  </article>
  <article>
    <a href="https://www.jobs.ch/en/vacancies/detail/1002/">
      <div>Nurse &amp; Caregiver</div>
      <div>Pflegeheim Sonnegg</div>
      <div>Place of work: Bern</div>
      <div>Workload: 60%</div>
      <div>Contract type: Temporary</div>
      <div>Yesterday</div>
    </a>
  </article>
</main>
</body></html>
"""

DETAIL_HTML = """
<html><body>
<nav><a href="/en/companies/">Explore companies</a></nav>
<main>
  <h1>Registered Nurse 80-100%</h1>
  <a href="/en/companies/">Explore companies</a>
  <a href="/en/company/spital-zuerich/">Spital Z&uuml;rich AG</a>
  <dl>
    <dt>Publication date:</dt><dd>12 October 2026</dd>
    <dt>Workload:</dt><dd>80 &ndash; 100%</dd>
    <dt>Employment type:</dt><dd>Unlimited employment</dd>
    <dt>Language:</dt><dd>German (Fluent)</dd>
    <dt>Place of work:</dt><dd>R&auml;mistrasse 100, 8091 Z&uuml;rich</dd>
  </dl>
  <h2>About the job</h2>
  <p>Our university hospital is looking for a committed nurse to join the interdisciplinary ward team.</p>
  <h2>Your tasks</h2>
  <ul>
    <li>Provide holistic care to patients before and after surgery</li>
    <li>Coordinate daily routines with doctors and therapists</li>
  </ul>
  <h2>Your profile</h2>
  <ul>
    <li>Diploma in nursing (HF/FH) or equivalent qualification</li>
    <li>Good command of German, English is an advantage</li>
  </ul>
  <h3>Contact</h3>
  <p>Jane Doe, HR Business Partner</p>
</main>
</body></html>
"""


@pytest.fixture
def fast_config() -> ScraperConfig:
    """Scraper configuration without settle delays."""
    return ScraperConfig(
        listing_settle_delay=0,
        detail_settle_delay=0,
        detail_polite_delay=0,
        actions=PageActionsConfig(expander_delay=0, scroll_delay=0),
    )


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def detail_html() -> str:
    return DETAIL_HTML
