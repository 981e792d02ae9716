"""Page retrieval backends used by the scraper."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import requests

try:  # pragma: no cover - optional dependency during development
    from playwright.async_api import async_playwright  # type: ignore
except Exception:  # pragma: no cover
    async_playwright = None  # type: ignore

from .config import ScraperConfig
from .errors import FetchFailure


LOGGER = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str) -> str:
        ...


class HttpFetcher:
    """Plain HTTP GET with a browser-like request signature."""

    def __init__(self, config: ScraperConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(config.headers)

    def fetch(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise FetchFailure(url, reason=str(exc)) from exc
        if not 200 <= response.status_code < 300:
            raise FetchFailure(url, status=response.status_code)
        LOGGER.debug("Fetched %s (%d bytes)", url, len(response.text))
        return response.text


class PlaywrightFetcher:
    """Render the page in headless Firefox and return the resulting markup."""

    def __init__(self, config: ScraperConfig) -> None:
        self.config = config

    async def _render(self, url: str) -> str:
        if async_playwright is None:
            raise RuntimeError(
                "Playwright is not installed. Install playwright and run 'playwright install' to enable rendering."
            )

        async with async_playwright() as p:  # pragma: no cover - network heavy
            browser = await p.firefox.launch(headless=True)
            try:
                context = await browser.new_context(
                    locale=self.config.locale,
                    user_agent=self.config.user_agent,
                    extra_http_headers={"Accept": self.config.accept},
                )
                page = await context.new_page()
                response = await page.goto(
                    url, wait_until="domcontentloaded", timeout=self.config.timeout * 1000
                )
                if response is None:
                    raise FetchFailure(url, reason="no response")
                if not response.ok:
                    raise FetchFailure(url, status=response.status)
                return await page.content()
            finally:
                await browser.close()

    def fetch(self, url: str) -> str:
        async def runner() -> str:
            return await self._render(url)

        try:
            return asyncio.run(runner())
        except FetchFailure:
            raise
        except RuntimeError as exc:
            if "asyncio.run() cannot be called" not in str(exc):
                raise FetchFailure(url, reason=str(exc)) from exc
            loop = asyncio.new_event_loop()
            try:
                asyncio.set_event_loop(loop)
                return loop.run_until_complete(runner())
            finally:
                asyncio.set_event_loop(None)
                loop.close()
        except Exception as exc:  # pragma: no cover - depends on network/Playwright
            raise FetchFailure(url, reason=str(exc)) from exc


def build_fetcher(config: ScraperConfig) -> Fetcher:
    """Return the fetch backend selected by ``config.renderer``."""

    if config.renderer == "playwright":
        return PlaywrightFetcher(config)
    return HttpFetcher(config)
