"""Free helper functions over a Playwright ``Page``."""

from __future__ import annotations

import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, TimeoutError

from todo_e2e.core.constants import TIMEOUTS

logger = logging.getLogger(__name__)


def wait_for_clickable(page: Page, selector: str, timeout: int = TIMEOUTS["LONG"]) -> None:
    page.wait_for_selector(selector, state="visible", timeout=timeout)
    page.wait_for_selector(selector, state="attached", timeout=timeout)


def wait_for_page_load(page: Page, timeout: int = TIMEOUTS["LONG"]) -> None:
    """Wait for load and DOM readiness; network idle is best-effort."""
    page.wait_for_load_state("load")
    page.wait_for_load_state("domcontentloaded")
    try:
        page.wait_for_load_state("networkidle", timeout=timeout)
    except TimeoutError:
        logger.info("Network idle timeout - continuing...")


def click_with_retry(page: Page, selector: str, max_attempts: int = 3) -> None:
    """Click ``selector``, retrying after a one second pause; the last error is re-raised."""
    for attempt in range(1, max_attempts + 1):
        try:
            page.locator(selector).click(timeout=TIMEOUTS["SHORT"])
            return
        except PlaywrightError:
            if attempt == max_attempts:
                raise
            logger.debug("Click on %s failed (attempt %s/%s)", selector, attempt, max_attempts)
            page.wait_for_timeout(1000)


def clear_and_fill(page: Page, selector: str, text: str) -> None:
    locator = page.locator(selector)
    locator.click()
    locator.fill("")
    locator.fill(text)


__all__ = [
    "clear_and_fill",
    "click_with_retry",
    "wait_for_clickable",
    "wait_for_page_load",
]
