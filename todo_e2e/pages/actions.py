"""Generic page interactions shared by every page facade."""

from __future__ import annotations

from playwright.sync_api import Locator, Page

from todo_e2e.core.constants import TIMEOUTS


class PageActions:
    """Thin wrapper over one Playwright ``Page``.

    Page facades hold an instance of this class instead of subclassing it,
    so the same helper serves the TodoMVC page and the generic steps.
    """

    def __init__(self, page: Page, base_url: str = "") -> None:
        self.page = page
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return self.page.url

    def locator(self, selector: str) -> Locator:
        return self.page.locator(selector)

    def goto(self, url: str) -> None:
        self.page.goto(url)

    def navigate(self, path: str = "") -> None:
        """Open ``path`` relative to the base URL."""
        self.page.goto(f"{self.base_url}{path}")

    def reload(self) -> None:
        self.page.reload()

    def wait_for_selector(self, selector: str, timeout: int = TIMEOUTS["LONG"]) -> None:
        self.page.wait_for_selector(selector, timeout=timeout)

    def click(self, selector: str) -> None:
        self.page.locator(selector).click()

    def fill(self, selector: str, text: str) -> None:
        self.page.locator(selector).fill(text)

    def press(self, key: str) -> None:
        self.page.keyboard.press(key)

    def get_text(self, selector: str) -> str:
        return self.page.locator(selector).text_content() or ""

    def is_visible(self, selector: str) -> bool:
        return self.page.locator(selector).is_visible()

    def wait(self, milliseconds: int) -> None:
        self.page.wait_for_timeout(milliseconds)


__all__ = ["PageActions"]
