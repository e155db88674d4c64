"""
Browser engines and how each one is launched.

``BrowserKind`` is a closed set; every member has exactly one launch
strategy and one set of extra context options in the tables below, and
the module refuses to import if a member is missing from either table.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Dict, Optional

from playwright.sync_api import Browser, BrowserType, Playwright

from todo_e2e.core.config import BrowserProfile, EnvironmentProfile
from todo_e2e.core.errors import ConfigurationError

CHROME_ARGS = [
    "--disable-features=Translate",
    "--disable-translate",
    "--disable-blink-features=AutomationControlled",
]
DEFAULT_CHROMIUM_CHANNEL = "chrome"


class BrowserKind(str, enum.Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @classmethod
    def parse(cls, value: "str | BrowserKind | None") -> "BrowserKind":
        if value is None or value == "":
            return cls.CHROMIUM
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(f'Unknown browser kind "{value}". Supported kinds: {choices}') from None

    def browser_type(self, playwright: Playwright) -> BrowserType:
        return getattr(playwright, self.value)

    def launch(
        self,
        playwright: Playwright,
        profile: BrowserProfile,
        environment: EnvironmentProfile,
        headless: bool,
    ) -> Browser:
        return _LAUNCHERS[self](self.browser_type(playwright), profile, environment, headless)

    def context_options(self) -> Dict[str, Any]:
        return dict(_CONTEXT_OPTIONS[self])


def _launch_chromium(
    browser_type: BrowserType,
    profile: BrowserProfile,
    environment: EnvironmentProfile,
    headless: bool,
) -> Browser:
    return browser_type.launch(
        headless=headless,
        channel=profile.channel or DEFAULT_CHROMIUM_CHANNEL,
        args=list(CHROME_ARGS),
        slow_mo=environment.slow_mo,
    )


def _launch_plain(
    browser_type: BrowserType,
    profile: BrowserProfile,
    environment: EnvironmentProfile,
    headless: bool,
) -> Browser:
    return browser_type.launch(headless=headless, slow_mo=environment.slow_mo)


_Launcher = Callable[[BrowserType, BrowserProfile, EnvironmentProfile, bool], Browser]

_LAUNCHERS: Dict[BrowserKind, _Launcher] = {
    BrowserKind.CHROMIUM: _launch_chromium,
    BrowserKind.FIREFOX: _launch_plain,
    BrowserKind.WEBKIT: _launch_plain,
}

_CONTEXT_OPTIONS: Dict[BrowserKind, Dict[str, Any]] = {
    BrowserKind.CHROMIUM: {
        "permissions": [],
        "extra_http_headers": {"Accept-Language": "en-US,en;q=0.9"},
    },
    BrowserKind.FIREFOX: {},
    BrowserKind.WEBKIT: {},
}

_missing = {kind for kind in BrowserKind if kind not in _LAUNCHERS or kind not in _CONTEXT_OPTIONS}
if _missing:  # pragma: no cover
    raise RuntimeError(f"No launch strategy for: {sorted(kind.value for kind in _missing)}")


def resolve_kind(explicit: "str | BrowserKind | None", override: Optional[str]) -> BrowserKind:
    """Explicit argument first, then the ``BROWSER_KIND`` override, then chromium."""
    return BrowserKind.parse(explicit or override)


__all__ = ["BrowserKind", "CHROME_ARGS", "DEFAULT_CHROMIUM_CHANNEL", "resolve_kind"]
