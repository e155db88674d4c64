"""
Per-scenario browser lifecycle.

A :class:`ScenarioWorld` owns one browser process, one browsing context and
one page for exactly one scenario::

    UNINITIALIZED --begin()--> ACTIVE --end()--> TORN_DOWN

``end()`` always releases the context before the browser (closing the
context is what flushes a recorded video to disk), does so exactly once,
and never lets a failing screenshot or video rename hide the scenario's
own failure. A world is single-use; build a new one for the next scenario.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright

from todo_e2e.core.config import ConfigLoader, Settings
from todo_e2e.core.constants import HTML_REPORT, VIDEOS_DIR
from todo_e2e.core.errors import LifecycleError
from todo_e2e.pages.actions import PageActions
from todo_e2e.pages.todo_page import TodoPage
from todo_e2e.runner.artifacts import (
    Attach,
    FailureArtifacts,
    ScenarioResult,
    allure_attach,
    append_manifest,
    capture_screenshot,
    failure_summary,
    rename_video,
    stack_trace_lines,
)
from todo_e2e.runner.browsers import BrowserKind, resolve_kind

logger = logging.getLogger(__name__)


class WorldState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TORN_DOWN = "torn_down"


class ScenarioWorld:
    def __init__(
        self,
        config: ConfigLoader,
        playwright: Playwright,
        settings: Optional[Settings] = None,
        results_dir: Optional[Path] = None,
        attach: Optional[Attach] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config
        self._playwright = playwright
        self._settings = settings or config.settings
        self._results_dir = Path(results_dir) if results_dir is not None else self._settings.results_dir
        self._attach = attach or allure_attach
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = WorldState.UNINITIALIZED

        self.kind: Optional[BrowserKind] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._todo_page: Optional[TodoPage] = None
        self._actions: Optional[PageActions] = None

    @property
    def state(self) -> WorldState:
        return self._state

    @property
    def results_dir(self) -> Path:
        return self._results_dir

    @property
    def recording_video(self) -> bool:
        return self._settings.record_video

    @property
    def todo_page(self) -> TodoPage:
        if self._state is not WorldState.ACTIVE or self._todo_page is None:
            raise LifecycleError("TodoPage is not initialized")
        return self._todo_page

    @property
    def actions(self) -> PageActions:
        if self._state is not WorldState.ACTIVE or self._actions is None:
            raise LifecycleError("Page is not available")
        return self._actions

    def begin(self, browser_kind: "str | BrowserKind | None" = None) -> Page:
        """Launch the browser, open a context and a page for this scenario.

        Profile and launch errors propagate; nothing is retried. Anything
        acquired before a failure is released again and the world ends up
        TORN_DOWN.
        """
        if self._state is not WorldState.UNINITIALIZED:
            raise LifecycleError(f"begin() called on a world in state {self._state.value}")

        environment = self._config.get_environment()
        browser_profile = self._config.get_browser()
        kind = resolve_kind(browser_kind, self._settings.BROWSER_KIND)
        headless = self._settings.resolve_headless(browser_profile)

        logger.debug("Launching %s (headless=%s, slow_mo=%s)", kind.value, headless, environment.slow_mo)
        self.kind = kind
        self.browser = kind.launch(self._playwright, browser_profile, environment, headless)
        try:
            context_options: Dict[str, Any] = {
                "viewport": browser_profile.viewport.as_dict(),
                "locale": "en-US",
                "base_url": environment.base_url,
            }
            if self.recording_video:
                videos_dir = self._results_dir / VIDEOS_DIR
                videos_dir.mkdir(parents=True, exist_ok=True)
                context_options["record_video_dir"] = str(videos_dir)
                context_options["record_video_size"] = browser_profile.viewport.as_dict()
            context_options.update(kind.context_options())

            self.context = self.browser.new_context(**context_options)
            self.context.set_default_timeout(environment.timeout)
            self.page = self.context.new_page()
            if kind is BrowserKind.CHROMIUM:
                self._override_accept_language(self.context, self.page)
        except Exception:
            self._release()
            raise

        self._actions = PageActions(self.page, environment.base_url)
        self._todo_page = TodoPage(self.page, environment.base_url)
        self._state = WorldState.ACTIVE
        return self.page

    def _override_accept_language(self, context: BrowserContext, page: Page) -> None:
        # Keeps Chrome's translate prompt away; not all channels expose CDP.
        try:
            client = context.new_cdp_session(page)
            client.send(
                "Network.setUserAgentOverride",
                {
                    "userAgent": page.evaluate("() => navigator.userAgent"),
                    "acceptLanguage": "en-US,en",
                },
            )
        except Exception as exc:
            logger.debug("Accept-Language override skipped: %s", exc)

    def end(self, result: ScenarioResult) -> Optional[FailureArtifacts]:
        """Release the scenario's browser resources; on failure, collect artifacts.

        Calling ``end`` again after teardown does nothing.
        """
        if self._state is WorldState.TORN_DOWN:
            logger.debug("end() on a torn down world for %r ignored", result.name)
            return None

        was_active = self._state is WorldState.ACTIVE
        when = self._clock()
        artifacts: Optional[FailureArtifacts] = None
        video_path: Optional[str] = None

        try:
            if was_active and result.failed:
                artifacts = FailureArtifacts(scenario=result.name, uri=result.uri, error=result.error)
                self._attach_failure_message(result, artifacts)
                screenshot = capture_screenshot(self.page, self._results_dir, when, artifacts)
                if screenshot is not None:
                    self._safe_attach(artifacts, screenshot.read_bytes, "screenshot", "image/png")
            if was_active and self.recording_video:
                video_path = self._video_path()
        finally:
            self._release()

        if artifacts is not None:
            if self.recording_video:
                video = rename_video(video_path, result.name, when, artifacts)
                if video is not None:
                    self._safe_attach(artifacts, video.read_bytes, "video", "video/webm")
                    self._safe_attach(artifacts, lambda: f"Video: {video.name}", "video path", "text/plain")
            artifacts.summary = failure_summary(result, when)
            self._safe_attach(artifacts, lambda: artifacts.summary, "failure information", "text/plain")
            append_manifest(self._results_dir, artifacts)

        self._log_outcome(result, artifacts)
        return artifacts

    def _attach_failure_message(self, result: ScenarioResult, artifacts: FailureArtifacts) -> None:
        if not result.error:
            return
        logger.error('ERROR in "%s":\n%s', result.name, result.error)
        self._safe_attach(artifacts, lambda: f"ERROR:\n{result.error}", "error", "text/plain")
        frames = stack_trace_lines(result.error)
        if frames:
            self._safe_attach(artifacts, lambda: f"STACK TRACE:\n{frames}", "stack trace", "text/plain")

    def _safe_attach(self, artifacts: FailureArtifacts, body: Callable[[], Any], name: str, mime_type: str) -> None:
        try:
            self._attach(body(), name, mime_type)
        except Exception as exc:
            logger.warning("Could not attach %s: %s", name, exc)
            artifacts.errors.append(f"attach {name}: {exc}")

    def _video_path(self) -> Optional[str]:
        try:
            video = self.page.video if self.page is not None else None
            return video.path() if video is not None else None
        except Exception as exc:
            logger.warning("Could not resolve video path: %s", exc)
            return None

    def _release(self) -> None:
        """Close context, then browser. Runs at most once per world."""
        if self._state is WorldState.TORN_DOWN:
            return
        self._state = WorldState.TORN_DOWN
        context, browser = self.context, self.browser
        self._todo_page = None
        self._actions = None
        if context is not None:
            try:
                context.close()
            except Exception:
                logger.exception("Error closing browser context")
        if browser is not None:
            try:
                browser.close()
            except Exception:
                logger.exception("Error closing browser")

    def _log_outcome(self, result: ScenarioResult, artifacts: Optional[FailureArtifacts]) -> None:
        if result.status == "passed":
            logger.info("Test completed: %s", result.name)
            return
        if result.status == "skipped":
            logger.info("Test skipped: %s", result.name)
            return
        logger.error("Test FAILED: %s", result.name)
        logger.info("Report available at: %s", self._results_dir / HTML_REPORT)
        if artifacts is not None and artifacts.video:
            logger.info("Failure video: %s", artifacts.video)


__all__ = ["ScenarioWorld", "WorldState"]
