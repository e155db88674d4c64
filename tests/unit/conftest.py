"""
Fixtures for the browser-free unit tests.

The fake Playwright objects below implement just enough of the sync API
for the scenario world: launching, contexts, pages, screenshots and
recorded videos. Every call is appended to a shared :class:`Recorder` so
tests can assert on ordering.
"""

import json
import logging
from pathlib import Path

import pytest

from todo_e2e.core import logging as log_setup
from todo_e2e.core.config import ConfigLoader, Settings

OVERRIDE_VARS = ("TEST_CONFIG", "TEST_ENV", "BROWSER", "BROWSER_KIND", "HEADLESS", "RECORD_VIDEO", "RESULTS_DIR", "LOG_LEVEL", "LOG_FILE")

SAMPLE_CONFIG = {
    "environments": {
        "local": {"name": "Local", "baseUrl": "http://localhost:8080/todomvc/", "timeout": 15000},
        "staging": {"name": "Staging", "baseUrl": "https://staging.example.test", "timeout": 30000, "slowMo": 50},
    },
    "browsers": {
        "chromium": {"channel": "chromium", "headless": True, "viewport": {"width": 1280, "height": 720}},
        "headed": {"headless": False, "viewport": {"width": 1920, "height": 1080}},
    },
    "default": {"environment": "local", "browser": "chromium"},
}


class Recorder:
    def __init__(self):
        self.calls = []
        self.failures = {}

    def record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        exc = self.failures.get(name)
        if exc is not None:
            raise exc

    def names(self):
        return [name for name, _ in self.calls]

    def kwargs(self, name):
        for call_name, kwargs in self.calls:
            if call_name == name:
                return kwargs
        raise AssertionError(f"{name} was never called")


class FakeVideo:
    def __init__(self, path):
        self._path = path

    def path(self):
        return str(self._path)


class FakeCDPSession:
    def __init__(self, recorder):
        self._recorder = recorder

    def send(self, method, params=None):
        self._recorder.record("cdp.send", method=method, params=params)


class FakePage:
    url = "about:blank"

    def __init__(self, recorder, video=None):
        self._recorder = recorder
        self.video = video

    def screenshot(self, path, full_page=False):
        self._recorder.record("page.screenshot", path=path, full_page=full_page)
        Path(path).write_bytes(b"\x89PNG fake")

    def evaluate(self, expression):
        return "FakeAgent/1.0"


class FakeContext:
    def __init__(self, recorder, options):
        self._recorder = recorder
        self.options = options
        self.page = None
        self._video_file = None
        if "record_video_dir" in options:
            self._video_file = Path(options["record_video_dir"]) / "3f2a9c.webm"

    def set_default_timeout(self, timeout):
        self._recorder.record("context.set_default_timeout", timeout=timeout)

    def new_page(self):
        self._recorder.record("context.new_page")
        video = FakeVideo(self._video_file) if self._video_file is not None else None
        self.page = FakePage(self._recorder, video)
        return self.page

    def new_cdp_session(self, page):
        self._recorder.record("context.new_cdp_session")
        return FakeCDPSession(self._recorder)

    def close(self):
        self._recorder.record("context.close")
        # Playwright writes the video file when the context closes.
        if self._video_file is not None:
            self._video_file.write_bytes(b"webm")


class FakeBrowser:
    def __init__(self, recorder):
        self._recorder = recorder
        self.context = None

    def new_context(self, **options):
        self._recorder.record("browser.new_context", **options)
        self.context = FakeContext(self._recorder, options)
        return self.context

    def close(self):
        self._recorder.record("browser.close")


class FakeBrowserType:
    def __init__(self, recorder, name):
        self._recorder = recorder
        self.name = name

    def launch(self, **kwargs):
        self._recorder.record(f"{self.name}.launch", **kwargs)
        return FakeBrowser(self._recorder)


class FakePlaywright:
    def __init__(self, recorder):
        self.chromium = FakeBrowserType(recorder, "chromium")
        self.firefox = FakeBrowserType(recorder, "firefox")
        self.webkit = FakeBrowserType(recorder, "webkit")


@pytest.fixture(autouse=True)
def clean_overrides(monkeypatch):
    """Keep the developer's own TEST_ENV / BROWSER / ... out of the unit tests."""
    for name in OVERRIDE_VARS:
        # setenv first so the original state is recorded even when the
        # variable is absent; code under test may export it directly.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def isolated_logging(monkeypatch):
    """Handlers installed by ``configure_logging`` during a test; removed afterwards."""
    root = logging.getLogger()
    level = root.level
    installed = []
    monkeypatch.setattr(log_setup, "_installed", installed)
    yield installed
    for handler in installed:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "test.config.json"
    path.write_text(json.dumps(SAMPLE_CONFIG), encoding="utf-8")
    return path


@pytest.fixture
def loader(config_file, make_settings):
    return ConfigLoader(config_file, make_settings())


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def fake_playwright(recorder):
    return FakePlaywright(recorder)
