"""
Configuration for test runs.

Two sources are combined here:

* a static profile file (``test.config.json`` by default) that defines
  named *environment* profiles (base URL, timeout, optional slow-down) and
  named *browser* profiles (headless flag, viewport, optional channel),
  plus the default selection for both;
* process-level overrides read from environment variables (or a ``.env``
  file) through :class:`Settings`.

The profile file is loaded once by :class:`ConfigLoader` and never mutated
afterwards. Callers construct the loader explicitly and pass it to whatever
needs it; there is no module-level instance.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from todo_e2e.core.errors import ConfigurationError, ProfileNotFoundError

logger = logging.getLogger(__name__)


class _Profile(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class EnvironmentProfile(_Profile):
    name: str
    base_url: str = Field(alias="baseUrl")
    timeout: int = Field(gt=0)
    slow_mo: Optional[int] = Field(default=None, alias="slowMo", ge=0)


class Viewport(_Profile):
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def as_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


class BrowserProfile(_Profile):
    channel: Optional[str] = None
    headless: bool = True
    viewport: Viewport


class DefaultSelection(_Profile):
    environment: str
    browser: str


class TestConfiguration(_Profile):
    # Not a test class, despite the name.
    __test__ = False

    environments: Dict[str, EnvironmentProfile]
    browsers: Dict[str, BrowserProfile]
    default: DefaultSelection


class Settings(BaseSettings):
    """
    Process-level overrides, read from the environment.

    ``TEST_CONFIG``: path of the profile file.
    ``TEST_ENV`` / ``BROWSER``: environment and browser profile names.
    ``BROWSER_KIND``: engine to launch (chromium, firefox or webkit).
    ``HEADLESS``: ``"false"`` forces a headed browser; any other value
    keeps the profile's own setting.
    ``RECORD_VIDEO``: ``"true"`` records one video per scenario.
    ``RESULTS_DIR``: root of the results tree (reports, screenshots, videos).
    ``LOG_LEVEL`` / ``LOG_FILE``: log level, and a file that receives a copy of
    the log (``todo-e2e run`` points it at ``<RESULTS_DIR>/run.log``).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TEST_CONFIG: str = "test.config.json"
    TEST_ENV: Optional[str] = None
    BROWSER: Optional[str] = None
    BROWSER_KIND: Optional[str] = None
    HEADLESS: Optional[str] = None
    RECORD_VIDEO: str = "false"
    RESULTS_DIR: str = "./test-results"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @property
    def record_video(self) -> bool:
        return self.RECORD_VIDEO == "true"

    @property
    def results_dir(self) -> Path:
        return Path(self.RESULTS_DIR)

    @property
    def log_file(self) -> Optional[Path]:
        return Path(self.LOG_FILE) if self.LOG_FILE else None

    def resolve_headless(self, profile: BrowserProfile) -> bool:
        return self.HEADLESS != "false" and profile.headless


def _read_raw(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not load configuration file: {path} ({exc})") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(content)
        return json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Could not parse configuration file: {path} ({exc})") from exc


class ConfigLoader:
    """Load the profile file and resolve named profiles."""

    def __init__(self, path: str | Path | None = None, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self._path = Path(path or self._settings.TEST_CONFIG)
        self._config = self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> Settings:
        return self._settings

    def _load(self) -> TestConfiguration:
        raw = _read_raw(self._path)
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Configuration file {self._path} must contain an object at the top level")
        try:
            return TestConfiguration.model_validate(raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration file {self._path}:\n{exc}") from exc

    def selected_environment_name(self, name: str | None = None) -> str:
        return name or self._settings.TEST_ENV or self._config.default.environment

    def selected_browser_name(self, name: str | None = None) -> str:
        return name or self._settings.BROWSER or self._config.default.browser

    def get_environment(self, name: str | None = None) -> EnvironmentProfile:
        """Resolve an environment profile: ``name``, then ``TEST_ENV``, then the default."""
        environment_name = self.selected_environment_name(name)
        profile = self._config.environments.get(environment_name)
        if profile is None:
            raise ProfileNotFoundError(
                f'Environment "{environment_name}" not found. '
                f"Available environments: {', '.join(self.available_environments())}"
            )
        return profile

    def get_browser(self, name: str | None = None) -> BrowserProfile:
        """Resolve a browser profile: ``name``, then ``BROWSER``, then the default."""
        browser_name = self.selected_browser_name(name)
        profile = self._config.browsers.get(browser_name)
        if profile is None:
            raise ProfileNotFoundError(
                f'Browser "{browser_name}" not found. '
                f"Available browsers: {', '.join(self.available_browsers())}"
            )
        return profile

    def available_environments(self) -> List[str]:
        return list(self._config.environments)

    def available_browsers(self) -> List[str]:
        return list(self._config.browsers)

    def full_config(self) -> TestConfiguration:
        return self._config

    def describe(self) -> List[str]:
        """Log the selected configuration and return the lines written."""
        env = self.get_environment()
        browser = self.get_browser()
        lines = [
            "Test Configuration",
            "========================",
            f"Environment: {env.name}",
            f"   Base URL: {env.base_url}",
            f"   Timeout: {env.timeout}ms",
        ]
        if env.slow_mo:
            lines.append(f"   Slow Motion: {env.slow_mo}ms")
        lines.extend(
            [
                f"Browser: {self.selected_browser_name()}",
                f"   Headless: {self._settings.resolve_headless(browser)}",
                f"   Viewport: {browser.viewport.width}x{browser.viewport.height}",
                "========================",
            ]
        )
        for line in lines:
            logger.info(line)
        return lines


__all__ = [
    "BrowserProfile",
    "ConfigLoader",
    "DefaultSelection",
    "EnvironmentProfile",
    "Settings",
    "TestConfiguration",
    "Viewport",
]
