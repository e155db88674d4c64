"""
Shared pytest configuration for the TodoMVC suite.

Adds the ``--browser-kind`` and ``--test-config`` options, exposes the
resolved settings and profile file as session fixtures, and records the
outcome of every test phase on the item so the scenario world can tell a
failed scenario from a passing one when it tears down.
"""

import logging

import pytest

from todo_e2e.core.config import Settings
from todo_e2e.core.logging import configure_logging
from todo_e2e.runner.pytest_entry import load_session_config

pytest_plugins = [
    "pytester",
    "todo_e2e.steps.common_steps",
    "todo_e2e.steps.todo_steps",
]

logger = logging.getLogger("todo_e2e.tests")


def pytest_addoption(parser):
    """Hook to add custom command-line options to pytest."""
    parser.addoption("--browser-kind", action="store", default=None, help="chromium, firefox or webkit")
    parser.addoption("--test-config", action="store", default=None, help="Profile file (defaults to TEST_CONFIG)")


def pytest_sessionstart(session):
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.log_file)


def pytest_sessionfinish(session, exitstatus):
    logger.info("Test suite completed (exit status %s)", int(exitstatus))


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Keep each phase's report on the item as ``rep_setup``, ``rep_call``, ``rep_teardown``."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(scope="session")
def settings():
    """Process-level overrides (``TEST_ENV``, ``BROWSER``, ``HEADLESS``...)."""
    return Settings()


@pytest.fixture(scope="session")
def test_config(pytestconfig, settings):
    """
    The loaded profile file.

    A missing or malformed file ends the session here, before the first
    scenario launches a browser.
    """
    return load_session_config(pytestconfig.getoption("--test-config"), settings)
