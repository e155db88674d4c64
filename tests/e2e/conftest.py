"""
Browser fixtures for the Gherkin scenarios.

One Playwright driver is started per session. Every scenario gets its own
:class:`~todo_e2e.runner.world.ScenarioWorld` (fresh browser, context and
page), which is ended after the test with the outcome of its call phase so
that failures leave a screenshot, video and summary behind.
"""

import logging

import pytest
from playwright.sync_api import sync_playwright

from todo_e2e.runner.artifacts import ScenarioResult
from todo_e2e.runner.world import ScenarioWorld

logger = logging.getLogger("todo_e2e.tests")

SCENARIO_KEY = pytest.StashKey[dict]()


def pytest_bdd_before_scenario(request, feature, scenario):
    logger.info("Running: %s", scenario.name)
    request.node.stash[SCENARIO_KEY] = {
        "name": scenario.name,
        "uri": feature.rel_filename,
        "tags": sorted(scenario.tags),
    }


def _scenario_result(node) -> ScenarioResult:
    info = node.stash.get(SCENARIO_KEY, {})
    report = getattr(node, "rep_call", None)
    if report is None:
        # Setup failed or was skipped; the scenario body never ran.
        setup = getattr(node, "rep_setup", None)
        status = "failed" if setup is not None and setup.failed else "skipped"
        error = setup.longreprtext if setup is not None and setup.failed else None
        duration = None
    else:
        status = "failed" if report.failed else "skipped" if report.skipped else "passed"
        error = report.longreprtext if report.failed else None
        duration = report.duration
    return ScenarioResult(
        name=info.get("name", node.name),
        status=status,
        uri=info.get("uri", ""),
        tags=tuple(info.get("tags", ())),
        error=error,
        duration=duration,
    )


@pytest.fixture(scope="session")
def playwright():
    """The Playwright driver shared by every scenario of the session."""
    pw = sync_playwright().start()
    yield pw
    pw.stop()


@pytest.fixture(autouse=True)
def world(request, test_config, settings, playwright):
    """Fresh browser, context and page for one scenario."""
    scenario_world = ScenarioWorld(test_config, playwright, settings=settings)
    scenario_world.begin(request.config.getoption("--browser-kind"))
    yield scenario_world
    scenario_world.end(_scenario_result(request.node))


@pytest.fixture
def todo_page(world):
    return world.todo_page


@pytest.fixture
def page_actions(world):
    return world.actions
