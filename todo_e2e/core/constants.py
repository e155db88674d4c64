"""Shared constants."""

TIMEOUTS = {
    "SHORT": 5_000,
    "MEDIUM": 10_000,
    "LONG": 30_000,
    "EXTRA_LONG": 60_000,
}

DEFAULT_TODO_URL = "https://demo.playwright.dev/todomvc"

# Layout of the results tree (relative to Settings.RESULTS_DIR).
SCREENSHOTS_DIR = "screenshots"
VIDEOS_DIR = "videos"
ALLURE_DIR = "allure-results"
CUCUMBER_JSON = "cucumber-report.json"
FAILURE_MANIFEST = "failures.jsonl"
HTML_REPORT = "index.html"
RUN_LOG = "run.log"

MAX_VIDEO_NAME_LENGTH = 50
