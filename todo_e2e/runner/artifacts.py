"""
Failure artifacts for a finished scenario.

When a scenario fails the world leaves behind:

- a full-page screenshot (``screenshots/failure-<epoch ms>.png``)
- the recorded video, renamed after the scenario (``videos/<name>_<ts>.webm``)
- a text block describing the failure (scenario, feature, tags, duration, date)
- one JSON line in ``failures.jsonl`` tying the above to the scenario name,
  which the HTML report reads back

Every capture function here is best-effort: errors are logged and recorded
on the returned :class:`FailureArtifacts`, never raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import allure
from playwright.sync_api import Page

from todo_e2e.core.constants import FAILURE_MANIFEST, MAX_VIDEO_NAME_LENGTH, SCREENSHOTS_DIR

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
# "File ..." / "at ..." frames, or pytest's "path.py:12: AssertionError" location lines.
_FRAME = re.compile(r"^\s*(?:File |at )|^\S+\.py:\d+: ")

# (body, name, mime type)
Attach = Callable[[Union[bytes, str], str, str], None]


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    status: str = "passed"
    uri: str = ""
    tags: Sequence[str] = ()
    error: Optional[str] = None
    duration: Optional[float] = None

    @property
    def failed(self) -> bool:
        return self.status == "failed"


@dataclass
class FailureArtifacts:
    scenario: str
    uri: str = ""
    screenshot: Optional[str] = None
    video: Optional[str] = None
    summary: Optional[str] = None
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def sanitize_scenario_name(name: str) -> str:
    """Reduce a scenario name to ``[A-Za-z0-9_-]``, at most 50 characters.

    Lossy and collision-prone by construction: different names can map to
    the same result.
    """
    cleaned = _DISALLOWED.sub("", name)
    cleaned = _WHITESPACE.sub("_", cleaned)
    return cleaned[:MAX_VIDEO_NAME_LENGTH]


def file_timestamp(when: datetime) -> str:
    """UTC timestamp to the second, safe for file names (``2024-05-01T09-30-00``)."""
    if when.tzinfo is not None:
        when = when.astimezone(timezone.utc)
    return when.strftime("%Y-%m-%dT%H-%M-%S")


def video_file_name(scenario_name: str, when: datetime) -> str:
    return f"{sanitize_scenario_name(scenario_name)}_{file_timestamp(when)}.webm"


def failure_summary(result: ScenarioResult, when: datetime) -> str:
    tags = ", ".join(result.tags) or "No tags"
    duration = f"{result.duration:.2f}s" if result.duration is not None else "N/A"
    rule = "━" * 48
    return "\n".join(
        [
            "FAILURE INFORMATION:",
            rule,
            f"Scenario: {result.name}",
            f"Feature: {result.uri or '-'}",
            f"Tags: {tags}",
            f"Duration: {duration}",
            f"Date: {when.astimezone().strftime('%m/%d/%Y, %I:%M:%S %p')}",
            rule,
        ]
    )


def stack_trace_lines(message: str) -> str:
    """Lines of a failure message that locate a traceback frame."""
    frames = [line for line in message.splitlines() if _FRAME.match(line)]
    return "\n".join(frames)


def allure_attach(body: Union[bytes, str], name: str, mime_type: str) -> None:
    """Attach to the running test's Allure result (a no-op without ``--alluredir``)."""
    attachment_type = {
        "image/png": allure.attachment_type.PNG,
        "video/webm": allure.attachment_type.WEBM,
        "text/plain": allure.attachment_type.TEXT,
    }.get(mime_type, allure.attachment_type.TEXT)
    allure.attach(body, name=name, attachment_type=attachment_type)


def capture_screenshot(page: Page, results_dir: Path, when: datetime, artifacts: FailureArtifacts) -> Optional[Path]:
    try:
        shots_dir = results_dir / SCREENSHOTS_DIR
        shots_dir.mkdir(parents=True, exist_ok=True)
        path = shots_dir / f"failure-{int(when.timestamp() * 1000)}.png"
        page.screenshot(path=str(path), full_page=True)
    except Exception as exc:
        logger.warning("Error capturing screenshot: %s", exc)
        artifacts.errors.append(f"screenshot: {exc}")
        return None
    artifacts.screenshot = str(path)
    logger.info("Screenshot saved: %s", path)
    return path


def rename_video(original: Optional[str], scenario_name: str, when: datetime, artifacts: FailureArtifacts) -> Optional[Path]:
    """Move the recorded video next to itself under a scenario-derived name.

    Returns ``None`` without logging when there is no recording on disk.
    """
    if not original:
        return None
    source = Path(original)
    if not source.exists():
        return None
    target = source.with_name(video_file_name(scenario_name, when))
    try:
        source.replace(target)
    except OSError as exc:
        logger.warning("Error processing video: %s", exc)
        artifacts.errors.append(f"video: {exc}")
        return None
    artifacts.video = str(target)
    logger.info("Video saved: %s", target)
    return target


def append_manifest(results_dir: Path, artifacts: FailureArtifacts) -> None:
    try:
        results_dir.mkdir(parents=True, exist_ok=True)
        with (results_dir / FAILURE_MANIFEST).open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(artifacts.to_dict(), ensure_ascii=False) + "\n")
    except OSError as exc:
        logger.warning("Error writing failure manifest: %s", exc)


__all__ = [
    "Attach",
    "FailureArtifacts",
    "ScenarioResult",
    "allure_attach",
    "append_manifest",
    "capture_screenshot",
    "failure_summary",
    "file_timestamp",
    "rename_video",
    "sanitize_scenario_name",
    "stack_trace_lines",
    "video_file_name",
]
