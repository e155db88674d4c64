"""
HTML report for a run.

Renders the cucumber JSON results (plus the failure manifest written by the
scenario world) into a single ``index.html`` next to them. Screenshots and
videos are referenced by relative path, so the results directory can be
archived or served as a whole.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from todo_e2e.core.constants import HTML_REPORT
from todo_e2e.reporting.results import (
    FAILED,
    PASSED,
    SKIPPED,
    FeatureReport,
    attach_artifacts,
    load_failure_manifest,
    load_features,
)

logger = logging.getLogger(__name__)

REPORT_NAME = "TodoMVC Test Report"
PAGE_TITLE = "TodoMVC - Execution Report"


def _environment(report_dir: Path) -> Environment:
    env = Environment(
        loader=PackageLoader("todo_e2e.reporting", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["seconds"] = lambda value: f"{value:.2f}s"
    env.filters["relpath"] = lambda path: _relative(path, report_dir)
    return env


def _relative(path: Optional[str], base: Path) -> Optional[str]:
    if not path:
        return None
    try:
        return Path(os.path.relpath(Path(path).resolve(), base.resolve())).as_posix()
    except ValueError:
        # Different drive on Windows; fall back to the absolute path.
        return Path(path).resolve().as_posix()


def build_context(
    features: List[FeatureReport],
    generated_at: Optional[datetime] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    generated_at = generated_at or datetime.now()
    scenarios = [s for f in features for s in f.scenarios]
    return {
        "report_name": REPORT_NAME,
        "page_title": PAGE_TITLE,
        "generated_at": generated_at.strftime("%m/%d/%Y, %I:%M:%S %p"),
        "features": features,
        "totals": {
            "features": len(features),
            "scenarios": len(scenarios),
            PASSED: sum(1 for s in scenarios if s.status == PASSED),
            FAILED: sum(1 for s in scenarios if s.status == FAILED),
            SKIPPED: sum(1 for s in scenarios if s.status == SKIPPED),
            "duration": sum(f.duration for f in features),
        },
        "metadata": metadata or default_metadata(),
        "custom_data": [
            ("Project", "TodoMVC Automation Framework"),
            ("Framework", "Playwright + pytest-bdd + Page Objects"),
            ("Date", generated_at.strftime("%m/%d/%Y, %I:%M:%S %p")),
            ("Environment", os.environ.get("TEST_ENV") or "default"),
        ],
    }


def default_metadata() -> Dict[str, Any]:
    return {
        "browser": os.environ.get("BROWSER_KIND") or "chromium",
        "device": "Local Machine",
        "platform": f"{sys.platform} ({platform.release()})",
        "python": platform.python_version(),
    }


def generate_html_report(json_dir: Path, report_path: Optional[Path] = None) -> Path:
    """
    Render ``index.html`` from the results in ``json_dir``.

    :param json_dir: Directory holding cucumber JSON files and ``failures.jsonl``
    :param report_path: Output file; defaults to ``json_dir/index.html``
    :return: Path of the written report
    """
    report_path = report_path or json_dir / HTML_REPORT
    report_path.parent.mkdir(parents=True, exist_ok=True)

    features = load_features(json_dir)
    attach_artifacts(features, load_failure_manifest(json_dir))

    template = _environment(report_path.parent).get_template("report.html")
    html = template.render(**build_context(features))
    report_path.write_text(html, encoding="utf-8")
    logger.info("HTML report generated at: %s", report_path)
    return report_path


__all__ = ["PAGE_TITLE", "REPORT_NAME", "build_context", "default_metadata", "generate_html_report"]
