"""
Command line entry point.

Usage:
  todo-e2e run                              # all scenarios, default profiles
  todo-e2e run --env staging --browser-kind firefox --record-video --report
  todo-e2e report --format pdf --output test-results/report.pdf
  todo-e2e config --env local
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from todo_e2e.core.config import ConfigLoader, Settings
from todo_e2e.core.constants import HTML_REPORT, RUN_LOG
from todo_e2e.core.errors import ConfigurationError
from todo_e2e.core.logging import configure_logging
from todo_e2e.runner.browsers import BrowserKind

LOGGER = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo-e2e", description="TodoMVC browser acceptance suite")
    parser.add_argument("--log-level", default=None, help="Console log level (default: LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the scenarios")
    run.add_argument("paths", nargs="*", help="Feature test modules or directories (default: tests/e2e)")
    run.add_argument("--config", dest="config_path", help="Profile file (TEST_CONFIG)")
    run.add_argument("--env", help="Environment profile name (TEST_ENV)")
    run.add_argument("--browser", help="Browser profile name (BROWSER)")
    run.add_argument("--browser-kind", choices=[kind.value for kind in BrowserKind], help="Browser engine (BROWSER_KIND)")
    run.add_argument("--headed", action="store_true", help="Force a visible browser (HEADLESS=false)")
    run.add_argument("--record-video", action="store_true", help="Record one video per scenario (RECORD_VIDEO=true)")
    run.add_argument("--results-dir", type=Path, help="Results tree root (RESULTS_DIR)")
    run.add_argument("-k", dest="keyword", help="Only run scenarios matching this pytest keyword expression")
    run.add_argument("-m", dest="markexpr", help="Only run scenarios matching this marker (tag) expression")
    run.add_argument("--report", action="store_true", help="Generate the HTML report after the run")

    report = sub.add_parser("report", help="Build a report from existing results")
    report.add_argument("--json-dir", type=Path, help="Directory with cucumber JSON results (default: RESULTS_DIR)")
    report.add_argument("--output", type=Path, help="Report file (default: <json-dir>/index.html)")
    report.add_argument("--format", choices=["html", "pdf"], default="html")

    config = sub.add_parser("config", help="Show the resolved configuration")
    config.add_argument("--config", dest="config_path", help="Profile file (TEST_CONFIG)")
    config.add_argument("--env", help="Environment profile name")
    config.add_argument("--browser", help="Browser profile name")

    return parser


def _run_overrides(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    return {
        "TEST_CONFIG": args.config_path,
        "TEST_ENV": args.env,
        "BROWSER": args.browser,
        "BROWSER_KIND": args.browser_kind,
        "HEADLESS": "false" if args.headed else None,
        "RECORD_VIDEO": "true" if args.record_video else None,
    }


def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    from todo_e2e.runner.pytest_entry import run_suite

    results_dir = args.results_dir or settings.results_dir
    level = args.log_level or settings.LOG_LEVEL
    configure_logging(level, results_dir / RUN_LOG)
    exit_code = run_suite(
        results_dir,
        overrides={**_run_overrides(args), "LOG_LEVEL": level},
        paths=args.paths,
        keyword=args.keyword,
        markexpr=args.markexpr,
    )
    if args.report:
        from todo_e2e.reporting.html_report import generate_html_report

        generate_html_report(results_dir)
    return exit_code


def _cmd_report(args: argparse.Namespace, settings: Settings) -> int:
    json_dir = args.json_dir or settings.results_dir
    if args.format == "pdf":
        from todo_e2e.reporting.pdf_report import generate_pdf_report

        generate_pdf_report(json_dir, args.output or json_dir / "report.pdf")
    else:
        from todo_e2e.reporting.html_report import generate_html_report

        generate_html_report(json_dir, args.output or json_dir / HTML_REPORT)
    return 0


def _cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    if args.env:
        settings.TEST_ENV = args.env
    if args.browser:
        settings.BROWSER = args.browser
    try:
        ConfigLoader(args.config_path, settings).describe()
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return 2
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(args.log_level or settings.LOG_LEVEL)

    handlers = {"run": _cmd_run, "report": _cmd_report, "config": _cmd_config}
    return handlers[args.command](args, settings)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
