"""
Programmatic pytest invocation for a suite run.

The CLI's ``run`` command ends up here: the process-level overrides are
exported to the environment (where :class:`~todo_e2e.core.config.Settings`
picks them up inside the pytest session), the result files are pointed at
the results tree, and pytest's exit code is handed back unchanged so the
calling process fails when any scenario fails.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from todo_e2e.core.config import ConfigLoader, Settings
from todo_e2e.core.constants import ALLURE_DIR, CUCUMBER_JSON, FAILURE_MANIFEST, RUN_LOG
from todo_e2e.core.errors import ConfigurationError

DEFAULT_TEST_PATHS = ("tests/e2e",)


def build_pytest_args(
    results_dir: Path,
    paths: Sequence[str] = (),
    keyword: Optional[str] = None,
    markexpr: Optional[str] = None,
    extra: Sequence[str] = (),
) -> List[str]:
    args: List[str] = list(paths or DEFAULT_TEST_PATHS)
    args += [
        f"--cucumberjson={results_dir / CUCUMBER_JSON}",
        f"--alluredir={results_dir / ALLURE_DIR}",
    ]
    if keyword:
        args += ["-k", keyword]
    # pyproject deselects e2e by default; a suite run always selects it back.
    args += ["-m", f"e2e and ({markexpr})" if markexpr else "e2e"]
    args += list(extra)
    return args


def export_overrides(overrides: Dict[str, Optional[str]]) -> None:
    """Copy the non-empty overrides into ``os.environ``."""
    for name, value in overrides.items():
        if value is not None and value != "":
            os.environ[name] = value


def load_session_config(path: Optional[str], settings: Settings) -> ConfigLoader:
    """
    Load the profile file for a pytest session.

    A missing or malformed file ends the whole session with
    ``ExitCode.USAGE_ERROR`` instead of erroring every scenario.
    """
    try:
        loader = ConfigLoader(path, settings)
        loader.describe()
    except ConfigurationError as exc:
        pytest.exit(f"Configuration error: {exc}", returncode=pytest.ExitCode.USAGE_ERROR)
    return loader


def run_suite(
    results_dir: Path,
    overrides: Optional[Dict[str, Optional[str]]] = None,
    paths: Sequence[str] = (),
    keyword: Optional[str] = None,
    markexpr: Optional[str] = None,
    extra: Sequence[str] = (),
) -> int:
    """
    Execute the scenarios and return pytest's exit code.

    :param results_dir: Root of the results tree (JSON, Allure, media)
    :param overrides: Environment variables to export before the session starts
    :return: ``0`` when every scenario passed, non-zero otherwise
    """
    results_dir.mkdir(parents=True, exist_ok=True)
    # The manifest is appended to per failure; start each run with an empty one.
    (results_dir / FAILURE_MANIFEST).unlink(missing_ok=True)
    export_overrides({
        "RESULTS_DIR": str(results_dir),
        "LOG_FILE": str(results_dir / RUN_LOG),
        **(overrides or {}),
    })
    return int(pytest.main(build_pytest_args(results_dir, paths, keyword, markexpr, extra)))


__all__ = ["DEFAULT_TEST_PATHS", "build_pytest_args", "export_overrides", "load_session_config", "run_suite"]
