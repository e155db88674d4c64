"""
Reading run results back from disk.

Two inputs feed the reports:

* cucumber-style JSON written by pytest-bdd (``--cucumberjson``), one list
  of features per file;
* ``failures.jsonl``, one line per failed scenario with the screenshot,
  video and summary the scenario world captured.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from todo_e2e.core.constants import FAILURE_MANIFEST

logger = logging.getLogger(__name__)

PASSED = "passed"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass
class StepReport:
    keyword: str
    name: str
    status: str
    duration: float = 0.0
    error_message: Optional[str] = None


@dataclass
class ScenarioReport:
    name: str
    uri: str = ""
    tags: List[str] = field(default_factory=list)
    steps: List[StepReport] = field(default_factory=list)
    artifacts: Optional[Dict[str, Any]] = None

    @property
    def status(self) -> str:
        statuses = [step.status for step in self.steps]
        if FAILED in statuses:
            return FAILED
        if statuses and all(status == SKIPPED for status in statuses):
            return SKIPPED
        return PASSED

    @property
    def duration(self) -> float:
        return sum(step.duration for step in self.steps)

    @property
    def error_message(self) -> Optional[str]:
        for step in self.steps:
            if step.error_message:
                return step.error_message
        return None


@dataclass
class FeatureReport:
    name: str
    uri: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    scenarios: List[ScenarioReport] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for scenario in self.scenarios if scenario.status == status)

    @property
    def status(self) -> str:
        return FAILED if self.count(FAILED) else PASSED

    @property
    def duration(self) -> float:
        return sum(scenario.duration for scenario in self.scenarios)


def _tag_names(raw: Iterable[Any]) -> List[str]:
    names: List[str] = []
    for tag in raw or []:
        name = tag.get("name") if isinstance(tag, dict) else tag
        if name:
            names.append(str(name).lstrip("@"))
    return names


def _parse_step(raw: Dict[str, Any]) -> StepReport:
    result = raw.get("result") or {}
    duration_ns = result.get("duration") or 0
    return StepReport(
        keyword=str(raw.get("keyword") or "").strip(),
        name=str(raw.get("name") or ""),
        status=str(result.get("status") or SKIPPED),
        duration=float(duration_ns) / 1e9,
        error_message=result.get("error_message"),
    )


def parse_features(data: Any) -> List[FeatureReport]:
    """Convert one cucumber JSON document into :class:`FeatureReport` objects."""
    features: List[FeatureReport] = []
    if not isinstance(data, list):
        return features
    for raw_feature in data:
        if not isinstance(raw_feature, dict):
            continue
        uri = str(raw_feature.get("uri") or "")
        feature = FeatureReport(
            name=str(raw_feature.get("name") or uri or "Unnamed feature"),
            uri=uri,
            description=str(raw_feature.get("description") or "").strip(),
            tags=_tag_names(raw_feature.get("tags")),
        )
        for element in raw_feature.get("elements") or []:
            if not isinstance(element, dict) or element.get("type", "scenario") != "scenario":
                continue
            feature.scenarios.append(
                ScenarioReport(
                    name=str(element.get("name") or ""),
                    uri=uri,
                    tags=_tag_names(element.get("tags")),
                    steps=[_parse_step(step) for step in element.get("steps") or [] if isinstance(step, dict)],
                )
            )
        features.append(feature)
    return features


def load_features(json_dir: Path) -> List[FeatureReport]:
    """Read every cucumber JSON file in ``json_dir``; unreadable files are skipped."""
    features: List[FeatureReport] = []
    if not json_dir.is_dir():
        return features
    for path in sorted(json_dir.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        features.extend(parse_features(data))
    return features


def load_failure_manifest(results_dir: Path) -> List[Dict[str, Any]]:
    path = results_dir / FAILURE_MANIFEST
    if not path.exists():
        return []
    rows: List[Dict[str, Any]] = []
    for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed line in %s", path)
            continue
        if isinstance(row, dict):
            rows.append(row)
    return rows


def attach_artifacts(features: List[FeatureReport], manifest: List[Dict[str, Any]]) -> None:
    """Link manifest rows to failed scenarios by name (and feature uri when known).

    A later row for the same scenario wins, so re-runs show the newest media.
    """
    for scenario in (s for f in features for s in f.scenarios):
        if scenario.status != FAILED:
            continue
        for row in manifest:
            if row.get("scenario") != scenario.name:
                continue
            row_uri = row.get("uri") or ""
            if row_uri and scenario.uri and not (row_uri.endswith(scenario.uri) or scenario.uri.endswith(row_uri)):
                continue
            scenario.artifacts = row


__all__ = [
    "FAILED",
    "PASSED",
    "SKIPPED",
    "FeatureReport",
    "ScenarioReport",
    "StepReport",
    "attach_artifacts",
    "load_failure_manifest",
    "load_features",
    "parse_features",
]
