from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Image, Paragraph, Preformatted, SimpleDocTemplate, Spacer, Table, TableStyle

from todo_e2e.reporting.html_report import REPORT_NAME
from todo_e2e.reporting.results import FAILED, FeatureReport, attach_artifacts, load_failure_manifest, load_features

logger = logging.getLogger(__name__)

_TABLE_STYLE = [
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F2F4F7")),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#D0D5DD")),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("PADDING", (0, 0), (-1, -1), 5),
]


def _status_color(status: str):
    return colors.HexColor("#B42318") if status == FAILED else colors.HexColor("#067647")


def _make_summary_table(features: List[FeatureReport]) -> Table:
    data: List[List[Any]] = [["Feature", "Scenario", "Status", "Duration"]]
    style = list(_TABLE_STYLE)
    for feature in features:
        for scenario in feature.scenarios:
            data.append([feature.name, scenario.name, scenario.status.upper(), f"{scenario.duration:.2f}s"])
            style.append(("TEXTCOLOR", (2, len(data) - 1), (2, len(data) - 1), _status_color(scenario.status)))
    table = Table(data, colWidths=[4.5 * cm, 8.0 * cm, 2.0 * cm, 2.0 * cm], repeatRows=1)
    table.setStyle(TableStyle(style))
    return table


def _excerpt(message: str, max_lines: int = 20) -> str:
    return "\n".join(message.splitlines()[:max_lines])


def generate_pdf_report(json_dir: Path, output_path: Path, generated_at: Optional[datetime] = None) -> Path:
    """
    Write a printable summary of a run: one table row per scenario, then the
    error excerpt and failure screenshot for every failed scenario.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    features = load_features(json_dir)
    attach_artifacts(features, load_failure_manifest(json_dir))

    styles = getSampleStyleSheet()
    story: List[Any] = []
    now = generated_at or datetime.now(timezone.utc)

    story.append(Paragraph(REPORT_NAME, styles["Title"]))
    story.append(Paragraph(f"Generated (UTC): {now.isoformat()}", styles["Normal"]))
    story.append(Spacer(1, 0.4 * cm))

    scenarios = [s for f in features for s in f.scenarios]
    failed = [s for s in scenarios if s.status == FAILED]
    story.append(Paragraph(f"{len(scenarios)} scenarios, {len(failed)} failed", styles["Heading2"]))
    if scenarios:
        story.append(_make_summary_table(features))
    else:
        story.append(Paragraph("No results found.", styles["Normal"]))
    story.append(Spacer(1, 0.5 * cm))

    for scenario in failed:
        story.append(Paragraph(f"Failure: {scenario.name}", styles["Heading2"]))
        if scenario.error_message:
            story.append(Preformatted(_excerpt(scenario.error_message), styles["Code"]))
        shot = (scenario.artifacts or {}).get("screenshot")
        if shot and Path(shot).exists():
            try:
                img = Image(str(shot))
                img._restrictSize(18.0 * cm, 20.0 * cm)  # fit within A4 with margins
                story.append(img)
            except Exception as exc:
                logger.warning("Failed to embed %s: %s", shot, exc)
                story.append(Preformatted(f"(failed to embed image: {shot})", styles["Code"]))
        story.append(Spacer(1, 0.4 * cm))

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=1.5 * cm,
        rightMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=REPORT_NAME,
    )
    doc.build(story)
    logger.info("PDF report generated at: %s", output_path)
    return output_path


__all__ = ["generate_pdf_report"]
