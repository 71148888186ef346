"""Dashboard and summary rendering.

This module provides the ReportRenderer class, which turns the performance and
load MetricsSummary objects into:
- an HTML dashboard (standalone page with metric cards and report links)
- a Markdown summary (metric tables for embedding in a review comment)

Rendering goes through a small view model (build_sections) and embedded Jinja2
templates; only ReportRenderer.write touches the filesystem.
"""

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Optional, Sequence, Tuple, Union

from jinja2 import Template, TemplateError

from ...utils.formatting import format_fixed, format_number, format_timestamp
from ...utils.logging import get_logger
from ..errors import WriteFailureError
from ..models import MetricsSummary
from .thresholds import (
    STATUS_CSS_CLASSES,
    STATUS_ICONS,
    Status,
    classify_avg_response_time,
    classify_failed_requests,
    classify_max_response_time,
    classify_p95_response_time,
    classify_success_rate,
)

if TYPE_CHECKING:
    from ...config import ReportConfig

logger = get_logger(__name__)

DEFAULT_TITLE = "API Performance Dashboard"
DEFAULT_PERFORMANCE_REPORT = "performance-report.html"
DEFAULT_LOAD_REPORT = "load-test-report.html"
DEFAULT_DETAILS_URL = "https://yourusername.github.io/your-repo/performance-reports/"


@dataclass(frozen=True)
class MetricDefinition:
    label: str
    display: Callable[[MetricsSummary], str]
    classify: Callable[[MetricsSummary], Status]


METRICS: Dict[str, MetricDefinition] = {
    "success_rate": MetricDefinition(
        label="Success Rate",
        display=lambda s: f"{format_fixed(s.success_rate)}%",
        classify=lambda s: classify_success_rate(s.success_rate),
    ),
    "avg_response_time": MetricDefinition(
        label="Avg Response Time",
        display=lambda s: f"{format_fixed(s.avg_response_time)}ms",
        classify=lambda s: classify_avg_response_time(s.avg_response_time),
    ),
    "p95_response_time": MetricDefinition(
        label="95th Percentile",
        display=lambda s: f"{format_number(s.p95_response_time)}ms",
        classify=lambda s: classify_p95_response_time(s.p95_response_time),
    ),
    "max_response_time": MetricDefinition(
        label="Max Response Time",
        display=lambda s: f"{format_number(s.max_response_time)}ms",
        classify=lambda s: classify_max_response_time(s.max_response_time),
    ),
    "total_requests": MetricDefinition(
        label="Total Requests",
        display=lambda s: str(s.total_requests),
        classify=lambda s: Status.INFO,
    ),
    "failed_requests": MetricDefinition(
        label="Failed Requests",
        display=lambda s: str(s.failed_requests),
        classify=lambda s: classify_failed_requests(s.failed_requests),
    ),
}


@dataclass(frozen=True)
class SectionLayout:
    """Which metrics a results category shows on each artifact."""

    key: str
    title: str
    placeholder: str
    cards: Tuple[str, ...]
    rows: Tuple[str, ...]


PERFORMANCE_LAYOUT = SectionLayout(
    key="performance",
    title="Performance Test Results",
    placeholder="No performance test data available",
    cards=("success_rate", "avg_response_time", "p95_response_time", "total_requests"),
    rows=("success_rate", "avg_response_time", "p95_response_time", "total_requests", "failed_requests"),
)

LOAD_LAYOUT = SectionLayout(
    key="load",
    title="Load Test Results",
    placeholder="No load test data available",
    cards=("success_rate", "avg_response_time", "max_response_time", "total_requests"),
    rows=("success_rate", "avg_response_time", "max_response_time", "total_requests"),
)


@dataclass(frozen=True)
class MetricView:
    label: str
    value: str
    status: Status

    @property
    def card_class(self) -> str:
        css_class = STATUS_CSS_CLASSES[self.status]
        return f"metric-card {css_class}" if css_class else "metric-card"

    @property
    def icon(self) -> str:
        return STATUS_ICONS[self.status]


@dataclass(frozen=True)
class SectionView:
    key: str
    title: str
    placeholder: str
    present: bool
    cards: Tuple[MetricView, ...] = ()
    rows: Tuple[MetricView, ...] = ()


@dataclass(frozen=True)
class ReportLink:
    href: str
    label: str


@dataclass(frozen=True)
class RenderedReports:
    dashboard: str
    summary: str
    generated_at: str


def _metric_views(summary: MetricsSummary, names: Sequence[str]) -> Tuple[MetricView, ...]:
    views = []
    for name in names:
        definition = METRICS[name]
        views.append(
            MetricView(
                label=definition.label,
                value=definition.display(summary),
                status=definition.classify(summary),
            )
        )
    return tuple(views)


def build_section(layout: SectionLayout, summary: Optional[MetricsSummary]) -> SectionView:
    if summary is None:
        return SectionView(
            key=layout.key, title=layout.title, placeholder=layout.placeholder, present=False
        )
    return SectionView(
        key=layout.key,
        title=layout.title,
        placeholder=layout.placeholder,
        present=True,
        cards=_metric_views(summary, layout.cards),
        rows=_metric_views(summary, layout.rows),
    )


def build_sections(
    performance: Optional[MetricsSummary], load: Optional[MetricsSummary]
) -> Tuple[SectionView, SectionView]:
    """Build the view model for both results categories.

    Args:
        performance: Performance test metrics, or None if there is no data.
        load: Load test metrics, or None if there is no data.

    Returns:
        (performance section, load section); absent data yields a section with
        ``present=False`` and no metrics.
    """
    return build_section(PERFORMANCE_LAYOUT, performance), build_section(LOAD_LAYOUT, load)


class ReportRenderer:
    """Renders and writes the dashboard and summary artifacts."""

    DASHBOARD_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
    <style>
        body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 0; padding: 20px; background-color: #f5f7fa; }
        .container { max-width: 1200px; margin: 0 auto; }
        .header { text-align: center; color: #2c3e50; margin-bottom: 30px; }
        .metrics-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .metric-card { background: white; padding: 20px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); border-left: 4px solid #3498db; }
        .metric-value { font-size: 2em; font-weight: bold; color: #2c3e50; }
        .metric-label { color: #7f8c8d; font-size: 0.9em; text-transform: uppercase; }
        .success { border-left-color: #27ae60; }
        .warning { border-left-color: #f39c12; }
        .error { border-left-color: #e74c3c; }
        .reports-section { background: white; padding: 20px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .report-link { display: inline-block; margin: 10px; padding: 10px 20px; background: #3498db; color: white; text-decoration: none; border-radius: 5px; }
        .report-link:hover { background: #2980b9; }
        .timestamp { text-align: center; color: #7f8c8d; margin-top: 20px; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🚀 {{ title }}</h1>
            <p>Automated performance testing results</p>
        </div>
{% for section in sections if section.present %}

        <h2>{{ section.title }}</h2>
        <div class="metrics-grid">
{% for card in section.cards %}
            <div class="{{ card.card_class }}">
                <div class="metric-value">{{ card.value }}</div>
                <div class="metric-label">{{ card.label }}</div>
            </div>
{% endfor %}
        </div>
{% endfor %}

        <div class="reports-section">
            <h2>📊 Detailed Reports</h2>
{% for link in links %}
            <a href="{{ link.href }}" class="report-link">{{ link.label }}</a>
{% endfor %}
        </div>

        <div class="timestamp">
            Last updated: {{ generated_at }}
        </div>
    </div>
</body>
</html>
"""

    SUMMARY_TEMPLATE = """{% for section in sections %}
### {{ section.title }}

{% if section.present %}
| Metric | Value | Status |
|--------|--------|--------|
{% for row in section.rows %}
| {{ row.label }} | {{ row.value }} | {{ row.icon }} |
{% endfor %}
{% else %}
{{ section.placeholder }}
{% endif %}

{% endfor %}
🔗 [View detailed reports]({{ details_url }})
"""

    def __init__(
        self,
        title: str = DEFAULT_TITLE,
        performance_report: str = DEFAULT_PERFORMANCE_REPORT,
        load_report: str = DEFAULT_LOAD_REPORT,
        details_url: str = DEFAULT_DETAILS_URL,
    ):
        self.title = title
        self.details_url = details_url
        self.links = (
            ReportLink(href=performance_report, label="Performance Test Report"),
            ReportLink(href=load_report, label="Load Test Report"),
        )
        template_options = dict(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
        self._dashboard_template = Template(self.DASHBOARD_TEMPLATE, autoescape=True, **template_options)
        self._summary_template = Template(self.SUMMARY_TEMPLATE, autoescape=False, **template_options)

    @classmethod
    def from_config(cls, config: "ReportConfig") -> "ReportRenderer":
        """Create a renderer from a ReportConfig."""
        return cls(
            title=config.dashboard_title,
            performance_report=config.performance_report,
            load_report=config.load_report,
            details_url=config.details_url,
        )

    def render_dashboard(self, sections: Sequence[SectionView], generated_at: str) -> str:
        """Render the HTML dashboard. Sections without data are omitted."""
        try:
            return self._dashboard_template.render(
                title=self.title,
                sections=sections,
                links=self.links,
                generated_at=generated_at,
            )
        except TemplateError as e:
            raise ValueError(f"Failed to render dashboard template: {e}") from e

    def render_summary(self, sections: Sequence[SectionView]) -> str:
        """Render the Markdown summary. Sections without data show a placeholder."""
        try:
            return self._summary_template.render(sections=sections, details_url=self.details_url)
        except TemplateError as e:
            raise ValueError(f"Failed to render summary template: {e}") from e

    def render(
        self,
        performance: Optional[MetricsSummary],
        load: Optional[MetricsSummary],
        generated_at: Optional[datetime] = None,
    ) -> RenderedReports:
        """Render both artifacts.

        Args:
            performance: Performance test metrics, or None.
            load: Load test metrics, or None.
            generated_at: Timestamp embedded in the dashboard (default: now).

        Returns:
            RenderedReports holding the dashboard HTML and summary Markdown.
        """
        timestamp = format_timestamp(generated_at or datetime.now(timezone.utc))
        sections = build_sections(performance, load)
        return RenderedReports(
            dashboard=self.render_dashboard(sections, timestamp),
            summary=self.render_summary(sections),
            generated_at=timestamp,
        )

    def write(
        self,
        reports: RenderedReports,
        dashboard_path: Union[str, Path],
        summary_path: Union[str, Path],
    ) -> None:
        """Write both artifacts, replacing existing files.

        Both destination directories are checked and both files are staged as
        temporary siblings before either destination is touched. If moving the
        second file into place fails, the first destination is restored, so
        either both files are updated or neither is.

        Raises:
            WriteFailureError: If a destination directory is missing or a write fails.
        """
        outputs = [(Path(dashboard_path), reports.dashboard), (Path(summary_path), reports.summary)]

        for path, _ in outputs:
            if not path.parent.is_dir():
                raise WriteFailureError("output directory does not exist", path.parent)

        staged = []
        try:
            for path, content in outputs:
                staged.append((path, _stage(path, content)))
            _commit(staged)
        finally:
            for _, tmp_name in staged:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)

        for path, content in outputs:
            logger.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))


def _stage(path: Path, content: str) -> str:
    """Write ``content`` to a temporary file next to ``path`` and return its name."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        # NamedTemporaryFile creates 0600 files; published reports must be world-readable.
        os.chmod(tmp_name, 0o644)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteFailureError(f"could not write output: {e}", path) from e
    return tmp_name


def _commit(staged: Sequence[Tuple[Path, str]]) -> None:
    """Move staged files into place, restoring earlier destinations on failure."""
    replaced = []  # (destination, backup of its previous content or None)
    try:
        for path, tmp_name in staged:
            backup = None
            if path.exists():
                backup = f"{tmp_name}.bak"
                os.replace(path, backup)
            replaced.append((path, backup))
            os.replace(tmp_name, path)
    except OSError as e:
        _rollback(replaced)
        raise WriteFailureError(f"could not write output: {e}", path) from e

    for _, backup in replaced:
        if backup is not None:
            os.unlink(backup)


def _rollback(replaced: Sequence[Tuple[Path, Optional[str]]]) -> None:
    for path, backup in reversed(replaced):
        try:
            if backup is not None:
                os.replace(backup, path)
            elif path.exists():
                os.unlink(path)
        except OSError as e:
            logger.error("Could not restore %s after a failed write: %s", path, e)
