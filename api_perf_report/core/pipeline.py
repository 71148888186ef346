"""Report generation pipeline.

Analyzes the performance and load results documents, renders the dashboard
and summary, and writes both. Fatal errors are returned in the
GenerationResult rather than raised, so the caller decides how to exit.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..utils.formatting import format_fixed
from ..utils.logging import get_logger
from ..utils.validation import ValidationError
from .analysis import ResultAnalyzer
from .errors import ConfigurationError, ReportError
from .models import MetricsSummary
from .reporting import RenderedReports, ReportRenderer

if TYPE_CHECKING:
    from ..config import ReportConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one report generation run."""

    performance: Optional[MetricsSummary] = None
    load: Optional[MetricsSummary] = None
    reports: Optional[RenderedReports] = None
    error: Optional[ReportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.error is None else self.error.exit_code

    def status_lines(self):
        """Per-category one-line summaries, for present categories only."""
        lines = []
        for name, summary in (("Performance Test", self.performance), ("Load Test", self.load)):
            if summary is not None:
                lines.append(
                    f"{name} - Success Rate: {format_fixed(summary.success_rate)}%, "
                    f"Avg Response Time: {format_fixed(summary.avg_response_time)}ms"
                )
        return lines


def generate_reports(config: "ReportConfig", generated_at: Optional[datetime] = None) -> GenerationResult:
    """Run the whole pipeline for a ReportConfig.

    Both analyses complete before rendering. If either source is malformed,
    nothing is written.

    Args:
        config: ReportConfig with input and output locations.
        generated_at: Dashboard timestamp (default: now).

    Returns:
        GenerationResult with the summaries and rendered reports, or the error.
    """
    try:
        config.validate()
    except (ValidationError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return GenerationResult(error=ConfigurationError(str(e)))

    performance_outcome = ResultAnalyzer("performance").try_analyze(config.performance_results_path)
    if not performance_outcome.ok:
        return GenerationResult(error=performance_outcome.error)

    load_outcome = ResultAnalyzer("load").try_analyze(config.load_results_path)
    if not load_outcome.ok:
        return GenerationResult(error=load_outcome.error)

    performance = performance_outcome.summary
    load = load_outcome.summary
    if performance is None and load is None:
        logger.warning("No results documents found in %s", config.reports_dir)

    renderer = ReportRenderer.from_config(config)
    reports = renderer.render(performance, load, generated_at=generated_at)

    try:
        renderer.write(reports, config.dashboard_path, config.summary_path)
    except ReportError as e:
        logger.error("Failed to write reports: %s", e)
        return GenerationResult(performance=performance, load=load, reports=reports, error=e)

    return GenerationResult(performance=performance, load=load, reports=reports)
