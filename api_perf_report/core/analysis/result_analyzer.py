"""Result analysis for API test runs.

This module provides the ResultAnalyzer class, which loads a results document
from disk and reduces it to a MetricsSummary: success rate, average/min/max
response time and nearest-rank 95th/99th percentiles.
"""

import json
import math
import statistics
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from ...utils.formatting import round_half_up
from ...utils.logging import get_logger
from ..errors import MalformedSourceError
from ..models import MetricsSummary, Number, RunResultsDocument

# Success rate reported for a run that issued no requests.
ZERO_REQUEST_SUCCESS_RATE = 0.0

P95 = 0.95
P99 = 0.99


def nearest_rank(sorted_values: Sequence[Number], fraction: float) -> Number:
    """Pick the value at index ``floor(n * fraction)`` of an ascending sequence.

    No interpolation is done. The index is clamped to the last element.

    Args:
        sorted_values: Values in ascending order.
        fraction: Percentile as a fraction (0.95 for p95).

    Returns:
        Selected value, or 0 for an empty sequence.
    """
    if not sorted_values:
        return 0
    index = math.floor(len(sorted_values) * fraction)
    if index >= len(sorted_values):
        index = len(sorted_values) - 1
    return sorted_values[index]


def _reject_constant(name: str):
    # json accepts NaN/Infinity/-Infinity, which are not valid JSON numbers.
    raise MalformedSourceError(f"invalid JSON: non-finite number {name}")


def calculate_success_rate(total: int, failed: int) -> float:
    """Percentage of requests that did not fail, rounded to 2 decimals."""
    if total == 0:
        return ZERO_REQUEST_SUCCESS_RATE
    return round_half_up((total - failed) / total * 100, 2)


def summarize(document: RunResultsDocument) -> MetricsSummary:
    """Compute the MetricsSummary of a results document.

    Args:
        document: Parsed results document.

    Returns:
        Aggregate metrics. Latency fields are 0 when no execution has a response time.
    """
    response_times = document.response_times

    if response_times:
        avg_response_time = round_half_up(statistics.mean(response_times), 2)
        min_response_time = min(response_times)
        max_response_time = max(response_times)
    else:
        avg_response_time = 0.0
        min_response_time = 0
        max_response_time = 0

    sorted_times = sorted(response_times)

    return MetricsSummary(
        total_requests=document.total_requests,
        failed_requests=document.failed_requests,
        success_rate=calculate_success_rate(document.total_requests, document.failed_requests),
        avg_response_time=avg_response_time,
        min_response_time=min_response_time,
        max_response_time=max_response_time,
        p95_response_time=nearest_rank(sorted_times, P95),
        p99_response_time=nearest_rank(sorted_times, P99),
        total_time=document.completed - document.started,
    )


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of analyzing one source.

    Exactly one of three shapes:
    - ``summary`` set: the document was analyzed.
    - neither set: no document exists at the source.
    - ``error`` set: the document exists but is malformed.
    """

    source: Path
    summary: Optional[MetricsSummary] = None
    error: Optional[MalformedSourceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def missing(self) -> bool:
        return self.error is None and self.summary is None

    def unwrap(self) -> Optional[MetricsSummary]:
        """Return the summary (or None when missing), raising the stored error if any."""
        if self.error is not None:
            raise self.error
        return self.summary


class ResultAnalyzer:
    """Loads results documents and computes their metrics.

    Args:
        category: Name of the results category ("performance", "load"),
            used as logging context.
    """

    def __init__(self, category: str = "results"):
        self.category = category
        self.logger = get_logger(__name__, {"category": category})

    def load(self, source: Union[str, Path]) -> Optional[RunResultsDocument]:
        """Read and parse a results document.

        Args:
            source: Path of the JSON results document.

        Returns:
            The parsed document, or None if no file exists at ``source``.

        Raises:
            MalformedSourceError: If the file cannot be read, is not JSON, or
                lacks required fields.
        """
        path = Path(source)
        if not path.exists():
            self.logger.info("No results document at %s, skipping", path)
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise MalformedSourceError(f"invalid JSON: {e}", path) from e
        except MalformedSourceError as e:
            raise MalformedSourceError(e.message, path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedSourceError(f"could not read results document: {e}", path) from e

        try:
            document = RunResultsDocument.from_dict(data)
        except MalformedSourceError as e:
            raise MalformedSourceError(e.message, path) from e

        self.logger.debug(
            "Loaded %s: %d requests, %d executions",
            path,
            document.total_requests,
            len(document.executions),
        )
        return document

    def analyze(self, source: Union[str, Path]) -> Optional[MetricsSummary]:
        """Compute the metrics of the document at ``source``.

        Returns:
            MetricsSummary, or None if the document does not exist.

        Raises:
            MalformedSourceError: If the document exists but is malformed.
        """
        document = self.load(source)
        if document is None:
            return None

        summary = summarize(document)
        self.logger.info(
            "Success rate %.2f%%, avg response time %.2fms over %d requests",
            summary.success_rate,
            summary.avg_response_time,
            summary.total_requests,
        )
        return summary

    def try_analyze(self, source: Union[str, Path]) -> AnalysisOutcome:
        """Like analyze(), but returns malformed-source failures as an outcome."""
        path = Path(source)
        try:
            return AnalysisOutcome(source=path, summary=self.analyze(path))
        except MalformedSourceError as e:
            self.logger.error("Malformed results document: %s", e)
            return AnalysisOutcome(source=path, error=e)
