"""Data model for test-run results and their derived metrics.

A results document is the JSON run export written by the API test runner:

    {"run": {"stats": {"requests": {"total": 10, "failed": 1}},
             "executions": [{"response": {"responseTime": 120}}, ...],
             "timings": {"started": 1700000000000, "completed": 1700000004200}}}

Only the fields above are read. Everything else in the document is ignored.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import MalformedSourceError

Number = Union[int, float]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise MalformedSourceError(f"'{field_name}' must be an object, got {type(value).__name__}")
    return value


def _require_field(mapping: Mapping[str, Any], key: str, parent: str) -> Any:
    field_name = f"{parent}.{key}" if parent else key
    if key not in mapping:
        raise MalformedSourceError(f"missing required field '{field_name}'")
    return mapping[key]


def _require_int(value: Any, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedSourceError(f"'{field_name}' must be an integer, got {value!r}")
    return value


def _require_number(value: Any, field_name: str) -> Number:
    if not _is_number(value):
        raise MalformedSourceError(f"'{field_name}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise MalformedSourceError(f"'{field_name}' must be a finite number, got {value!r}")
    return value


@dataclass(frozen=True)
class ExecutionRecord:
    """One request/response interaction captured during a run."""

    response_time: Optional[Number] = None

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "ExecutionRecord":
        field_name = f"run.executions[{index}]"
        execution = _require_mapping(data, field_name)

        response = execution.get("response")
        if response is None:
            return cls()
        response = _require_mapping(response, f"{field_name}.response")

        response_time = response.get("responseTime")
        if response_time is None:
            return cls()
        return cls(response_time=_require_number(response_time, f"{field_name}.response.responseTime"))


@dataclass(frozen=True)
class RunResultsDocument:
    """Raw results of a single test run."""

    total_requests: int
    failed_requests: int
    executions: Tuple[ExecutionRecord, ...]
    started: Number
    completed: Number

    @classmethod
    def from_dict(cls, data: Any) -> "RunResultsDocument":
        """Build a document from parsed JSON.

        Raises:
            MalformedSourceError: If a required field is missing or has the wrong type.
        """
        root = _require_mapping(data, "document")
        run = _require_mapping(_require_field(root, "run", ""), "run")

        stats = _require_mapping(_require_field(run, "stats", "run"), "run.stats")
        requests = _require_mapping(_require_field(stats, "requests", "run.stats"), "run.stats.requests")
        total = _require_int(_require_field(requests, "total", "run.stats.requests"), "run.stats.requests.total")
        failed = _require_int(_require_field(requests, "failed", "run.stats.requests"), "run.stats.requests.failed")
        if total < 0:
            raise MalformedSourceError(f"'run.stats.requests.total' must be >= 0, got {total}")
        if failed < 0 or failed > total:
            raise MalformedSourceError(
                f"'run.stats.requests.failed' must be between 0 and {total}, got {failed}"
            )

        raw_executions = _require_field(run, "executions", "run")
        if not isinstance(raw_executions, list):
            raise MalformedSourceError(
                f"'run.executions' must be an array, got {type(raw_executions).__name__}"
            )
        executions = tuple(
            ExecutionRecord.from_dict(item, index) for index, item in enumerate(raw_executions)
        )

        timings = _require_mapping(_require_field(run, "timings", "run"), "run.timings")
        started = _require_number(_require_field(timings, "started", "run.timings"), "run.timings.started")
        completed = _require_number(
            _require_field(timings, "completed", "run.timings"), "run.timings.completed"
        )

        return cls(
            total_requests=total,
            failed_requests=failed,
            executions=executions,
            started=started,
            completed=completed,
        )

    @property
    def response_times(self) -> Tuple[Number, ...]:
        """Response times that are present, in execution order."""
        return tuple(
            record.response_time for record in self.executions if record.response_time is not None
        )


@dataclass(frozen=True)
class MetricsSummary:
    """Aggregate statistics derived from one RunResultsDocument."""

    total_requests: int
    failed_requests: int
    success_rate: float
    avg_response_time: float
    min_response_time: Number
    max_response_time: Number
    p95_response_time: Number
    p99_response_time: Number
    total_time: Number

    def to_dict(self) -> Dict[str, Any]:
        """Export using the field names of the JSON summary format."""
        return {
            "totalRequests": self.total_requests,
            "failedRequests": self.failed_requests,
            "successRate": self.success_rate,
            "avgResponseTime": self.avg_response_time,
            "minResponseTime": self.min_response_time,
            "maxResponseTime": self.max_response_time,
            "p95ResponseTime": self.p95_response_time,
            "p99ResponseTime": self.p99_response_time,
            "totalTime": self.total_time,
        }
