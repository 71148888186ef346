"""Unit tests for result_analyzer module."""

import json

import pytest

from api_perf_report.core.analysis.result_analyzer import (
    ZERO_REQUEST_SUCCESS_RATE,
    AnalysisOutcome,
    ResultAnalyzer,
    calculate_success_rate,
    nearest_rank,
    summarize,
)
from api_perf_report.core.errors import ErrorKind, MalformedSourceError
from api_perf_report.core.models import RunResultsDocument
from api_perf_report.utils.formatting import format_fixed


def build_results(response_times=(100, 200, 300, 400, 500), total=10, failed=1,
                  started=1700000000000, completed=1700000004200):
    executions = []
    for response_time in response_times:
        if response_time is None:
            executions.append({"item": {"name": "no response"}})
        else:
            executions.append({"response": {"code": 200, "responseTime": response_time}})
    return {
        "collection": {"info": {"name": "API tests"}},
        "run": {
            "stats": {"requests": {"total": total, "failed": failed}},
            "executions": executions,
            "timings": {"started": started, "completed": completed},
        },
    }


def summarize_dict(data):
    return summarize(RunResultsDocument.from_dict(data))


class TestSummarize:
    """Test suite for metric calculations."""

    def test_success_rate(self):
        summary = summarize_dict(build_results(total=10, failed=1))
        assert summary.success_rate == 90.0
        assert format_fixed(summary.success_rate) == "90.00"

    def test_success_rate_rounded_to_two_decimals(self):
        summary = summarize_dict(build_results(total=3, failed=1))
        assert summary.success_rate == 66.67

    def test_zero_requests_uses_sentinel(self):
        summary = summarize_dict(build_results(response_times=(), total=0, failed=0))
        assert summary.success_rate == ZERO_REQUEST_SUCCESS_RATE
        assert summary.success_rate == 0.0
        assert format_fixed(summary.success_rate) == "0.00"

    def test_latency_statistics(self):
        summary = summarize_dict(build_results(response_times=(100, 200, 300, 400, 500)))
        assert summary.avg_response_time == 300.0
        assert summary.min_response_time == 100
        assert summary.max_response_time == 500
        assert summary.p95_response_time == 500
        assert summary.p99_response_time == 500

    def test_percentiles_over_hundred_values(self):
        times = list(range(100, 0, -1))  # unsorted input
        summary = summarize_dict(build_results(response_times=times, total=100, failed=0))
        assert summary.p95_response_time == 96
        assert summary.p99_response_time == 100
        assert summary.min_response_time == 1
        assert summary.max_response_time == 100

    def test_no_response_times(self):
        summary = summarize_dict(build_results(response_times=(None, None), total=2, failed=2))
        assert summary.avg_response_time == 0
        assert summary.min_response_time == 0
        assert summary.max_response_time == 0
        assert summary.p95_response_time == 0
        assert summary.p99_response_time == 0
        assert summary.success_rate == 0.0

    def test_executions_without_response_are_skipped(self):
        summary = summarize_dict(build_results(response_times=(None, 200, None, 400)))
        assert summary.avg_response_time == 300.0
        assert summary.min_response_time == 200

    def test_zero_response_time_is_a_measurement(self):
        summary = summarize_dict(build_results(response_times=(0, 100)))
        assert summary.min_response_time == 0
        assert summary.avg_response_time == 50.0

    def test_average_is_rounded(self):
        summary = summarize_dict(build_results(response_times=(100, 100, 101)))
        assert summary.avg_response_time == 100.33

    def test_average_of_huge_values_does_not_overflow(self):
        summary = summarize_dict(build_results(response_times=(1e308, 1e308)))
        assert summary.avg_response_time == 1e308

    def test_total_time(self):
        summary = summarize_dict(build_results(started=1000, completed=4500))
        assert summary.total_time == 3500

    def test_counts_copied(self):
        summary = summarize_dict(build_results(total=42, failed=7))
        assert summary.total_requests == 42
        assert summary.failed_requests == 7

    def test_summary_is_pure(self):
        document = RunResultsDocument.from_dict(build_results())
        assert summarize(document) == summarize(document)

    def test_to_dict_uses_camel_case(self):
        summary = summarize_dict(build_results())
        data = summary.to_dict()
        assert data["successRate"] == 90.0
        assert data["p95ResponseTime"] == 500
        assert data["totalTime"] == 4200
        assert set(data) == {
            "totalRequests", "failedRequests", "successRate", "avgResponseTime",
            "minResponseTime", "maxResponseTime", "p95ResponseTime", "p99ResponseTime",
            "totalTime",
        }


class TestHelpers:
    """Test suite for percentile and success rate helpers."""

    def test_nearest_rank_floor_index(self):
        assert nearest_rank([10, 20, 30, 40], 0.5) == 30
        assert nearest_rank([10, 20, 30, 40], 0.95) == 40

    def test_nearest_rank_clamps_index(self):
        assert nearest_rank([1, 2, 3], 1.0) == 3

    def test_nearest_rank_empty(self):
        assert nearest_rank([], 0.95) == 0

    def test_calculate_success_rate(self):
        assert calculate_success_rate(200, 0) == 100.0
        assert calculate_success_rate(8, 2) == 75.0
        assert calculate_success_rate(0, 0) == ZERO_REQUEST_SUCCESS_RATE


class TestResultAnalyzer:
    """Test suite for ResultAnalyzer file handling."""

    @pytest.fixture
    def analyzer(self):
        return ResultAnalyzer("performance")

    @pytest.fixture
    def results_file(self, tmp_path):
        path = tmp_path / "performance-results.json"
        path.write_text(json.dumps(build_results()), encoding="utf-8")
        return path

    def test_analyze(self, analyzer, results_file):
        summary = analyzer.analyze(results_file)
        assert summary is not None
        assert summary.success_rate == 90.0
        assert summary.avg_response_time == 300.0

    def test_analyze_accepts_string_path(self, analyzer, results_file):
        assert analyzer.analyze(str(results_file)) is not None

    def test_missing_file_returns_none(self, analyzer, tmp_path):
        assert analyzer.analyze(tmp_path / "missing.json") is None

    def test_invalid_json(self, analyzer, tmp_path):
        path = tmp_path / "performance-results.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(MalformedSourceError, match="invalid JSON") as exc_info:
            analyzer.analyze(path)

        assert exc_info.value.kind == ErrorKind.MALFORMED_SOURCE
        assert exc_info.value.path == path
        assert str(path) in str(exc_info.value)

    def test_missing_field_is_named(self, analyzer, tmp_path):
        data = build_results()
        del data["run"]["stats"]["requests"]["total"]
        path = tmp_path / "performance-results.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        with pytest.raises(MalformedSourceError, match=r"run\.stats\.requests\.total"):
            analyzer.analyze(path)

    def test_directory_is_malformed(self, analyzer, tmp_path):
        with pytest.raises(MalformedSourceError, match="could not read"):
            analyzer.analyze(tmp_path)

    def test_try_analyze_success(self, analyzer, results_file):
        outcome = analyzer.try_analyze(results_file)
        assert outcome.ok
        assert not outcome.missing
        assert outcome.unwrap().total_requests == 10

    def test_try_analyze_missing(self, analyzer, tmp_path):
        outcome = analyzer.try_analyze(tmp_path / "missing.json")
        assert outcome.ok
        assert outcome.missing
        assert outcome.unwrap() is None

    def test_try_analyze_malformed(self, analyzer, tmp_path):
        path = tmp_path / "performance-results.json"
        path.write_text("[]", encoding="utf-8")

        outcome = analyzer.try_analyze(path)

        assert isinstance(outcome, AnalysisOutcome)
        assert not outcome.ok
        assert outcome.summary is None
        with pytest.raises(MalformedSourceError):
            outcome.unwrap()

    @pytest.mark.parametrize("constant", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_response_time_is_malformed(self, analyzer, tmp_path, constant):
        path = tmp_path / "performance-results.json"
        text = json.dumps(build_results(response_times=(100, 200)))
        path.write_text(text.replace('"responseTime": 200', f'"responseTime": {constant}'), encoding="utf-8")

        with pytest.raises(MalformedSourceError, match=f"non-finite number {constant}") as exc_info:
            analyzer.analyze(path)

        assert exc_info.value.path == path

    def test_non_finite_count_is_malformed(self, analyzer, tmp_path):
        path = tmp_path / "load-test-results.json"
        path.write_text(json.dumps(build_results()).replace('"total": 10', '"total": Infinity'), encoding="utf-8")

        outcome = analyzer.try_analyze(path)

        assert not outcome.ok
        assert "non-finite" in str(outcome.error)

    def test_very_large_response_time(self, analyzer, tmp_path):
        path = tmp_path / "performance-results.json"
        path.write_text(json.dumps(build_results(response_times=(1e27,))), encoding="utf-8")

        summary = analyzer.analyze(path)

        assert summary.avg_response_time == 1e27
        assert summary.max_response_time == 1e27
        assert format_fixed(summary.avg_response_time).startswith("1000000000000000")
        assert format_fixed(summary.avg_response_time).endswith(".00")
