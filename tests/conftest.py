"""Test configuration for api-perf-report."""

import json
import logging

import pytest


def make_results(response_times=(100, 200, 300, 400, 500), total=10, failed=1,
                 started=1700000000000, completed=1700000004200):
    """Build a results document in the test runner's JSON export format."""
    return {
        "run": {
            "stats": {"requests": {"total": total, "failed": failed}},
            "executions": [
                {"response": {"responseTime": t}} if t is not None else {}
                for t in response_times
            ],
            "timings": {"started": started, "completed": completed},
        }
    }


@pytest.fixture
def reports_dir(tmp_path):
    """Provide an empty reports directory."""
    path = tmp_path / "reports"
    path.mkdir()
    return path


@pytest.fixture
def write_results(reports_dir):
    """Write a results document into the reports directory."""
    def _write(name, data=None, raw=None):
        path = reports_dir / name
        if raw is not None:
            path.write_text(raw, encoding="utf-8")
        else:
            path.write_text(json.dumps(data if data is not None else make_results()), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def build_results():
    """Provide the results document factory."""
    return make_results


@pytest.fixture(autouse=True)
def reset_logging():
    """Close handlers installed by setup_logging so they don't leak between tests."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if not type(handler).__module__.startswith("_pytest"):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)
