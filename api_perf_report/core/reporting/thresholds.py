"""Status thresholds for report metrics.

Each metric is classified independently. The limits are fixed; reports from
different runs must stay comparable.
"""

from enum import Enum
from typing import Union

Number = Union[int, float]


class Status(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"
    INFO = "info"


SUCCESS_RATE_GOOD = 95
SUCCESS_RATE_WARNING = 80
AVG_RESPONSE_TIME_GOOD = 1000
AVG_RESPONSE_TIME_WARNING = 3000
P95_RESPONSE_TIME_GOOD = 2000
P95_RESPONSE_TIME_WARNING = 5000
MAX_RESPONSE_TIME_GOOD = 5000
MAX_RESPONSE_TIME_WARNING = 10000

# Dashboard card CSS classes.
STATUS_CSS_CLASSES = {
    Status.GOOD: "success",
    Status.WARNING: "warning",
    Status.BAD: "error",
    Status.INFO: "",
}

# Markdown summary status column.
STATUS_ICONS = {
    Status.GOOD: "✅",
    Status.WARNING: "⚠️",
    Status.BAD: "❌",
    Status.INFO: "ℹ️",
}


def _at_least(value: Number, good: Number, warning: Number) -> Status:
    if value >= good:
        return Status.GOOD
    if value >= warning:
        return Status.WARNING
    return Status.BAD


def _at_most(value: Number, good: Number, warning: Number) -> Status:
    if value <= good:
        return Status.GOOD
    if value <= warning:
        return Status.WARNING
    return Status.BAD


def classify_success_rate(value: Number) -> Status:
    return _at_least(value, SUCCESS_RATE_GOOD, SUCCESS_RATE_WARNING)


def classify_avg_response_time(value: Number) -> Status:
    return _at_most(value, AVG_RESPONSE_TIME_GOOD, AVG_RESPONSE_TIME_WARNING)


def classify_p95_response_time(value: Number) -> Status:
    return _at_most(value, P95_RESPONSE_TIME_GOOD, P95_RESPONSE_TIME_WARNING)


def classify_max_response_time(value: Number) -> Status:
    return _at_most(value, MAX_RESPONSE_TIME_GOOD, MAX_RESPONSE_TIME_WARNING)


def classify_failed_requests(value: int) -> Status:
    return Status.GOOD if value == 0 else Status.BAD
