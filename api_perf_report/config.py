"""
Configuration management for API Perf Report.

This module provides the ReportConfig class for loading, validating, and
managing report generation settings from YAML/JSON files with environment
variable overrides. The defaults match the standard CI layout, so no
configuration is needed for the usual run.
"""

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .core.reporting.renderer import (
    DEFAULT_DETAILS_URL,
    DEFAULT_LOAD_REPORT,
    DEFAULT_PERFORMANCE_REPORT,
    DEFAULT_TITLE,
)
from .utils.validation import (
    ValidationError,
    validate_filename,
    validate_non_empty_string,
    validate_url,
)

ENV_PREFIX = "API_PERF_REPORT_"


@dataclass
class ReportConfig:
    """Input locations, output destinations and report links."""

    reports_dir: str = "reports"
    performance_results: str = "performance-results.json"
    load_results: str = "load-test-results.json"
    dashboard_file: str = "index.html"
    summary_file: str = "summary.md"
    performance_report: str = DEFAULT_PERFORMANCE_REPORT
    load_report: str = DEFAULT_LOAD_REPORT
    details_url: str = DEFAULT_DETAILS_URL
    dashboard_title: str = DEFAULT_TITLE

    @property
    def performance_results_path(self) -> Path:
        return Path(self.reports_dir) / self.performance_results

    @property
    def load_results_path(self) -> Path:
        return Path(self.reports_dir) / self.load_results

    @property
    def dashboard_path(self) -> Path:
        return Path(self.reports_dir) / self.dashboard_file

    @property
    def summary_path(self) -> Path:
        return Path(self.reports_dir) / self.summary_file

    def validate(self) -> None:
        """Validate report configuration.

        Raises:
            ValidationError: If a value is invalid.
        """
        validate_non_empty_string(self.reports_dir, "reports_dir")
        for name in (
            "performance_results",
            "load_results",
            "dashboard_file",
            "summary_file",
            "performance_report",
            "load_report",
        ):
            validate_filename(getattr(self, name), name)
        validate_url(self.details_url, "details_url")
        validate_non_empty_string(self.dashboard_title, "dashboard_title")

        outputs = {self.dashboard_file, self.summary_file}
        inputs = {self.performance_results, self.load_results}
        if len(outputs) != 2 or outputs & inputs:
            raise ValidationError(
                "dashboard_file, summary_file, performance_results and load_results must all differ"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportConfig":
        """
        Create ReportConfig from dictionary.

        Accepts either a flat mapping or one nested under a ``report`` key.

        Args:
            data: Configuration dictionary

        Returns:
            ReportConfig instance

        Raises:
            ValueError: If unknown keys are present
        """
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        section = data.get("report", data)
        if not isinstance(section, dict):
            raise ValueError("'report' configuration section must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**section)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ReportConfig":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            ReportConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If YAML is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not data:
            raise ValueError(f"Empty configuration file: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ReportConfig":
        """
        Load configuration from JSON file.

        Args:
            path: Path to JSON configuration file

        Returns:
            ReportConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If JSON is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e

        if not data:
            raise ValueError(f"Empty configuration file: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReportConfig":
        """
        Load configuration from file (auto-detect YAML/JSON).

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is unsupported or invalid
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return cls.from_yaml(path)
        elif suffix == '.json':
            return cls.from_json(path)
        else:
            raise ValueError(f"Unsupported configuration file format: {suffix}")

    def apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to configuration.

        Environment variables follow the pattern API_PERF_REPORT_<FIELD>=value.

        Examples:
            API_PERF_REPORT_REPORTS_DIR=build/reports
            API_PERF_REPORT_DETAILS_URL=https://example.github.io/api/performance-reports/
        """
        for f in fields(self):
            if value := os.getenv(f"{ENV_PREFIX}{f.name.upper()}"):
                setattr(self, f.name, value)
