"""Tests for validation utilities."""

import pytest

from api_perf_report.utils.validation import (
    ValidationError,
    validate_filename,
    validate_non_empty_string,
    validate_url,
)


class TestValidateNonEmptyString:
    """Tests for validate_non_empty_string."""

    def test_valid_string(self):
        assert validate_non_empty_string("  reports ", "dir") == "reports"

    def test_empty_string(self):
        with pytest.raises(ValidationError, match="dir cannot be empty"):
            validate_non_empty_string("", "dir")

    def test_non_string(self):
        with pytest.raises(ValidationError, match="dir must be a string, got int"):
            validate_non_empty_string(5, "dir")


class TestValidateFilename:
    """Tests for validate_filename."""

    def test_valid(self):
        assert validate_filename("summary.md", "summary_file") == "summary.md"

    @pytest.mark.parametrize("value", ["a/b.md", "a\\b.md"])
    def test_path_separators(self, value):
        with pytest.raises(ValidationError, match="must be a file name"):
            validate_filename(value, "summary_file")

    @pytest.mark.parametrize("value", [".", ".."])
    def test_dot_names(self, value):
        with pytest.raises(ValidationError, match="not a valid file name"):
            validate_filename(value, "summary_file")


class TestValidateUrl:
    """Tests for validate_url."""

    def test_valid(self):
        assert validate_url("https://example.github.io/repo/") == "https://example.github.io/repo/"

    def test_scheme(self):
        with pytest.raises(ValidationError, match="must use http or https"):
            validate_url("example.com/reports")

    def test_host(self):
        with pytest.raises(ValidationError, match="must include a host"):
            validate_url("https:///reports")
