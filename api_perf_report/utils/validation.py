"""Validation utilities for API Perf Report.

This module provides validation functions for:
- Required string values
- Output/input file names
- Report URLs
"""

from typing import Any
from urllib.parse import urlparse


class ValidationError(Exception):
    """Raised when validation fails."""
    pass


def validate_non_empty_string(value: Any, name: str) -> str:
    """Validate that a value is a non-empty string.

    Args:
        value: Value to validate.
        name: Name of the parameter (for error messages).

    Returns:
        The validated string, stripped of surrounding whitespace.

    Raises:
        ValidationError: If validation fails.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {type(value).__name__}")

    stripped = value.strip()
    if not stripped:
        raise ValidationError(f"{name} cannot be empty")

    return stripped


def validate_filename(value: Any, name: str) -> str:
    """Validate a bare file name (no directory components).

    Args:
        value: File name to validate.
        name: Name of the parameter (for error messages).

    Returns:
        The validated file name.

    Raises:
        ValidationError: If the value is empty or contains a path separator.
    """
    filename = validate_non_empty_string(value, name)

    if "/" in filename or "\\" in filename:
        raise ValidationError(f"{name} must be a file name, not a path: {filename}")

    if filename in (".", ".."):
        raise ValidationError(f"{name} is not a valid file name: {filename}")

    return filename


def validate_url(value: Any, name: str = "url") -> str:
    """Validate an http(s) URL.

    Args:
        value: URL to validate.
        name: Name of the parameter (for error messages).

    Returns:
        The validated URL.

    Raises:
        ValidationError: If the URL is invalid.
    """
    url = validate_non_empty_string(value, name)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValidationError(f"{name} must use http or https, got: {url}")
    if not parsed.netloc:
        raise ValidationError(f"{name} must include a host: {url}")

    return url
