"""
Validation Utilities
Helper functions for validating lookup names and versions
"""

import re
from typing import Any, Iterable, Optional

# Value of the default-version flag that clears the guild default
LATEST = "latest"

MAX_NAME_LENGTH = 100

# Users often paste names wrapped in code spans
CODE_SPAN_REGEX = re.compile(r"^`+|`+$")


class ValidationResult:
    """Result of a validation operation."""

    def __init__(
        self,
        valid: bool,
        error: Optional[str] = None,
        sanitized: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        self.valid = valid
        self.error = error
        self.sanitized = sanitized
        self.value = value

    def __bool__(self) -> bool:
        return self.valid


class ValidationUtils:
    """Utility class for input validation."""

    @staticmethod
    def sanitize_input(input_value: str) -> str:
        """
        Strip whitespace, zero-width and control characters from user input.

        Args:
            input_value: Input to sanitize

        Returns:
            Sanitized input string
        """
        if not isinstance(input_value, str):
            return ""

        sanitized = input_value.strip()
        sanitized = re.sub(r"[\u200B-\u200D\uFEFF]", "", sanitized)
        sanitized = re.sub(r"[\x00-\x1F\x7F-\x9F]", "", sanitized)

        return sanitized

    @staticmethod
    def validate_lookup_name(name: Optional[str]) -> ValidationResult:
        """
        Validate the name a user asked to look up.

        Args:
            name: Raw name argument

        Returns:
            ValidationResult whose ``sanitized`` field holds the cleaned name
        """
        if not name:
            return ValidationResult(valid=False, error="A name to look up is required")

        sanitized = CODE_SPAN_REGEX.sub("", ValidationUtils.sanitize_input(name))
        if not sanitized:
            return ValidationResult(valid=False, error="A name to look up is required")

        if len(sanitized) > MAX_NAME_LENGTH:
            return ValidationResult(
                valid=False,
                error=f"Name too long (max {MAX_NAME_LENGTH} chars)",
            )

        return ValidationResult(valid=True, sanitized=sanitized)

    @staticmethod
    def validate_version(version: Optional[str], known_versions: Iterable[str]) -> ValidationResult:
        """
        Validate a value given to the default-version flag.

        ``latest`` is accepted and maps to ``value=None`` (unset); any other
        value must be one of ``known_versions``.

        Args:
            version: Flag value
            known_versions: Versions the downloader knows about

        Returns:
            ValidationResult whose ``value`` is the version to store
        """
        sanitized = ValidationUtils.sanitize_input(version or "")
        if not sanitized:
            return ValidationResult(valid=False, error="Invalid version.")

        if sanitized == LATEST:
            return ValidationResult(valid=True, sanitized=sanitized, value=None)

        if sanitized in set(known_versions):
            return ValidationResult(valid=True, sanitized=sanitized, value=sanitized)

        return ValidationResult(valid=False, error="Invalid version.", sanitized=sanitized)
