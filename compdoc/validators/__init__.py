"""Validation package for extractor dumps."""

from .dump import DumpValidationError, ValidationIssue, check_dump, validate_dump

__all__ = [
    "DumpValidationError",
    "ValidationIssue",
    "check_dump",
    "validate_dump",
]
