"""Top-level shape checks for extractor dumps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence


@dataclass
class ValidationIssue:
    """Represents a single problem with the dump's top-level shape."""

    field: str
    detail: str


class DumpValidationError(RuntimeError):
    """Raised when the extractor dump cannot be processed at all."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue]) -> None:
        super().__init__(message)
        self.issues = list(issues)


_REQUIRED_COMPONENT_FIELDS = ("name", "render", "properties")


def check_dump(data: Any) -> List[ValidationIssue]:
    """Return every top-level issue found in ``data`` (empty when valid)."""
    if not isinstance(data, Mapping):
        return [ValidationIssue("$", "Input must be an object")]

    issues: List[ValidationIssue] = []
    if not isinstance(data.get("breakpoints"), Mapping):
        issues.append(ValidationIssue("breakpoints", "Missing or invalid 'breakpoints' field"))

    components = data.get("components")
    if not isinstance(components, list):
        issues.append(ValidationIssue("components", "Missing or invalid 'components' array"))
    elif not components:
        issues.append(ValidationIssue("components", "Components array is empty"))
    else:
        first = components[0]
        missing = [
            name
            for name in _REQUIRED_COMPONENT_FIELDS
            if not isinstance(first, Mapping) or _is_blank(first.get(name))
        ]
        if missing:
            issues.append(
                ValidationIssue(
                    "components[0]",
                    f"Components missing required fields ({', '.join(missing)})",
                )
            )

    if not isinstance(data.get("_meta"), Mapping):
        issues.append(ValidationIssue("_meta", "Missing or invalid '_meta' field"))

    return issues


def _is_blank(value: Any) -> bool:
    # An empty property list is a valid schema; only absent values and empty names count.
    return value is None or value == ""


def validate_dump(data: Any) -> None:
    """Raise :class:`DumpValidationError` when ``data`` is not a usable dump."""
    issues = check_dump(data)
    if issues:
        summary = "; ".join(issue.detail for issue in issues)
        raise DumpValidationError(f"Invalid extractor dump: {summary}", issues)
