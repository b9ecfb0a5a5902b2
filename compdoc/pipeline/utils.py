"""Shared helpers for pipeline stages."""

from __future__ import annotations

import re
from typing import Any

# Symbolic variable token emitted by the extractor inside CSS text.
VAR_TOKEN_PATTERN = re.compile(r"@var_(variable-[a-f0-9-]+)")

REF_MARKER = "@ref:"
CHAIN_ARROW = "→"

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATOR_RUN = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-zA-Z0-9-]")
_HYPHEN_RUN = re.compile(r"-{2,}")


def to_kebab_case(value: str) -> str:
    """Return ``value`` as a lowercase, hyphen-separated identifier."""
    result = _CAMEL_BOUNDARY.sub(r"\1-\2", value)
    result = _SEPARATOR_RUN.sub("-", result)
    result = _DISALLOWED.sub("", result)
    result = _HYPHEN_RUN.sub("-", result)
    return result.strip("-").lower()


def css_var_name(name: str) -> str:
    """Return the custom property name for a design variable path."""
    return "--" + name.replace("/", "-")


def format_number(value: Any) -> str:
    """Render numbers without a trailing ``.0`` for integral floats."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "CHAIN_ARROW",
    "REF_MARKER",
    "VAR_TOKEN_PATTERN",
    "css_var_name",
    "format_number",
    "to_kebab_case",
]
