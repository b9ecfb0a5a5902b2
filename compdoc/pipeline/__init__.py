"""Per-stage implementations of the documentation pipeline."""

from __future__ import annotations

from .aggregate import build_stats, build_variant_info, populate_used_by
from .component import build_component_doc
from .css import CssResolver, generate_css, strip_raw_wrappers
from .lookup import LookupTables, SlugAllocator, build_lookup_tables
from .properties import PropertyClassifier, classify_properties
from .tokens import TokenResolver, resolve_tokens
from .tree import TreeNormalizer, normalize_tree

__all__ = [
    "CssResolver",
    "LookupTables",
    "PropertyClassifier",
    "SlugAllocator",
    "TokenResolver",
    "TreeNormalizer",
    "build_component_doc",
    "build_lookup_tables",
    "build_stats",
    "build_variant_info",
    "classify_properties",
    "generate_css",
    "normalize_tree",
    "populate_used_by",
    "resolve_tokens",
    "strip_raw_wrappers",
]
