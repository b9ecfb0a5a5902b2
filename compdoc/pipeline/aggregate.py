"""Dependency, variant and stats bookkeeping."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Mapping, Sequence

from ..models import ComponentDoc, ComponentStats, FieldOption, RawComponent, VariantInfo, VariantOption
from .lookup import LookupTables


def build_variant_info(
    variants: Mapping[str, Sequence[VariantOption]],
    property_labels: Mapping[str, str],
) -> List[VariantInfo]:
    return [
        VariantInfo(
            property_id=prop_id,
            property_label=property_labels.get(prop_id) or prop_id,
            options=[FieldOption(label=o.display_name, value=o.id) for o in options],
        )
        for prop_id, options in variants.items()
    ]


def build_stats(component: RawComponent) -> ComponentStats:
    return ComponentStats(
        property_count=len(component.properties),
        variant_count=sum(len(options) for options in component.variants.values()),
        style_count=len(component.css),
        token_count=len(component.variables),
    )


def contains_for(component: RawComponent, lookups: LookupTables) -> List[str]:
    return list(lookups.dependencies.get(component.name, []))


def populate_used_by(docs: Sequence[ComponentDoc], lookups: LookupTables) -> List[ComponentDoc]:
    """Pass 3: copy reverse dependencies onto the named docs."""
    return [
        replace(doc, used_by=list(lookups.reverse_dependencies.get(doc.name, [])))
        for doc in docs
    ]


__all__ = [
    "build_stats",
    "build_variant_info",
    "contains_for",
    "populate_used_by",
]
