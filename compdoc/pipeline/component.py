"""Pass 2: assemble the documentation model for a single component."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Mapping

from ..models import ComponentDoc, RawComponent
from .aggregate import build_stats, build_variant_info, contains_for
from .css import generate_css
from .lookup import LookupTables
from .properties import classify_properties
from .tokens import resolve_tokens
from .tree import normalize_tree

DEFAULT_GROUP = "Ungrouped"
DEFAULT_DESCRIPTION = "No description"


def build_component_doc(
    component: RawComponent,
    lookups: LookupTables,
    breakpoints: Mapping[str, Any],
    *,
    group_fallback: str = DEFAULT_GROUP,
    description_fallback: str = DEFAULT_DESCRIPTION,
) -> ComponentDoc:
    """Run every per-component stage; ``used_by`` is left for pass 3."""
    variant_names = [
        option.display_name for options in component.variants.values() for option in options
    ]
    return ComponentDoc(
        slug=lookups.slug_for(component),
        name=component.name,
        group=component.group or group_fallback,
        description=component.description or description_fallback,
        tree=normalize_tree(component.render, lookups.component_names),
        properties=classify_properties(component.properties, component.variants),
        css=generate_css(
            component.css,
            variable_names=lookups.variable_names.get(component.id, {}),
            variant_names=lookups.variant_values.get(component.id, {}),
        ),
        tokens=resolve_tokens(component.variables, variant_names),
        variants=build_variant_info(
            component.variants, lookups.property_names.get(component.id, {})
        ),
        contains=contains_for(component, lookups),
        used_by=[],
        render_raw=component.raw.get("render"),
        css_raw=_raw_css(component),
        breakpoints=dict(breakpoints),
        embeds=component.embeds,
        stats=build_stats(component),
    )


def _raw_css(component: RawComponent) -> Dict[str, Any]:
    raw = component.raw.get("css")
    if isinstance(raw, Mapping):
        return dict(raw)
    return {key: asdict(value) for key, value in component.css.items()}


__all__ = ["DEFAULT_DESCRIPTION", "DEFAULT_GROUP", "build_component_doc"]
