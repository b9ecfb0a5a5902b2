"""Pass 1: global lookup tables built from every component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..models import ElementNode, RawComponent, RenderNode
from .utils import to_kebab_case

DEFAULT_SLUG = "component"


@dataclass
class LookupTables:
    """Read-only maps shared by the per-component stages."""

    component_names: Dict[str, str] = field(default_factory=dict)
    property_names: Dict[str, Dict[str, str]] = field(default_factory=dict)
    variant_values: Dict[str, Dict[str, str]] = field(default_factory=dict)
    variable_names: Dict[str, Dict[str, str]] = field(default_factory=dict)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    reverse_dependencies: Dict[str, List[str]] = field(default_factory=dict)
    slugs: Dict[str, str] = field(default_factory=dict)
    component_slugs: Dict[str, str] = field(default_factory=dict)

    def slug_for(self, component: RawComponent) -> str:
        return (
            self.component_slugs.get(component.id)
            or self.slugs.get(component.name)
            or to_kebab_case(component.name)
            or DEFAULT_SLUG
        )


class SlugAllocator:
    """Hands out unique slugs for one lookup pass."""

    def __init__(self) -> None:
        self._used: Set[str] = set()

    def allocate(
        self, name: str, group: Optional[str] = None, fallback: Optional[str] = None
    ) -> str:
        """Return a free slug for ``name``.

        Names with nothing URL-safe in them fall back to ``fallback`` (the
        component id) and then to ``component``.
        """
        base = to_kebab_case(name) or to_kebab_case(fallback or "") or DEFAULT_SLUG
        slug = base
        group_slug = to_kebab_case(group or "")
        if slug in self._used and group_slug:
            slug = f"{group_slug}-{base}"
        candidate = slug
        counter = 2
        while candidate in self._used:
            candidate = f"{slug}-{counter}"
            counter += 1
        self._used.add(candidate)
        return candidate


def build_lookup_tables(components: Iterable[RawComponent]) -> LookupTables:
    """Walk all components in input order.

    Names are collected first so references to later components resolve.
    """
    components = list(components)
    tables = LookupTables()
    allocator = SlugAllocator()

    for component in components:
        tables.component_names[component.id] = component.name

    for component in components:
        tables.property_names[component.id] = {prop.id: prop.label for prop in component.properties}
        tables.variant_values[component.id] = {
            option.id: option.display_name
            for options in component.variants.values()
            for option in options
        }
        if component.variables:
            tables.variable_names[component.id] = {
                var_id: variable.name for var_id, variable in component.variables.items()
            }

        deps = collect_dependencies(component.render, tables.component_names)
        known = tables.dependencies.setdefault(component.name, [])
        for child in deps:
            if child not in known:
                known.append(child)
        for child in deps:
            parents = tables.reverse_dependencies.setdefault(child, [])
            if component.name not in parents:
                parents.append(component.name)

        slug = allocator.allocate(component.name, component.group, fallback=component.id)
        tables.component_slugs[component.id] = slug
        tables.slugs.setdefault(component.name, slug)

    return tables


def referenced_name(
    node: ElementNode, component_names: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """Name of the component ``node`` embeds; id-only references resolve via ``component_names``."""
    if node.component_name:
        return node.component_name
    if node.component_id:
        return (component_names or {}).get(node.component_id, node.component_id)
    return None


def collect_dependencies(
    root: Optional[RenderNode], component_names: Optional[Mapping[str, str]] = None
) -> List[str]:
    """Return nested component names in first-seen depth-first order."""
    names: List[str] = []
    seen: Set[str] = set()
    stack: List[RenderNode] = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if not isinstance(node, ElementNode):
            continue
        name = referenced_name(node, component_names)
        if name and name not in seen:
            seen.add(name)
            names.append(name)
        stack.extend(reversed(node.children))
    return names


__all__ = [
    "DEFAULT_SLUG",
    "LookupTables",
    "SlugAllocator",
    "build_lookup_tables",
    "collect_dependencies",
    "referenced_name",
]
