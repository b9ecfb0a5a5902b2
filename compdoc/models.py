"""Core data models shared across compdoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


# Input side: produced once by ``compdoc.parsing`` from the extractor dump.


@dataclass
class VariantOption:
    """Named alternative value for a component property."""

    id: str
    display_name: str


@dataclass
class RawProperty:
    """Property descriptor as extracted from the design tool."""

    id: str
    label: str
    name: str
    type: str
    group: Optional[str] = None
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    tooltip: Optional[str] = None
    is_private: bool = False
    is_bindable: bool = False
    is_default: Optional[bool] = None
    display_name: Optional[str] = None


@dataclass
class StyleRef:
    """Style block referenced by a render element."""

    id: str
    class_name: str


@dataclass
class BindingNode:
    """Render node standing in for a property or slot value."""

    prop: Optional[str] = None
    prop_name: Optional[str] = None
    slot_display_name: Optional[str] = None
    source: Optional[str] = None


@dataclass
class Attribute:
    """Custom element attribute whose name or value may be bound."""

    name: Union[str, BindingNode, None]
    value: Any = None


@dataclass
class ElementNode:
    """Concrete element or nested component instance in a render tree."""

    tag: Optional[str] = None
    raw_type: Optional[str] = None
    display_name: Optional[str] = None
    component_id: Optional[str] = None
    component_name: Optional[str] = None
    styles: List[StyleRef] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    is_text: bool = False
    slot: Optional[str] = None
    children: List["RenderNode"] = field(default_factory=list)

    @property
    def is_component(self) -> bool:
        return bool(self.component_id or self.component_name)


RenderNode = Union[BindingNode, ElementNode]


@dataclass
class CssVariantBlock:
    """Per-breakpoint or per-variant override of a style block."""

    breakpoint: Optional[str] = None
    variant_name: Optional[str] = None
    css: Optional[str] = None


@dataclass
class RawCssClass:
    """Named bundle of CSS declarations plus overrides."""

    class_name: str
    type: Optional[str] = None
    combinator: Optional[str] = None
    base: Optional[str] = None
    variants: Dict[str, CssVariantBlock] = field(default_factory=dict)


@dataclass
class LiteralValue:
    """Typed literal such as a color, a length or a number."""

    type: str
    value: Any


@dataclass
class ReferenceValue:
    """Alias pointing at another design variable."""

    target_id: str


@dataclass
class RawTextValue:
    """Free CSS text that may embed further variable tokens."""

    text: str


VariableValue = Union[LiteralValue, ReferenceValue, RawTextValue]


@dataclass
class RawCssVariable:
    """Design variable definition from the symbol table."""

    id: str
    name: str
    type: str
    value: Optional[VariableValue] = None
    modes: Dict[str, VariableValue] = field(default_factory=dict)


@dataclass
class RawComponent:
    """One component of the extractor dump after boundary parsing."""

    id: str
    name: str
    group: Optional[str] = None
    description: Optional[str] = None
    properties: List[RawProperty] = field(default_factory=list)
    render: Optional[RenderNode] = None
    css: Dict[str, RawCssClass] = field(default_factory=dict)
    variables: Dict[str, RawCssVariable] = field(default_factory=dict)
    variants: Dict[str, List[VariantOption]] = field(default_factory=dict)
    embeds: Optional[List[Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExtractorDump:
    """Root input document."""

    breakpoints: Dict[str, Dict[str, Any]]
    components: List[RawComponent]
    meta: Dict[str, Any] = field(default_factory=dict)


# Output side.


@dataclass
class TreeNode:
    """Generic labelled node of a normalized render tree."""

    id: str
    label: str
    kind: str
    children: List["TreeNode"] = field(default_factory=list)

    def count(self) -> int:
        return 1 + sum(child.count() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "label": self.label, "type": self.kind}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class LinkValue:
    """UI-agnostic link default."""

    type: str = "url"
    url: str = "#"
    open_in: str = "this"
    preload: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "url": self.url,
            "openIn": self.open_in,
            "preload": self.preload,
        }


@dataclass
class FieldOption:
    label: str
    value: str


FieldValue = Union[str, bool, LinkValue, None]


@dataclass
class PropertyField:
    """Typed description of a single component property."""

    id: str
    label: str
    kind: str
    value: FieldValue = None
    help_text: Optional[str] = None
    options: Optional[List[FieldOption]] = None

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.to_dict() if isinstance(self.value, LinkValue) else self.value
        data: Dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "type": self.kind,
            "value": value,
        }
        if self.help_text is not None:
            data["helpText"] = self.help_text
        if self.options is not None:
            data["options"] = [{"label": o.label, "value": o.value} for o in self.options]
        return data


@dataclass
class PropertySection:
    """Ordered group of fields in the property sheet."""

    id: str
    label: str
    fields: List[PropertyField]
    default_expanded: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
            "defaultExpanded": self.default_expanded,
        }


@dataclass
class DesignToken:
    """Resolved design variable.

    ``value`` is the final literal, ``chain`` keeps the ``var(a) → var(b) → x``
    trace and ``unresolved`` is set when a reference could not be followed to
    a literal.
    """

    name: str
    type: str
    value: str
    chain: str = ""
    variants: Optional[Dict[str, str]] = None
    unresolved: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "defaultValue": self.value,
            "resolved": self.chain,
            "unresolved": self.unresolved,
        }
        if self.variants:
            data["variants"] = dict(self.variants)
        return data


@dataclass
class VariantInfo:
    property_id: str
    property_label: str
    options: List[FieldOption]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertyId": self.property_id,
            "propertyLabel": self.property_label,
            "options": [{"label": o.label, "value": o.value} for o in self.options],
        }


@dataclass
class ComponentStats:
    property_count: int = 0
    variant_count: int = 0
    style_count: int = 0
    token_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "propertyCount": self.property_count,
            "variantCount": self.variant_count,
            "styleCount": self.style_count,
            "tokenCount": self.token_count,
        }


@dataclass
class ComponentDoc:
    """Normalized documentation model for one component."""

    slug: str
    name: str
    group: str
    description: str
    tree: List[TreeNode]
    properties: List[PropertySection]
    css: str
    tokens: List[DesignToken]
    variants: List[VariantInfo]
    contains: List[str]
    used_by: List[str]
    render_raw: Any = None
    css_raw: Dict[str, Any] = field(default_factory=dict)
    breakpoints: Dict[str, Any] = field(default_factory=dict)
    embeds: Optional[List[Any]] = None
    stats: ComponentStats = field(default_factory=ComponentStats)

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase JSON shape consumed by storage and viewers."""
        return {
            "slug": self.slug,
            "name": self.name,
            "group": self.group,
            "description": self.description,
            "tree": [node.to_dict() for node in self.tree],
            "properties": [section.to_dict() for section in self.properties],
            "css": self.css,
            "tokens": [token.to_dict() for token in self.tokens],
            "variants": [variant.to_dict() for variant in self.variants],
            "contains": list(self.contains),
            "usedBy": list(self.used_by),
            "renderRaw": self.render_raw,
            "cssRaw": self.css_raw,
            "breakpoints": self.breakpoints,
            "embeds": self.embeds,
            "stats": self.stats.to_dict(),
        }


@dataclass
class GenerationFailure:
    """Per-component processing failure surfaced next to the docs."""

    component_name: str
    component_id: str
    message: str
    stack: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "componentName": self.component_name,
            "componentId": self.component_id,
            "message": self.message,
            "stack": self.stack,
        }
