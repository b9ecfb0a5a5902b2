"""Conversion of the loosely-typed extractor dump into typed models.

Every shape decision (binding vs. element, literal vs. reference variable
values) is made here once; later stages only see the tagged models from
``compdoc.models``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from .logging import get_logger
from .models import (
    Attribute,
    BindingNode,
    CssVariantBlock,
    ElementNode,
    ExtractorDump,
    LiteralValue,
    RawComponent,
    RawCssClass,
    RawCssVariable,
    RawProperty,
    RawTextValue,
    ReferenceValue,
    RenderNode,
    StyleRef,
    VariableValue,
    VariantOption,
)
from .pipeline.utils import REF_MARKER, VAR_TOKEN_PATTERN

logger = get_logger("parsing")

GROUP_SEPARATOR = "/"


class ParseError(ValueError):
    """Raised when a single component cannot be converted into models."""


ParseErrorHandler = Callable[[int, Any, ParseError], None]


def parse_dump(
    data: Mapping[str, Any], *, on_error: Optional[ParseErrorHandler] = None
) -> ExtractorDump:
    """Parse a validated top-level dump.

    A component that cannot be parsed raises :class:`ParseError` unless
    ``on_error`` is given, in which case it is called with the component's
    position, its raw value and the error, and the component is skipped.
    Input order of the remaining components is preserved.
    """
    breakpoints = {
        str(key): dict(value) if isinstance(value, Mapping) else {"id": str(key)}
        for key, value in _as_mapping(data.get("breakpoints")).items()
    }
    meta = dict(_as_mapping(data.get("_meta")))

    components: List[RawComponent] = []
    raw_components = data.get("components")
    for position, raw in enumerate(raw_components if isinstance(raw_components, list) else []):
        try:
            components.append(parse_component(raw, position=position))
        except ParseError as exc:
            if on_error is None:
                raise
            on_error(position, raw, exc)
    return ExtractorDump(breakpoints=breakpoints, components=components, meta=meta)


def parse_component(data: Any, *, position: int = 0) -> RawComponent:
    """Parse one raw component mapping."""
    if not isinstance(data, Mapping):
        raise ParseError(f"Component at position {position} is not an object")

    component_id = _as_str(data.get("id")) or f"component-{position}"
    name = _as_str(data.get("name")) or component_id

    raw_properties = data.get("properties")
    if raw_properties is None:
        raw_properties = []
    if not isinstance(raw_properties, list):
        raise ParseError(f"'properties' of {name} must be a list")
    properties = [_parse_property(item, index) for index, item in enumerate(raw_properties)]

    render_data = data.get("render")
    if render_data is not None and not isinstance(render_data, Mapping):
        raise ParseError(f"'render' of {name} must be an object")
    render = parse_render_node(render_data) if render_data is not None else None

    css = {
        class_key: _parse_css_class(class_key, value)
        for class_key, value in _expect_mapping(data.get("css"), "css", name).items()
    }
    variables = {
        var_id: _parse_variable(var_id, value)
        for var_id, value in _expect_mapping(data.get("cssVariables"), "cssVariables", name).items()
    }
    variants = {
        prop_id: _parse_variant_options(options, prop_id, name)
        for prop_id, options in _expect_mapping(data.get("variants"), "variants", name).items()
    }

    embeds = data.get("embeds")
    return RawComponent(
        id=component_id,
        name=name,
        group=_as_str(data.get("group")) or None,
        description=_as_str(data.get("description")) or None,
        properties=properties,
        render=render,
        css=css,
        variables=variables,
        variants=variants,
        embeds=list(embeds) if isinstance(embeds, list) else None,
        raw=dict(data),
    )


def parse_render_node(data: Any, _active: Optional[Set[int]] = None) -> Optional[RenderNode]:
    """Return the tagged render node for ``data`` or ``None`` for non-nodes.

    ``_active`` holds the identities of mappings on the current path; a child
    that points back at an ancestor is dropped instead of recursed into.
    """
    if not isinstance(data, Mapping):
        return None
    if data.get("_binding"):
        return BindingNode(
            prop=_as_str(data.get("prop")),
            prop_name=_as_str(data.get("propName")),
            slot_display_name=_as_str(data.get("slotDisplayName")),
            source=_as_str(data.get("from")),
        )

    active = _active if _active is not None else set()
    marker = id(data)
    active.add(marker)
    try:
        children: List[RenderNode] = []
        raw_children = data.get("children")
        if isinstance(raw_children, list):
            for child in raw_children:
                if isinstance(child, Mapping) and id(child) in active:
                    logger.debug("Dropping cyclic render child under %s", data.get("id", "?"))
                    continue
                parsed = parse_render_node(child, active)
                if parsed is not None:
                    children.append(parsed)
    finally:
        active.discard(marker)

    return ElementNode(
        tag=_as_str(data.get("tag")),
        raw_type=_as_str(data.get("type")),
        display_name=_as_str(data.get("displayName")),
        component_id=_as_str(data.get("componentId")),
        component_name=_as_str(data.get("componentName")),
        styles=_parse_styles(data.get("styles")),
        attributes=_parse_attributes(data.get("xattr")),
        is_text=bool(data.get("text")),
        slot=_as_str(data.get("slot")),
        children=children,
    )


def parse_variable_value(value: Any, var_type: str) -> Optional[VariableValue]:
    """Classify a variable value as literal, reference or raw text."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        kind = _as_str(value.get("type"))
        inner = value.get("value")
        if kind == "ref":
            target = inner.get("variableId") if isinstance(inner, Mapping) else inner
            if isinstance(target, str) and target:
                return ReferenceValue(target_id=target)
            return RawTextValue(text=str(target))
        if kind == "raw":
            return RawTextValue(text="" if inner is None else str(inner))
        if kind:
            return LiteralValue(type=kind, value=inner)
        return LiteralValue(type=var_type, value=dict(value))
    if isinstance(value, str):
        if value.startswith(REF_MARKER):
            return ReferenceValue(target_id=value[len(REF_MARKER):])
        if VAR_TOKEN_PATTERN.search(value):
            return RawTextValue(text=value)
    return LiteralValue(type=var_type, value=value)


def _parse_property(data: Any, index: int) -> RawProperty:
    if not isinstance(data, Mapping):
        raise ParseError(f"Property at position {index} is not an object")
    prop_id = _as_str(data.get("id"))
    if not prop_id:
        raise ParseError(f"Property at position {index} has no id")
    label = _as_str(data.get("label")) or prop_id
    group = _as_str(data.get("group"))
    name = _as_str(data.get("name"))
    if group is None and name is None and GROUP_SEPARATOR in label:
        group, name = label.split(GROUP_SEPARATOR, 1)
    return RawProperty(
        id=prop_id,
        label=label,
        name=name or label,
        type=_as_str(data.get("type")) or "Unknown",
        group=group or None,
        default=data.get("defaultValue"),
        min=_as_number(data.get("min")),
        max=_as_number(data.get("max")),
        tooltip=_as_str(data.get("toolTip")) or None,
        is_private=bool(data.get("isPrivate")),
        is_bindable=bool(data.get("isBindable")),
        is_default=data.get("isDefault") if isinstance(data.get("isDefault"), bool) else None,
        display_name=_as_str(data.get("displayName")) or None,
    )


def _parse_styles(value: Any) -> List[StyleRef]:
    if not isinstance(value, list):
        return []
    styles = []
    for item in value:
        if isinstance(item, Mapping):
            styles.append(
                StyleRef(
                    id=_as_str(item.get("id")) or "",
                    class_name=_as_str(item.get("className")) or "",
                )
            )
    return styles


def _parse_attributes(value: Any) -> List[Attribute]:
    if not isinstance(value, list):
        return []
    attributes = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        attributes.append(
            Attribute(name=_parse_bindable(item.get("name")), value=_parse_bindable(item.get("value")))
        )
    return attributes


def _parse_bindable(value: Any) -> Any:
    if isinstance(value, Mapping) and value.get("_binding"):
        return parse_render_node(value)
    return value


def _parse_css_class(class_key: str, data: Any) -> RawCssClass:
    if isinstance(data, str):
        return RawCssClass(class_name=class_key, base=data)
    if not isinstance(data, Mapping):
        return RawCssClass(class_name=class_key)
    variants: Dict[str, CssVariantBlock] = {}
    for key, block in _as_mapping(data.get("variants")).items():
        if isinstance(block, str):
            variants[str(key)] = CssVariantBlock(css=block)
        elif isinstance(block, Mapping):
            variants[str(key)] = CssVariantBlock(
                breakpoint=_as_str(block.get("breakpoint")),
                variant_name=_as_str(block.get("variantName") or block.get("variant")),
                css=_as_str(block.get("css")),
            )
    return RawCssClass(
        class_name=_as_str(data.get("className")) or class_key,
        type=_as_str(data.get("type")),
        combinator=_as_str(data.get("comb")),
        base=_as_str(data.get("base")),
        variants=variants,
    )


def _parse_variable(var_id: str, data: Any) -> RawCssVariable:
    if not isinstance(data, Mapping):
        return RawCssVariable(id=var_id, name=var_id, type="raw", value=parse_variable_value(data, "raw"))
    var_type = _as_str(data.get("type")) or "raw"
    modes: Dict[str, VariableValue] = {}
    for mode_key, mode_value in _as_mapping(data.get("modes")).items():
        parsed = parse_variable_value(mode_value, var_type)
        if parsed is not None:
            modes[str(mode_key)] = parsed
    return RawCssVariable(
        id=var_id,
        name=_as_str(data.get("name")) or var_id,
        type=var_type,
        value=parse_variable_value(data.get("value"), var_type),
        modes=modes,
    )


def _parse_variant_options(options: Any, prop_id: str, component_name: str) -> List[VariantOption]:
    if not isinstance(options, list):
        raise ParseError(f"Variant options for {prop_id} in {component_name} must be a list")
    parsed = []
    for option in options:
        if not isinstance(option, Mapping):
            continue
        option_id = _as_str(option.get("id"))
        if not option_id:
            continue
        parsed.append(
            VariantOption(id=option_id, display_name=_as_str(option.get("displayName")) or option_id)
        )
    return parsed


def _expect_mapping(value: Any, field_name: str, component_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ParseError(f"'{field_name}' of {component_name} must be an object")
    return value


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


__all__ = [
    "ParseError",
    "parse_component",
    "parse_dump",
    "parse_render_node",
    "parse_variable_value",
]
