"""Property classification into UI-agnostic field sections."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from ..models import FieldOption, LinkValue, PropertyField, PropertySection, RawProperty, VariantOption
from .utils import format_number, to_kebab_case

# Semantic type families.
STYLE_VARIANT = "style-variant"
SLOT = "slot"
VISIBILITY = "visibility-conditions"
LINK = "link"
NUMBER = "number"
LIST = "list"
TEXT = "text"
UNKNOWN = "unknown"

_TYPE_FAMILIES: Dict[str, str] = {
    "TypeApplication": STYLE_VARIANT,
    "Basic/StyleVariant": STYLE_VARIANT,
    "style-variant": STYLE_VARIANT,
    "Slots/SlotContent": SLOT,
    "slot": SLOT,
    "Visibility/VisibilityConditions": VISIBILITY,
    "visibility-conditions": VISIBILITY,
    "visibility": VISIBILITY,
    "Basic/Link": LINK,
    "link": LINK,
    "Builtin/Number": NUMBER,
    "number": NUMBER,
    "Builtin/List": LIST,
    "Basic/RichTextChildren": LIST,
    "list": LIST,
    "rich-text": LIST,
    "Builtin/Text": TEXT,
    "Basic/AltText": TEXT,
    "Basic/IdTextInput": TEXT,
    "text": TEXT,
}

_LINK_MODES = {
    "external": "url",
    "page": "page",
    "email": "email",
    "phone": "phone",
    "section": "section",
}

VISIBILITY_OPTIONS = (
    FieldOption(label="Visible", value="visible"),
    FieldOption(label="Hidden", value="hidden"),
)


def type_family(type_tag: str) -> str:
    """Map an extractor type tag onto a semantic family."""
    family = _TYPE_FAMILIES.get(type_tag)
    if family:
        return family
    if "StyleVariant" in type_tag:
        return STYLE_VARIANT
    return UNKNOWN


class FieldIdAllocator:
    """Keeps field ids unique within one property sheet."""

    def __init__(self) -> None:
        self._used: Set[str] = set()

    def allocate(self, label: str) -> str:
        base = to_kebab_case(label) or "field"
        candidate = base
        counter = 2
        while candidate in self._used:
            candidate = f"{base}-{counter}"
            counter += 1
        self._used.add(candidate)
        return candidate


class PropertyClassifier:
    """Groups a component's properties into ordered sections."""

    def classify(
        self,
        properties: Sequence[RawProperty],
        variants: Mapping[str, Sequence[VariantOption]],
    ) -> List[PropertySection]:
        ids = FieldIdAllocator()
        variant_fields: List[PropertyField] = []
        slot_fields: List[PropertyField] = []
        visibility_fields: List[PropertyField] = []
        settings_fields: List[PropertyField] = []
        advanced_fields: List[PropertyField] = []
        grouped: Dict[str, List[PropertyField]] = {}

        for prop in properties:
            field = convert_property(prop, variants, ids)
            family = type_family(prop.type)
            if family == STYLE_VARIANT:
                variant_fields.append(field)
            elif family == SLOT:
                slot_fields.append(field)
            elif family == VISIBILITY:
                visibility_fields.append(field)
            elif prop.is_private:
                advanced_fields.append(field)
            elif prop.group:
                grouped.setdefault(prop.group, []).append(field)
            else:
                settings_fields.append(field)

        sections: List[PropertySection] = []
        if variant_fields:
            sections.append(PropertySection(id="variants", label="Variants", fields=variant_fields))
        for group_name in sorted(grouped):
            sections.append(
                PropertySection(
                    id=to_kebab_case(group_name) or "group",
                    label=group_name,
                    fields=grouped[group_name],
                )
            )
        if slot_fields:
            sections.append(PropertySection(id="slots", label="Slots", fields=slot_fields))
        if visibility_fields:
            sections.append(
                PropertySection(id="visibility", label="Visibility", fields=visibility_fields)
            )
        if settings_fields:
            sections.append(PropertySection(id="settings", label="Settings", fields=settings_fields))
        if advanced_fields:
            sections.append(
                PropertySection(
                    id="advanced",
                    label="Advanced",
                    fields=advanced_fields,
                    default_expanded=False,
                )
            )
        return sections


def classify_properties(
    properties: Sequence[RawProperty],
    variants: Mapping[str, Sequence[VariantOption]],
) -> List[PropertySection]:
    return PropertyClassifier().classify(properties, variants)


def convert_property(
    prop: RawProperty,
    variants: Mapping[str, Sequence[VariantOption]],
    ids: Optional[FieldIdAllocator] = None,
) -> PropertyField:
    """Convert one raw property into a typed field."""
    ids = ids or FieldIdAllocator()
    label = prop.display_name or prop.name
    field = PropertyField(id=ids.allocate(label), label=label, kind="text", help_text=prop.tooltip)
    family = type_family(prop.type)

    if family == TEXT:
        field.value = prop.default if isinstance(prop.default, str) else ""
    elif family == NUMBER:
        field.value = "" if prop.default is None else format_number(prop.default)
        if prop.min is not None or prop.max is not None:
            range_text = f"Range: {_bound(prop.min)} to {_bound(prop.max)}"
            field.help_text = f"{field.help_text}. {range_text}" if field.help_text else range_text
    elif family == LIST:
        field.value = extract_plain_text(prop.default)
    elif family == STYLE_VARIANT:
        field.kind = "style"
        field.options = [
            FieldOption(label=option.display_name, value=option.id)
            for option in variants.get(prop.id, ())
        ]
        field.value = prop.default if isinstance(prop.default, str) and prop.default else "base"
    elif family == VISIBILITY:
        field.kind = "segmented"
        field.options = list(VISIBILITY_OPTIONS)
        field.value = visibility_value(prop.default)
    elif family == SLOT:
        field.kind = "slot"
        field.value = None
    elif family == LINK:
        field.kind = "link"
        field.value = convert_link_value(prop.default)
    else:
        field.value = _stringify_default(prop.default)
    return field


def visibility_value(default: Any) -> str:
    """Empty condition lists mean visible; any other default means hidden."""
    if isinstance(default, list) and not default:
        return "visible"
    return "hidden"


def extract_plain_text(value: Any) -> str:
    """Flatten rich-text fragments into plain text."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(extract_plain_text(item) for item in value)
    if isinstance(value, Mapping):
        data = value.get("data")
        if isinstance(data, Mapping) and isinstance(data.get("value"), str):
            return data["value"]
        for key in ("value", "text"):
            if isinstance(value.get(key), str):
                return value[key]
        children = value.get("children")
        if isinstance(children, list):
            return extract_plain_text(children)
    return ""


def convert_link_value(value: Any) -> LinkValue:
    if not isinstance(value, Mapping):
        return LinkValue()
    mode = value.get("mode")
    url = value.get("url")
    preload = value.get("preload")
    return LinkValue(
        type=_LINK_MODES.get(mode, "url") if isinstance(mode, str) else "url",
        url=url if isinstance(url, str) else "#",
        open_in="new" if value.get("openIn") == "new" else "this",
        preload=preload if isinstance(preload, str) and preload else "default",
    )


def _bound(value: Optional[float]) -> str:
    return "?" if value is None else format_number(value)


def _stringify_default(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


__all__ = [
    "FieldIdAllocator",
    "PropertyClassifier",
    "classify_properties",
    "convert_link_value",
    "convert_property",
    "extract_plain_text",
    "type_family",
    "visibility_value",
]
