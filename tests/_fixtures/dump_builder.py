"""Helpers for constructing extractor dumps in tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional


def element(
    tag: str = "div",
    *children: Dict[str, Any],
    **fields: Any,
) -> Dict[str, Any]:
    """Return a raw element node; keyword fields use extractor spelling."""
    node: Dict[str, Any] = {"type": "Block", "tag": tag, **fields}
    if children:
        node["children"] = list(children)
    return node


def instance(name: str, component_id: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
    """Return a raw node embedding another component."""
    return {
        "type": "ComponentInstance",
        "componentId": component_id or f"id-{name.lower()}",
        "componentName": name,
        **fields,
    }


def binding(prop: str, prop_name: Optional[str] = None, slot: Optional[str] = None) -> Dict[str, Any]:
    node: Dict[str, Any] = {"_binding": True, "from": "props", "prop": prop}
    if prop_name:
        node["propName"] = prop_name
    if slot:
        node["slotDisplayName"] = slot
    return node


class DumpBuilder:
    """Accumulates raw components and renders a complete dump."""

    def __init__(self) -> None:
        self.components: List[Dict[str, Any]] = []
        self.breakpoints: Dict[str, Any] = {
            "main": {"id": "main"},
            "medium": {"id": "medium", "maxWidth": 991},
        }

    def add(
        self,
        name: str,
        *,
        group: Optional[str] = None,
        render: Optional[Dict[str, Any]] = None,
        properties: Optional[List[Dict[str, Any]]] = None,
        **fields: Any,
    ) -> Dict[str, Any]:
        component: Dict[str, Any] = {
            "id": fields.pop("id", f"id-{name.lower()}-{len(self.components)}"),
            "name": name,
            "group": group,
            "description": fields.pop("description", None),
            "properties": properties if properties is not None else [],
            "render": render if render is not None else element("div"),
            "css": fields.pop("css", {}),
            "cssVariables": fields.pop("cssVariables", None),
            "variants": fields.pop("variants", {}),
            "embeds": fields.pop("embeds", None),
        }
        component.update(fields)
        self.components.append(component)
        return component

    def build(self) -> Dict[str, Any]:
        return {
            "breakpoints": copy.deepcopy(self.breakpoints),
            "components": copy.deepcopy(self.components),
            "_meta": {"totalComponents": len(self.components), "styleMapSize": 0},
        }

    def write(self, path: Path) -> Path:
        path.write_text(json.dumps(self.build()), encoding="utf-8")
        return path



def sample_library() -> DumpBuilder:
    """Return a small three-component library: Card > Button > Icon."""
    builder = DumpBuilder()
    builder.add(
        "Icon",
        id="cmp-icon",
        group="Media",
        description="Inline SVG icon.",
        render=element("svg", styles=[{"id": "s-icon", "className": "icon"}]),
        css={"icon": {"className": "icon", "base": "width: 1em; height: 1em;", "variants": {}}},
    )
    builder.add(
        "Button",
        id="cmp-button",
        group="Actions",
        description="Primary call to action.",
        properties=[
            {"id": "p-style", "label": "Style", "type": "Basic/StyleVariant", "defaultValue": None},
            {"id": "p-label", "label": "Label", "type": "Builtin/Text", "defaultValue": "Click me",
             "toolTip": "Visible | button text"},
            {"id": "p-link", "label": "Link", "type": "Basic/Link",
             "defaultValue": {"mode": "external", "url": "https://example.com", "openIn": "new"}},
            {"id": "p-show-icon", "label": "Show Icon", "type": "Visibility/VisibilityConditions",
             "defaultValue": []},
            {"id": "p-icon-size", "label": "Icon/Size", "type": "Builtin/Number", "defaultValue": 16,
             "min": 8, "max": 64},
        ],
        render=element(
            "a",
            instance("Icon", "cmp-icon"),
            binding("p-label", prop_name="Label"),
            styles=[{"id": "s-button", "className": "button"}],
            displayName="Button Link",
        ),
        css={
            "button": {
                "className": "button",
                "base": "padding: 8px; color: @var_variable-aaa;",
                "variants": {
                    "medium": {"breakpoint": "medium", "variantName": None, "css": "padding: 4px;"},
                    "main_v-2": {
                        "breakpoint": "main",
                        "variantName": "Secondary",
                        "css": "---mode--Secondary: true; background: @raw<|red|>;",
                    },
                },
            }
        },
        cssVariables={
            "variable-aaa": {
                "name": "Brand/Primary",
                "type": "color",
                "value": "@ref:variable-bbb",
                "modes": {"Button Style/Secondary Mode": {"type": "color", "value": "#111111"}},
            },
            "variable-bbb": {
                "name": "Base/Blue",
                "type": "color",
                "value": {"type": "color", "value": "#2563eb"},
            },
        },
        variants={
            "p-style": [
                {"id": "base", "displayName": "Primary"},
                {"id": "v-2", "displayName": "Secondary"},
            ]
        },
    )
    builder.add(
        "Card",
        id="cmp-card",
        group="Layout",
        properties=[{"id": "p-content", "label": "Content", "type": "Slots/SlotContent"}],
        render=element(
            "div",
            element("div", binding("p-content", slot="Content"), slot="content"),
            instance("Button", "cmp-button"),
            styles=[{"id": "s-card", "className": "card"}],
        ),
    )
    return builder


__all__ = ["DumpBuilder", "binding", "element", "instance", "sample_library"]
