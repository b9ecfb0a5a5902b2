"""Render tree normalization into generic labelled nodes."""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..models import Attribute, BindingNode, ElementNode, RenderNode, TreeNode
from .lookup import referenced_name

UNRESOLVED_CLASS = "(unresolved)"


class TreeNormalizer:
    """Rewrites a render node into :class:`TreeNode` objects.

    Node ids are assigned in visit order (``node-0`` is the root), so one
    normalizer instance should be used per component. ``component_names``
    maps component ids to names for references that carry only an id.
    """

    def __init__(self, component_names: Optional[Mapping[str, str]] = None) -> None:
        self.component_names = component_names or {}
        self._counter = 0

    def normalize(self, root: Optional[RenderNode]) -> List[TreeNode]:
        if not isinstance(root, ElementNode):
            return []
        node = self._walk(root)
        return [node] if node is not None else []

    def _walk(self, node: RenderNode) -> Optional[TreeNode]:
        if isinstance(node, BindingNode):
            return TreeNode(id=self._next_id(), label=binding_label(node), kind="binding")
        if not isinstance(node, ElementNode):
            return None

        result = TreeNode(
            id=self._next_id(),
            label=element_label(node, self.component_names),
            kind=element_kind(node),
        )
        for child in node.children:
            child_node = self._walk(child)
            if child_node is not None:
                result.children.append(child_node)
        return result

    def _next_id(self) -> str:
        node_id = f"node-{self._counter}"
        self._counter += 1
        return node_id


def normalize_tree(
    root: Optional[RenderNode], component_names: Optional[Mapping[str, str]] = None
) -> List[TreeNode]:
    """Return the normalized tree for one component's render root."""
    return TreeNormalizer(component_names).normalize(root)


def binding_label(node: BindingNode) -> str:
    if node.slot_display_name:
        return f"SLOT: {node.slot_display_name}"
    return f"BINDS: {node.prop_name or node.prop or '?'}"


def element_kind(node: ElementNode) -> str:
    # A slot binding among the direct children wins over every other kind.
    for child in node.children:
        if isinstance(child, BindingNode) and child.slot_display_name:
            return "slot"
    if node.is_component:
        return "component"
    if node.slot:
        return "slot"
    return "element"


def element_label(node: ElementNode, component_names: Optional[Mapping[str, str]] = None) -> str:
    component = referenced_name(node, component_names)
    if component:
        label = f"[{component}]"
    elif node.tag:
        label = f"<{node.tag}>"
        class_name = node.styles[0].class_name if node.styles else ""
        if class_name and class_name != UNRESOLVED_CLASS:
            label += f" .{class_name}"
    elif node.raw_type:
        label = f"[{node.raw_type}]"
    else:
        label = "[node]"

    if node.display_name and not node.slot:
        label = f'"{node.display_name}" {label}'

    attribute_names = [name for name in (_attribute_name(a) for a in node.attributes) if name]
    if attribute_names:
        label += f" [{', '.join(attribute_names)}]"

    if node.is_text:
        label += " [TEXT]"
    return label


def _attribute_name(attribute: Attribute) -> Optional[str]:
    if isinstance(attribute.name, str):
        return attribute.name
    if isinstance(attribute.name, BindingNode):
        return f"{{{attribute.name.prop or '?'}}}"
    return None


__all__ = ["TreeNormalizer", "binding_label", "element_kind", "element_label", "normalize_tree"]
