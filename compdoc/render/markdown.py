"""Markdown serialization of component documentation."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from ..models import ComponentDoc, FieldValue, LinkValue, TreeNode

INDEX_TITLE = "Component Library"


def render_component(doc: ComponentDoc) -> str:
    """Return the Markdown page for one component."""
    lines: List[str] = [
        f"# {doc.name}",
        "",
        f"**Group:** {doc.group}",
        f"**Description:** {doc.description}",
        "",
    ]

    if doc.variants:
        lines.extend(["## Variants", "", "| Variant | Options |", "|---------|---------|"])
        for variant in doc.variants:
            options = ", ".join(option.label for option in variant.options)
            lines.append(f"| {escape_cell(variant.property_label)} | {escape_cell(options) or '-'} |")
        lines.append("")

    if doc.properties:
        lines.extend(["## Properties", ""])
        for section in doc.properties:
            lines.extend(
                [
                    f"### {section.label}",
                    "",
                    "| Name | Type | Default | Help |",
                    "|------|------|---------|------|",
                ]
            )
            for field in section.fields:
                help_text = escape_cell(field.help_text) if field.help_text else "-"
                lines.append(
                    f"| {escape_cell(field.label)} | {field.kind} | {format_value(field.value)} | {help_text} |"
                )
            lines.append("")

    lines.extend(["## Render Tree", "", "```", render_tree_text(doc.tree), "```", ""])

    if doc.css:
        lines.extend(["## CSS", "", "```css", doc.css, "```", ""])

    if doc.tokens:
        lines.extend(["## Design Tokens", ""])
        variant_columns = sorted(
            {name for token in doc.tokens for name in (token.variants or {})}
        )
        header = ["Token", "Type", "Default", *variant_columns]
        lines.append(f"| {' | '.join(escape_cell(col) for col in header)} |")
        lines.append(f"| {' | '.join('---' for _ in header)} |")
        for token in doc.tokens:
            row = [f"`{escape_cell(token.name)}`", token.type, escape_cell(token.value) or "-"]
            for column in variant_columns:
                row.append(escape_cell((token.variants or {}).get(column, "")) or "-")
            lines.append(f"| {' | '.join(row)} |")
        lines.append("")

    lines.extend(["## Dependencies", ""])
    lines.append(f"**Contains:** {', '.join(doc.contains) if doc.contains else 'None'}")
    lines.append(f"**Used by:** {', '.join(doc.used_by) if doc.used_by else 'None'}")
    lines.append("")

    return "\n".join(lines)


def render_index(docs: Sequence[ComponentDoc]) -> str:
    """Return the cross-component index page."""
    lines: List[str] = [f"# {INDEX_TITLE}", ""]

    groups: Dict[str, List[ComponentDoc]] = {}
    for doc in docs:
        groups.setdefault(doc.group or "Ungrouped", []).append(doc)

    lines.extend(["## Components by Group", ""])
    for group_name in sorted(groups):
        lines.extend([f"### {group_name}", ""])
        for doc in sorted(groups[group_name], key=lambda d: (d.name, d.slug)):
            variant_count = sum(len(variant.options) for variant in doc.variants)
            property_count = sum(len(section.fields) for section in doc.properties)
            lines.append(
                f"- [{doc.name}]({doc.slug}.md) - {variant_count} variants, {property_count} props"
            )
        lines.append("")

    lines.extend(["## Dependency Overview", ""])
    roots = [doc for doc in docs if not doc.used_by]
    nested = [doc for doc in docs if doc.used_by and doc.contains]
    leaves = [doc for doc in docs if doc.used_by and not doc.contains]
    _append_name_list(lines, "Root components", roots)
    _append_name_list(lines, "Nested components", nested)
    _append_name_list(lines, "Leaf components", leaves)
    lines.append("")

    lines.extend(["## Quick Reference", ""])
    _append_name_list(lines, "Components with slots", [d for d in docs if _has_field_kind(d, "slot")])
    _append_name_list(lines, "Components with variants", [d for d in docs if d.variants])
    _append_name_list(lines, "Components with links", [d for d in docs if _has_field_kind(d, "link")])
    _append_name_list(lines, "Components with tokens", [d for d in docs if d.tokens])
    lines.append("")

    total_properties = sum(len(s.fields) for d in docs for s in d.properties)
    lines.extend(
        [
            "## Statistics",
            "",
            f"- **Total components:** {len(docs)}",
            f"- **Total properties:** {total_properties}",
            f"- **Total design tokens:** {sum(len(d.tokens) for d in docs)}",
            f"- **Total CSS classes:** {sum(len(d.css_raw) for d in docs)}",
            "",
        ]
    )
    return "\n".join(lines)


def render_tree_text(nodes: Iterable[TreeNode], indent: int = 0) -> str:
    lines: List[str] = []
    prefix = "  " * indent
    for node in nodes:
        lines.append(f"{prefix}{node.label}")
        if node.children:
            lines.append(render_tree_text(node.children, indent + 1))
    return "\n".join(lines)


def format_value(value: FieldValue) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, LinkValue):
        return escape_cell(f"{value.type}: {value.url}")
    return escape_cell(str(value)) or "-"


def escape_cell(text: str | None) -> str:
    """Make free text safe to embed in a table cell."""
    if not text:
        return ""
    return text.replace("\\", "\\\\").replace("|", "\\|").replace("\r", "").replace("\n", " ")


def _append_name_list(lines: List[str], title: str, docs: Sequence[ComponentDoc]) -> None:
    if docs:
        lines.append(f"**{title}:** {', '.join(doc.name for doc in docs)}")


def _has_field_kind(doc: ComponentDoc, kind: str) -> bool:
    return any(field.kind == kind for section in doc.properties for field in section.fields)


__all__ = ["escape_cell", "format_value", "render_component", "render_index", "render_tree_text"]
