"""Flattening of per-component style blocks into formatted CSS text."""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional

from ..models import CssVariantBlock, RawCssClass, RawCssVariable
from .utils import VAR_TOKEN_PATTERN, css_var_name

RAW_OPEN = "@raw<|"
RAW_CLOSE = "|>"

_MODE_SWITCH = re.compile(r"---mode--([^:]+):[^;]+;?")
_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_MODE_ANNOTATION = re.compile(r"^/\* Activates .+ token set \*/$")


def substitute_variables(css: str, variable_names: Mapping[str, str]) -> str:
    """Replace ``@var_<id>`` tokens with ``var(--name)`` for known variables."""

    def _replace(match: "re.Match[str]") -> str:
        name = variable_names.get(match.group(1))
        if name is None:
            return match.group(0)
        return f"var({css_var_name(name)})"

    return VAR_TOKEN_PATTERN.sub(_replace, css)


def strip_raw_wrappers(css: str) -> str:
    """Unwrap ``@raw<|...|>`` spans one nesting level at a time.

    The wrapper nests, so closing markers are matched by depth. An opener
    without a matching close is skipped and left in place.
    """
    result = css
    start = 0
    while True:
        open_at = result.find(RAW_OPEN, start)
        if open_at == -1:
            return result
        depth = 1
        pos = open_at + len(RAW_OPEN)
        while pos < len(result):
            if result.startswith(RAW_OPEN, pos):
                depth += 1
                pos += len(RAW_OPEN)
            elif result.startswith(RAW_CLOSE, pos):
                depth -= 1
                if depth == 0:
                    break
                pos += len(RAW_CLOSE)
            else:
                pos += 1
        if depth == 0:
            inner = result[open_at + len(RAW_OPEN):pos]
            result = result[:open_at] + inner + result[pos + len(RAW_CLOSE):]
            # The splice can join text into a new opener just before open_at.
            start = max(0, open_at - len(RAW_OPEN) + 1)
        else:
            start = open_at + len(RAW_OPEN)


def annotate_mode_switches(css: str) -> str:
    """Replace internal mode-switch declarations with a comment."""

    def _replace(match: "re.Match[str]") -> str:
        return f"/* Activates {match.group(1).strip()} token set */;"

    return _MODE_SWITCH.sub(_replace, css)


def clean_css(css: str, variable_names: Mapping[str, str]) -> str:
    """Apply variable substitution, wrapper stripping and mode annotation."""
    result = substitute_variables(css, variable_names)
    result = strip_raw_wrappers(result)
    return annotate_mode_switches(result)


def split_declarations(css: str) -> List[str]:
    """Split on ``;`` outside parentheses, quoted strings and comments."""
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    start = 0
    pos = 0
    while pos < len(css):
        char = css[pos]
        if quote:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif css.startswith("/*", pos):
            end = css.find("*/", pos + 2)
            pos = len(css) if end == -1 else end + 2
            continue
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == ";" and depth == 0:
            parts.append(css[start:pos])
            start = pos + 1
        pos += 1
    parts.append(css[start:])
    return parts


def format_declarations(css: str) -> List[str]:
    """Split, deduplicate and sort declarations; return one line per entry.

    Mode annotations come first in source order, declarations follow sorted
    by property name (stable, so repeated properties keep their order).
    """
    annotations: List[str] = []
    declarations: List[str] = []
    for fragment in split_declarations(css):
        text = fragment.strip()
        if not text:
            continue
        if _MODE_ANNOTATION.match(text):
            if text not in annotations:
                annotations.append(text)
            continue
        text = _COMMENT.sub("", text).strip()
        if not text or text in declarations:
            continue
        declarations.append(text)

    declarations.sort(key=_property_name)
    return [f"  {note}" for note in annotations] + [f"  {decl};" for decl in declarations]


def format_block(selector: str, css: str, *, comment: Optional[str] = None) -> Optional[str]:
    lines = format_declarations(css)
    if not lines:
        return None
    body = "\n".join(lines)
    block = f"{selector} {{\n{body}\n}}"
    return f"/* {comment} */\n{block}" if comment else block


class CssResolver:
    """Builds the flattened CSS text for one component.

    ``variable_names`` maps variable ids to names for ``@var_`` substitution;
    ``variant_names`` maps variant option ids to display names for block
    comments.
    """

    def __init__(
        self,
        variable_names: Optional[Mapping[str, str]] = None,
        variant_names: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.variable_names: Dict[str, str] = dict(variable_names or {})
        self.variant_names: Dict[str, str] = dict(variant_names or {})

    def resolve(self, classes: Mapping[str, RawCssClass]) -> str:
        blocks: List[str] = []
        for class_key, css_class in classes.items():
            selector = f".{css_class.class_name or class_key}"
            if css_class.base:
                block = format_block(selector, clean_css(css_class.base, self.variable_names))
                if block:
                    blocks.append(block)
            for variant_key, variant in css_class.variants.items():
                if not variant.css:
                    continue
                block = format_block(
                    selector,
                    clean_css(variant.css, self.variable_names),
                    comment=self.variant_comment(variant_key, variant),
                )
                if block:
                    blocks.append(block)
        return "\n\n".join(blocks)

    def variant_comment(self, variant_key: str, variant: CssVariantBlock) -> str:
        name = variant.variant_name or self._lookup_variant(variant_key)
        return f"Variant: {name}" if name else variant_key

    def _lookup_variant(self, variant_key: str) -> Optional[str]:
        # Keys are either a bare option id or ``<breakpoint>_<option id>``.
        if variant_key in self.variant_names:
            return self.variant_names[variant_key]
        _, sep, option_id = variant_key.partition("_")
        if sep:
            return self.variant_names.get(option_id)
        return None


def generate_css(
    classes: Mapping[str, RawCssClass],
    variables: Optional[Mapping[str, RawCssVariable]] = None,
    *,
    variable_names: Optional[Mapping[str, str]] = None,
    variant_names: Optional[Mapping[str, str]] = None,
) -> str:
    if variable_names is None:
        variable_names = {var_id: variable.name for var_id, variable in (variables or {}).items()}
    return CssResolver(variable_names, variant_names).resolve(classes)


def _property_name(declaration: str) -> str:
    return declaration.split(":", 1)[0].strip()


__all__ = [
    "CssResolver",
    "annotate_mode_switches",
    "clean_css",
    "format_block",
    "format_declarations",
    "generate_css",
    "split_declarations",
    "strip_raw_wrappers",
    "substitute_variables",
]
