"""Design variable resolution into token tables."""

from __future__ import annotations

import json
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..models import DesignToken, RawCssVariable, RawTextValue, ReferenceValue, VariableValue
from .utils import CHAIN_ARROW, REF_MARKER, VAR_TOKEN_PATTERN, css_var_name, format_number

TOKEN_TYPES = {"color", "length", "number"}

_MODE_SUFFIX = re.compile(r"\s*Mode$")


@dataclass
class _Entry:
    name: str
    type: str
    value: str
    modes: Dict[str, str] = field(default_factory=dict)


@dataclass
class Resolution:
    """Outcome of following one value to its end."""

    chain: str
    value: str
    unresolved: bool


class TokenResolver:
    """Resolves one component's variable map.

    The first pass drains a breadth-first worklist, formatting literals and
    leaving ``@ref:<id>`` placeholders for references. The second pass
    follows each placeholder chain with a visited set, so reference cycles
    and missing targets end in an unresolved marker instead of looping.
    """

    def __init__(self, variables: Mapping[str, RawCssVariable]) -> None:
        self.variables = variables
        self._entries: Dict[str, _Entry] = {}

    def resolve(self, variant_names: Iterable[str] = ()) -> List[DesignToken]:
        self._drain(deque(self.variables))
        known_variants = set(variant_names)

        tokens: List[DesignToken] = []
        for var_id in self.variables:
            entry = self._entries.get(var_id)
            if entry is None:
                continue
            default = self.follow(entry.value, origin=var_id)
            unresolved = default.unresolved
            mode_values: Dict[str, str] = {}
            for mode_key, mode_value in entry.modes.items():
                resolution = self.follow(mode_value, origin=var_id)
                unresolved = unresolved or resolution.unresolved
                mode_values[mode_display_name(mode_key, known_variants)] = resolution.value
            tokens.append(
                DesignToken(
                    name=entry.name,
                    type=entry.type if entry.type in TOKEN_TYPES else "raw",
                    value=default.value,
                    chain=default.chain,
                    variants=mode_values or None,
                    unresolved=unresolved,
                )
            )
        return tokens

    def follow(self, value: str, *, origin: Optional[str] = None) -> Resolution:
        """Walk ``value`` through reference placeholders to a literal."""
        visited: Set[str] = {origin} if origin else set()
        hops: List[str] = []
        current = value
        while current.startswith(REF_MARKER):
            target_id = current[len(REF_MARKER):]
            target = self._entries.get(target_id)
            if target is None or target_id in visited:
                hops.append(current)
                return Resolution(chain=f" {CHAIN_ARROW} ".join(hops), value=current, unresolved=True)
            visited.add(target_id)
            hops.append(f"var({target.name})")
            current = target.value
        expanded, missing = self._expand_raw(current)
        hops.append(expanded)
        return Resolution(chain=f" {CHAIN_ARROW} ".join(hops), value=expanded, unresolved=missing)

    def _drain(self, queue: Deque[str]) -> None:
        while queue:
            var_id = queue.popleft()
            if var_id in self._entries:
                continue
            variable = self.variables.get(var_id)
            if variable is None:
                continue
            entry = _Entry(
                name=variable.name,
                type=variable.type,
                value=self._first_pass(variable.value, variable.type, queue),
            )
            for mode_key, mode_value in variable.modes.items():
                entry.modes[mode_key] = self._first_pass(mode_value, variable.type, queue)
            self._entries[var_id] = entry

    def _first_pass(self, value: Optional[VariableValue], var_type: str, queue: Deque[str]) -> str:
        if value is None:
            return ""
        if isinstance(value, ReferenceValue):
            if value.target_id not in self._entries:
                queue.append(value.target_id)
            return f"{REF_MARKER}{value.target_id}"
        if isinstance(value, RawTextValue):
            for match in VAR_TOKEN_PATTERN.finditer(value.text):
                if match.group(1) not in self._entries:
                    queue.append(match.group(1))
            return value.text
        return format_literal(value.type or var_type, value.value)

    def _expand_raw(self, text: str) -> Tuple[str, bool]:
        missing = False

        def _replace(match: "re.Match[str]") -> str:
            nonlocal missing
            target = self._entries.get(match.group(1))
            if target is None:
                missing = True
                return match.group(0)
            return f"var({css_var_name(target.name)})"

        return VAR_TOKEN_PATTERN.sub(_replace, text), missing


def resolve_tokens(
    variables: Optional[Mapping[str, RawCssVariable]],
    variant_names: Iterable[str] = (),
) -> List[DesignToken]:
    if not variables:
        return []
    return TokenResolver(variables).resolve(variant_names)


def format_literal(var_type: str, value: Any) -> str:
    """Render a literal variable value according to its type."""
    if value is None:
        return ""
    if var_type == "length":
        if isinstance(value, Mapping):
            return f"{format_number(value.get('value', ''))}{value.get('unit') or ''}"
        return format_number(value)
    if var_type == "number":
        if isinstance(value, Mapping):
            return format_number(value.get("value", ""))
        return format_number(value)
    if var_type == "color":
        return _format_color(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return format_number(value)
    return json.dumps(value, sort_keys=True, default=str)


def _format_color(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        if value.get("type") == "color" and "value" in value:
            return _format_color(value["value"])
        if isinstance(value.get("hex"), str):
            return value["hex"]
        if "r" in value:
            alpha = value.get("a", 1)
            return (
                f"rgba({format_number(value['r'])}, {format_number(value.get('g', 0))}, "
                f"{format_number(value.get('b', 0))}, {format_number(1 if alpha is None else alpha)})"
            )
    return json.dumps(value, sort_keys=True, default=str)


def mode_display_name(mode_key: str, variant_names: Set[str]) -> str:
    """Name a mode after the matching component variant, else keep it whole."""
    segment = mode_key.rsplit("/", 1)[-1].strip()
    stripped = _MODE_SUFFIX.sub("", segment)
    if stripped in variant_names:
        return stripped
    if segment in variant_names:
        return segment
    return mode_key


__all__ = [
    "Resolution",
    "TokenResolver",
    "format_literal",
    "mode_display_name",
    "resolve_tokens",
]
