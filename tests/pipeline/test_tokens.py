"""Tests for design token resolution."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from compdoc.parsing import parse_component
from compdoc.pipeline.tokens import format_literal, mode_display_name, resolve_tokens
from tests._fixtures.dump_builder import sample_library


def _variables(raw: Dict[str, Any]):
    return parse_component({"id": "c", "name": "C", "cssVariables": raw}).variables


def test_reference_chain_resolves_to_literal() -> None:
    button = parse_component(sample_library().build()["components"][1], position=1)
    tokens = resolve_tokens(button.variables, ["Primary", "Secondary"])
    assert [t.name for t in tokens] == ["Brand/Primary", "Base/Blue"]
    primary, blue = tokens
    assert primary.type == "color"
    assert primary.value == "#2563eb"
    assert primary.chain == "var(Base/Blue) → #2563eb"
    assert primary.variants == {"Secondary": "#111111"}
    assert primary.unresolved is False
    assert blue.chain == "#2563eb"
    assert blue.variants is None


def test_reference_cycle_terminates_unresolved() -> None:
    variables = _variables(
        {
            "variable-a": {"name": "A", "type": "color", "value": "@ref:variable-b"},
            "variable-b": {"name": "B", "type": "color", "value": "@ref:variable-a"},
        }
    )
    first, second = resolve_tokens(variables)
    assert first.unresolved and second.unresolved
    assert first.value == "@ref:variable-a"
    assert first.chain == "var(B) → @ref:variable-a"


def test_self_reference_terminates() -> None:
    variables = _variables({"variable-a": {"name": "A", "type": "color", "value": "@ref:variable-a"}})
    (token,) = resolve_tokens(variables)
    assert token.unresolved
    assert token.value == "@ref:variable-a"


def test_missing_reference_target_is_marked() -> None:
    variables = _variables(
        {"variable-a": {"name": "A", "type": "length", "value": {"type": "ref", "value": {"variableId": "variable-f00"}}}}
    )
    (token,) = resolve_tokens(variables)
    assert token.value == "@ref:variable-f00"
    assert token.unresolved


def test_raw_text_expands_embedded_tokens() -> None:
    variables = _variables(
        {
            "variable-aa": {"name": "Space/Base", "type": "length", "value": {"value": 4, "unit": "px"}},
            "variable-bb": {"name": "Space/Double", "type": "length", "value": "calc(@var_variable-aa * 2)"},
            "variable-cc": {"name": "Space/Broken", "type": "length", "value": "calc(@var_variable-dd * 2)"},
        }
    )
    base, double, broken = resolve_tokens(variables)
    assert base.value == "4px"
    assert double.value == "calc(var(--Space-Base) * 2)"
    assert double.unresolved is False
    assert broken.value == "calc(@var_variable-dd * 2)"
    assert broken.unresolved is True


def test_unsupported_types_are_reported_as_raw() -> None:
    variables = _variables({"variable-a": {"name": "Font", "type": "font-family", "value": "Inter"}})
    (token,) = resolve_tokens(variables)
    assert token.type == "raw"
    assert token.value == "Inter"


def test_no_variables_yield_no_tokens() -> None:
    assert resolve_tokens({}) == []
    assert resolve_tokens(None) == []


@pytest.mark.parametrize(
    ("var_type", "value", "expected"),
    [
        ("color", {"r": 255, "g": 0, "b": 0, "a": 0.5}, "rgba(255, 0, 0, 0.5)"),
        ("color", {"hex": "#fff"}, "#fff"),
        ("color", {"type": "color", "value": "red"}, "red"),
        ("length", {"value": 16.0, "unit": "rem"}, "16rem"),
        ("length", 12, "12"),
        ("number", 1.5, "1.5"),
        ("number", {"value": 2.0}, "2"),
        ("font-family", "Inter", "Inter"),
        ("color", None, ""),
    ],
)
def test_format_literal(var_type, value, expected) -> None:
    assert format_literal(var_type, value) == expected


def test_mode_names_match_variants_or_stay_whole() -> None:
    variants = {"Dark", "Compact Mode"}
    assert mode_display_name("Theme/Dark Mode", variants) == "Dark"
    assert mode_display_name("Density/Compact Mode", variants) == "Compact Mode"
    assert mode_display_name("Theme/Light Mode", variants) == "Theme/Light Mode"
