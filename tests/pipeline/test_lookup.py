"""Tests for the global lookup pass."""

from __future__ import annotations

from compdoc.models import ElementNode, RawComponent
from compdoc.parsing import parse_component
from compdoc.pipeline.lookup import SlugAllocator, build_lookup_tables, collect_dependencies
from compdoc.pipeline.utils import to_kebab_case
from tests._fixtures.dump_builder import element, instance, sample_library


def _components(builder) -> list[RawComponent]:
    return [parse_component(raw, position=i) for i, raw in enumerate(builder.build()["components"])]


def test_to_kebab_case_splits_camel_case_and_strips_symbols() -> None:
    assert to_kebab_case("PrimaryButton") == "primary-button"
    assert to_kebab_case("Nav Bar_Item") == "nav-bar-item"
    assert to_kebab_case("Hero (Large)!") == "hero-large"


def test_slug_allocator_uses_group_then_numeric_suffix() -> None:
    allocator = SlugAllocator()
    assert allocator.allocate("Button", "Actions") == "button"
    assert allocator.allocate("Button", "Forms") == "forms-button"
    assert allocator.allocate("Button", "Forms") == "forms-button-2"
    assert allocator.allocate("Button") == "button-2"


def test_duplicate_names_in_different_groups_get_group_slug(dump_builder) -> None:
    dump_builder.add("Button", group="Actions")
    dump_builder.add("Button", group="Forms")
    tables = build_lookup_tables(_components(dump_builder))
    assert sorted(tables.component_slugs.values()) == ["button", "forms-button"]


def test_slugs_are_unique_for_many_collisions(dump_builder) -> None:
    for group in ("A", "A", "B", None, None):
        dump_builder.add("Card", group=group)
    tables = build_lookup_tables(_components(dump_builder))
    slugs = list(tables.component_slugs.values())
    assert len(slugs) == len(set(slugs)) == 5
    assert slugs[0] == "card"


def test_lookup_tables_collect_names_labels_and_variants() -> None:
    tables = build_lookup_tables(_components(sample_library()))
    assert tables.component_names["cmp-button"] == "Button"
    assert tables.property_names["cmp-button"]["p-icon-size"] == "Icon/Size"
    assert tables.variant_values["cmp-button"] == {"base": "Primary", "v-2": "Secondary"}
    assert tables.variable_names["cmp-button"]["variable-bbb"] == "Base/Blue"
    assert tables.dependencies["Card"] == ["Button"]
    assert tables.dependencies["Button"] == ["Icon"]
    assert tables.reverse_dependencies["Icon"] == ["Button"]
    assert "Card" not in tables.reverse_dependencies


def test_collect_dependencies_keeps_first_seen_order_without_duplicates() -> None:
    raw = element(
        "div",
        instance("Badge"),
        element("section", instance("Avatar"), instance("Badge")),
        instance("Avatar"),
    )
    root = parse_component({"id": "x", "name": "X", "properties": [], "render": raw}).render
    assert isinstance(root, ElementNode)
    assert collect_dependencies(root) == ["Badge", "Avatar"]


def test_self_containing_component_is_its_own_dependency(dump_builder) -> None:
    dump_builder.add("Tree", render=element("ul", instance("Tree")))
    tables = build_lookup_tables(_components(dump_builder))
    assert tables.dependencies["Tree"] == ["Tree"]
    assert tables.reverse_dependencies["Tree"] == ["Tree"]


def test_to_kebab_case_collapses_and_trims_hyphens() -> None:
    assert to_kebab_case("--A - B--") == "a-b"
    assert to_kebab_case("Кнопка") == ""


def test_slug_falls_back_to_id_then_generic_name() -> None:
    allocator = SlugAllocator()
    assert allocator.allocate("Кнопка", fallback="btn-ru") == "btn-ru"
    assert allocator.allocate("Кнопка", fallback="кнопка") == "component"
    assert allocator.allocate("Карточка") == "component-2"


def test_non_ascii_names_never_get_empty_slugs(dump_builder) -> None:
    dump_builder.add("Кнопка", id="btn-ru")
    dump_builder.add("Карточка", id="карточка")
    dump_builder.add("Поле", id="поле")
    tables = build_lookup_tables(_components(dump_builder))
    assert tables.component_slugs == {
        "btn-ru": "btn-ru",
        "карточка": "component",
        "поле": "component-2",
    }


def test_id_only_instances_resolve_to_component_names(dump_builder) -> None:
    dump_builder.add("Button", id="cmp-button")
    dump_builder.add("Card", id="cmp-card", render=element("div", {"componentId": "cmp-button"}))
    tables = build_lookup_tables(_components(dump_builder))
    assert tables.dependencies["Card"] == ["Button"]
    assert tables.reverse_dependencies["Button"] == ["Card"]
