from compdoc.postproc import MarkdownLinter, TableOfContentsBuilder


def test_markdown_linter_normalizes_whitespace() -> None:
    linter = MarkdownLinter()
    content = "# Title\r\n\r\n\r\nBody line   \r\n## Section\n\n\n"
    assert linter.lint(content) == "# Title\n\nBody line\n\n## Section\n"


def test_markdown_linter_keeps_code_fences_verbatim() -> None:
    linter = MarkdownLinter()
    content = "# Title\n\n```css\n.a {\n  color: red;\n}\n\n\n.b {}\n```\n"
    assert linter.lint(content) == content


def test_toc_builder_inserts_after_title() -> None:
    builder = TableOfContentsBuilder()
    markdown = "# Component Library\n\n## Components by Group\n\n### Actions\n\n## Statistics\n"
    result = builder.build(markdown)
    lines = result.splitlines()
    assert lines[0] == "# Component Library"
    assert lines[2] == TableOfContentsBuilder.BEGIN
    assert "- [Components by Group](#components-by-group)" in result
    assert "  - [Actions](#actions)" in result
    assert "- [Statistics](#statistics)" in result


def test_toc_builder_replaces_placeholder_and_existing_block() -> None:
    builder = TableOfContentsBuilder()
    markdown = f"# Title\n{TableOfContentsBuilder.PLACEHOLDER}\n## Overview\n## Overview\n"
    first = builder.build(markdown)
    assert TableOfContentsBuilder.PLACEHOLDER not in first
    assert "- [Overview](#overview)" in first
    assert "- [Overview](#overview-1)" in first
    # Rebuilding swaps the old block instead of stacking a second one.
    second = builder.build(first)
    assert second == first
    assert second.count("## Table of Contents") == 1


def test_toc_builder_ignores_headings_in_code_fences() -> None:
    builder = TableOfContentsBuilder()
    markdown = "# Title\n\n```\n## not a heading\n```\n"
    assert builder.build(markdown) == markdown
