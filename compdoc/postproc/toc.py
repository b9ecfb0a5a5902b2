"""Automatic table-of-contents generation."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple


class TableOfContentsBuilder:
    """Builds ToC blocks for level two and three headings."""

    PLACEHOLDER = "<!-- compdoc:toc -->"
    BEGIN = "<!-- compdoc:begin:toc -->"
    END = "<!-- compdoc:end:toc -->"

    def build(self, markdown: str) -> str:
        toc_block = self._build_block(markdown)
        if not toc_block:
            return markdown.replace(self.PLACEHOLDER, "", 1)
        if self.BEGIN in markdown and self.END in markdown:
            pre, rest = markdown.split(self.BEGIN, 1)
            _, post = rest.split(self.END, 1)
            return f"{pre}{toc_block}{post}"
        if self.PLACEHOLDER in markdown:
            return markdown.replace(self.PLACEHOLDER, toc_block, 1)
        return self._insert_after_title(markdown, toc_block)

    def _build_block(self, markdown: str) -> str:
        headings: List[Tuple[int, str, str]] = []
        seen: Dict[str, int] = {}
        in_code = False
        in_toc = False
        for line in markdown.splitlines():
            stripped = line.strip()
            if stripped == self.BEGIN:
                in_toc = True
                continue
            if stripped == self.END:
                in_toc = False
                continue
            if stripped.startswith("```"):
                in_code = not in_code
                continue
            if in_code or in_toc:
                continue
            match = re.match(r"^(#{2,3})\s+(.*)$", stripped)
            if match:
                title = match.group(2).strip()
                anchor = self._slugify(title)
                count = seen.get(anchor, 0)
                seen[anchor] = count + 1
                if count:
                    anchor = f"{anchor}-{count}"
                headings.append((len(match.group(1)), title, anchor))

        if not headings:
            return ""

        output: List[str] = [self.BEGIN, "## Table of Contents"]
        for level, title, anchor in headings:
            indent = "  " * (level - 2)
            output.append(f"{indent}- [{title}](#{anchor})")
        output.append(self.END)
        return "\n".join(output)

    @staticmethod
    def _insert_after_title(markdown: str, toc_block: str) -> str:
        lines = markdown.split("\n")
        for index, line in enumerate(lines):
            if line.startswith("# "):
                return "\n".join(lines[: index + 1] + ["", toc_block] + lines[index + 1 :])
        return toc_block + "\n\n" + markdown

    @staticmethod
    def _slugify(title: str) -> str:
        # GitHub anchors: drop punctuation but keep each space as its own hyphen.
        slug = title.strip().lower()
        slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
        return re.sub(r"\s", "-", slug)
