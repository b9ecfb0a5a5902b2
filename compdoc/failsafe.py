"""Reports for components that could not be documented."""

from __future__ import annotations

from typing import List, Sequence

from .models import GenerationFailure

_MESSAGE_LIMIT = 200


def build_failure_report(failures: Sequence[GenerationFailure]) -> str:
    """Return a Markdown page listing every failed component."""
    lines: List[str] = ["# Generation Failures", ""]
    if not failures:
        lines.extend(["All components were documented.", ""])
        return "\n".join(lines)

    noun = "component" if len(failures) == 1 else "components"
    lines.extend([f"{len(failures)} {noun} could not be documented.", ""])
    for failure in failures:
        lines.extend(
            [
                f"## {failure.component_name}",
                "",
                f"- **Component id:** `{failure.component_id}`",
                f"- **Error:** {_format_reason(failure.message)}",
                "",
            ]
        )
        if failure.stack:
            lines.extend(["```text", failure.stack.rstrip(), "```", ""])
    return "\n".join(lines)


def _format_reason(reason: str | None) -> str:
    if not reason:
        return "Unknown error"
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return "Unknown error"
    return cleaned[:_MESSAGE_LIMIT] + ("…" if len(cleaned) > _MESSAGE_LIMIT else "")


__all__ = ["build_failure_report"]
