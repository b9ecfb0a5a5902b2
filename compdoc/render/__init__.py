"""Text renderings of generated component docs."""

from .markdown import render_component, render_index

__all__ = ["render_component", "render_index"]
