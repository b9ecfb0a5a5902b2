"""Component library documentation generator."""

from .orchestrator import GenerationResult, Orchestrator, generate_docs
from .render import render_component, render_index

__version__ = "0.1.0"

__all__ = [
    "GenerationResult",
    "Orchestrator",
    "generate_docs",
    "render_component",
    "render_index",
]
