"""Static site generation for the budget diagrams."""

from .build import build_diagram_payload, build_site, render_site

__all__ = ["build_diagram_payload", "build_site", "render_site"]
