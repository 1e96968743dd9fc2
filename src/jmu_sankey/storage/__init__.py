"""Output locations for the generated site."""

from .paths import SitePaths

__all__ = ["SitePaths"]
