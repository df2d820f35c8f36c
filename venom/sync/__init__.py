"""Local file sync: write project variables to env files."""

from .exporter import Exporter

__all__ = ["Exporter"]
