"""Minimal site build driver for transform plugins."""

from .builder import PlannedFile, SiteBuilder
from .models import BuildError, BuildReport

__all__ = ["BuildError", "BuildReport", "PlannedFile", "SiteBuilder"]
