"""Remediation: annotate, rewrite and suggest."""

from .cursor import EditCursor
from .engine import RemediationEngine
from .suggestions import build_suggestions

__all__ = ["EditCursor", "RemediationEngine", "build_suggestions"]
