"""Detectors: builtin pattern heuristics and the optional ESLint engine."""

from .engine import DetectorEngine
from .external import Dialect, EslintEngine, detect_dialect

__all__ = ["DetectorEngine", "EslintEngine", "Dialect", "detect_dialect"]
