"""Event normalization, diagnostics reduction and the host protocol."""

from .diagnostics import DiagnosticCounts, count_diagnostics
from .host import EditorHost
from .normalizer import EventNormalizer

__all__ = [
    "DiagnosticCounts",
    "EditorHost",
    "EventNormalizer",
    "count_diagnostics",
]
