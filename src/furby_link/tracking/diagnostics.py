"""Reduce a host's diagnostic list to error/warning counts."""

from __future__ import annotations

from dataclasses import dataclass

from furby_link.events.raw import DiagnosticSeverity
from furby_link.runtime import telemetry

from .host import EditorHost

_log = telemetry.get_logger("furby_link.diagnostics")


@dataclass(frozen=True, slots=True)
class DiagnosticCounts:
    errors: int = 0
    warnings: int = 0


def count_diagnostics(host: EditorHost, path: str) -> DiagnosticCounts:
    """Count errors and warnings the host currently reports for ``path``.

    Severities other than error and warning are not counted. A host that
    fails to answer yields zero counts.
    """

    try:
        diagnostics = list(host.get_diagnostics(path) or ())
    except Exception as exc:
        _log.warning(f"diagnostics unavailable for {path}: {exc}")
        return DiagnosticCounts()

    errors = 0
    warnings = 0
    for diagnostic in diagnostics:
        severity = getattr(diagnostic, "severity", None)
        if severity == DiagnosticSeverity.ERROR:
            errors += 1
        elif severity == DiagnosticSeverity.WARNING:
            warnings += 1
    return DiagnosticCounts(errors=errors, warnings=warnings)


__all__ = ["DiagnosticCounts", "count_diagnostics"]
