"""Exception hierarchy for policy rendering and assembly."""

from __future__ import annotations

import enum


class AssemblyErrorReason(str, enum.Enum):
    template_invalid = "template_invalid"
    report_to_missing = "report_to_missing"
    report_to_mismatch = "report_to_mismatch"


class CSPError(Exception):
    """Base class for all cspheader errors."""
    pass


class RenderError(CSPError):
    """Raised when a directive fails to format under its template."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind


class AssemblyError(CSPError):
    """Raised when a policy cannot be assembled into headers.

    Subclasses pin ``reason`` so callers can catch the whole family or a
    single case.
    """

    reason: AssemblyErrorReason | None = None

    def __init__(self, message: str, reason: AssemblyErrorReason | None = None) -> None:
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class TemplateInvalid(AssemblyError):
    reason = AssemblyErrorReason.template_invalid


class ReportToMissing(AssemblyError):
    reason = AssemblyErrorReason.report_to_missing


class ReportToMismatch(AssemblyError):
    reason = AssemblyErrorReason.report_to_mismatch
