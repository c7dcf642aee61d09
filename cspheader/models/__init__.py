"""Policy configuration models."""

from cspheader.models.options import (
    FrameAncestorOptions,
    Policy,
    SandboxOptions,
    SourceOptions,
    TemplateOverrides,
    UnquotedOption,
    UnquotedOptions,
)

__all__ = [
    "FrameAncestorOptions",
    "Policy",
    "SandboxOptions",
    "SourceOptions",
    "TemplateOverrides",
    "UnquotedOption",
    "UnquotedOptions",
]
