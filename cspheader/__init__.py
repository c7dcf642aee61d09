"""
cspheader - Content-Security-Policy header assembly
"""

__version__ = "0.1.0"

from cspheader.logging_config import use_stdlib_logging

use_stdlib_logging()

from cspheader.errors import (
    AssemblyError,
    CSPError,
    RenderError,
    ReportToMismatch,
    ReportToMissing,
    TemplateInvalid,
)
from cspheader.models.options import (
    FrameAncestorOptions,
    Policy,
    SandboxOptions,
    SourceOptions,
    TemplateOverrides,
    UnquotedOption,
    UnquotedOptions,
)
from cspheader.policy.assembler import CompiledPolicy, PolicyAssembler, assemble, compile_policy

__all__ = [
    'AssemblyError',
    'CSPError',
    'CompiledPolicy',
    'FrameAncestorOptions',
    'Policy',
    'PolicyAssembler',
    'RenderError',
    'ReportToMismatch',
    'ReportToMissing',
    'SandboxOptions',
    'SourceOptions',
    'TemplateInvalid',
    'TemplateOverrides',
    'UnquotedOption',
    'UnquotedOptions',
    'assemble',
    'compile_policy',
]
