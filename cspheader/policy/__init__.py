"""Directive rendering and policy assembly."""

from cspheader.policy.assembler import (
    CSP_HEADER,
    REPORT_TO_HEADER,
    CompiledPolicy,
    PolicyAssembler,
    assemble,
    compile_policy,
)
from cspheader.policy.renderer import DirectiveRenderer, TemplateKind, compile_template, render
from cspheader.policy.sources import generate_nonce, hash_source

__all__ = [
    "CSP_HEADER",
    "REPORT_TO_HEADER",
    "CompiledPolicy",
    "DirectiveRenderer",
    "PolicyAssembler",
    "TemplateKind",
    "assemble",
    "compile_policy",
    "compile_template",
    "generate_nonce",
    "hash_source",
    "render",
]
