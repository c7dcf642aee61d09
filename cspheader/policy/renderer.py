"""Directive rendering: option values to directive text via format templates.

Each option kind is bound to a ``str.format`` template whose replacement
fields are drawn from a fixed per-kind contract. Every field resolves to its
CSP tokens when active and to nothing otherwise. Whitespace in the template
only separates words and collapses to single spaces, so templates decide
token order while the inner text of caller-supplied tokens is kept as given.

Example:
    >>> render(TemplateKind.source_option, SourceOptions(allow=True, allow_self=True, unsafe_inline=True))
    "'self' 'unsafe-inline'"
"""

from __future__ import annotations

import enum
import re
import string
import types
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import structlog
from pydantic import BaseModel

from cspheader.errors import RenderError, TemplateInvalid
from cspheader.models.options import (
    FrameAncestorOptions,
    SandboxOptions,
    SourceOptions,
    UnquotedOption,
    UnquotedOptions,
)

logger = structlog.get_logger()

_FORMATTER = string.Formatter()

NONE_TOKEN = "'none'"
SELF_TOKEN = "'self'"


class TemplateKind(str, enum.Enum):
    source_option = "source_option"
    sandbox = "sandbox"
    frame_ancestors = "frame_ancestors"
    unquoted_multi = "unquoted_multi"
    unquoted_single = "unquoted_single"


# Source-option keyword flags, in rendering order: field -> token
_SOURCE_FLAGS: tuple[tuple[str, str], ...] = (
    ("unsafe_eval", "'unsafe-eval'"),
    ("wasm_unsafe_eval", "'wasm-unsafe-eval'"),
    ("unsafe_hashes", "'unsafe-hashes'"),
    ("unsafe_inline", "'unsafe-inline'"),
)
_SOURCE_TRAILING_FLAGS: tuple[tuple[str, str], ...] = (
    ("strict_dynamic", "'strict-dynamic'"),
    ("report_sample", "'report-sample'"),
)

SOURCE_OPTION_FIELDS: tuple[str, ...] = (
    "none",
    "self",
    "values",
    *(name for name, _ in _SOURCE_FLAGS),
    "nonce",
    "hash",
    *(name for name, _ in _SOURCE_TRAILING_FLAGS),
)
# Canonical sandbox order follows the model's field declaration order.
SANDBOX_FIELDS: tuple[str, ...] = tuple(SandboxOptions.model_fields)
FRAME_ANCESTORS_FIELDS: tuple[str, ...] = ("none", "self", "host_sources", "scheme_sources")

TEMPLATE_FIELDS: Mapping[TemplateKind, frozenset[str]] = types.MappingProxyType({
    TemplateKind.source_option: frozenset(SOURCE_OPTION_FIELDS),
    TemplateKind.sandbox: frozenset(SANDBOX_FIELDS),
    TemplateKind.frame_ancestors: frozenset(FRAME_ANCESTORS_FIELDS),
    TemplateKind.unquoted_multi: frozenset({"values"}),
    TemplateKind.unquoted_single: frozenset({"value"}),
})


def _fields_template(fields: tuple[str, ...]) -> str:
    return " ".join("{%s}" % name for name in fields)


DEFAULT_TEMPLATES: Mapping[TemplateKind, str] = types.MappingProxyType({
    TemplateKind.source_option: _fields_template(SOURCE_OPTION_FIELDS),
    TemplateKind.sandbox: _fields_template(SANDBOX_FIELDS),
    TemplateKind.frame_ancestors: _fields_template(FRAME_ANCESTORS_FIELDS),
    TemplateKind.unquoted_multi: "{values}",
    TemplateKind.unquoted_single: "{value}",
})


# ── Context builders ─────────────────────────────────────────────────────
# Each field maps to its tokens. Caller-supplied tokens lose only surrounding whitespace.


def _tokens(*values: str) -> list[str]:
    return [v.strip() for v in values if v and not v.isspace()]


def _source_context(opts: SourceOptions) -> dict[str, list[str]]:
    ctx: dict[str, list[str]] = {name: [] for name in SOURCE_OPTION_FIELDS}
    if not opts.allow:
        ctx["none"] = [NONE_TOKEN]
        return ctx
    if opts.allow_self:
        ctx["self"] = [SELF_TOKEN]
    ctx["values"] = _tokens(*opts.values)
    for name, token in _SOURCE_FLAGS + _SOURCE_TRAILING_FLAGS:
        if getattr(opts, name):
            ctx[name] = [token]
    ctx["nonce"] = _tokens(opts.nonce_value)
    ctx["hash"] = _tokens(opts.hash_value)
    return ctx


def _sandbox_context(opts: SandboxOptions) -> dict[str, list[str]]:
    return {
        name: [name.replace("_", "-")] if getattr(opts, name) else []
        for name in SANDBOX_FIELDS
    }


def _frame_ancestors_context(opts: FrameAncestorOptions) -> dict[str, list[str]]:
    ctx: dict[str, list[str]] = {name: [] for name in FRAME_ANCESTORS_FIELDS}
    if not opts.allow:
        ctx["none"] = [NONE_TOKEN]
        return ctx
    if opts.allow_self:
        ctx["self"] = [SELF_TOKEN]
    ctx["host_sources"] = _tokens(*opts.host_sources)
    ctx["scheme_sources"] = _tokens(*opts.scheme_sources)
    return ctx


def _unquoted_multi_context(opts: UnquotedOptions) -> dict[str, list[str]]:
    return {"values": _tokens(*opts.values)}


def _unquoted_single_context(opts: UnquotedOption) -> dict[str, list[str]]:
    return {"value": _tokens(opts.value)}


_CONTEXT_BUILDERS: Mapping[TemplateKind, tuple[type[BaseModel], Callable[[Any], dict[str, list[str]]]]] = (
    types.MappingProxyType({
        TemplateKind.source_option: (SourceOptions, _source_context),
        TemplateKind.sandbox: (SandboxOptions, _sandbox_context),
        TemplateKind.frame_ancestors: (FrameAncestorOptions, _frame_ancestors_context),
        TemplateKind.unquoted_multi: (UnquotedOptions, _unquoted_multi_context),
        TemplateKind.unquoted_single: (UnquotedOption, _unquoted_single_context),
    })
)


# ── Templates ────────────────────────────────────────────────────────────

_WHITESPACE = re.compile(r"(\s+)")


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """A template whose field names were checked against its kind."""

    kind: TemplateKind
    text: str

    def format(self, context: Mapping[str, list[str]]) -> str:
        """Format ``context`` into single-space separated words.

        Whitespace in the template text separates words; runs of it collapse
        to one space. A multi-token field emits one word per token. Token
        text itself is never altered.
        """
        words: list[str] = []
        current: list[str] = []

        def flush() -> None:
            word = "".join(current)
            if word:
                words.append(word)
            current.clear()

        try:
            for literal, field_name, spec, conversion in _FORMATTER.parse(self.text):
                for chunk in _WHITESPACE.split(literal):
                    if chunk.isspace():
                        flush()
                    else:
                        current.append(chunk)
                if field_name is None:
                    continue
                for i, token in enumerate(context[field_name]):
                    if i:
                        flush()
                    token = _FORMATTER.convert_field(token, conversion)
                    current.append(_FORMATTER.format_field(token, spec or ""))
        except (KeyError, IndexError, AttributeError, ValueError, TypeError) as exc:
            raise RenderError(self.kind.value, f"template formatting failed: {exc}") from exc
        flush()
        return " ".join(words)


def compile_template(kind: TemplateKind, text: str) -> CompiledTemplate:
    """Check template text against the field contract for ``kind``.

    Raises TemplateInvalid for malformed braces, positional or compound
    fields, and field names the kind does not provide.
    """
    kind = TemplateKind(kind)
    allowed = TEMPLATE_FIELDS[kind]
    try:
        parsed = list(_FORMATTER.parse(text))
    except ValueError as exc:
        logger.warning("template_invalid", kind=kind.value, error=str(exc))
        raise TemplateInvalid(f"{kind.value} template is malformed: {exc}") from exc
    for _literal, field_name, _spec, _conversion in parsed:
        if field_name is None:
            continue
        if field_name not in allowed:
            logger.warning("template_invalid", kind=kind.value, field=field_name)
            raise TemplateInvalid(
                f"{kind.value} template references unknown field {field_name!r}"
            )
    return CompiledTemplate(kind=kind, text=text)


_DEFAULT_COMPILED: Mapping[TemplateKind, CompiledTemplate] = types.MappingProxyType({
    kind: compile_template(kind, text) for kind, text in DEFAULT_TEMPLATES.items()
})


def render(kind: TemplateKind, value: BaseModel, template: CompiledTemplate | None = None) -> str:
    """Render one option value under ``template`` (or the built-in default)."""
    kind = TemplateKind(kind)
    model_type, build_context = _CONTEXT_BUILDERS[kind]
    if not isinstance(value, model_type):
        raise TypeError(f"{kind.value} expects {model_type.__name__}, got {type(value).__name__}")
    if template is None:
        template = _DEFAULT_COMPILED[kind]
    elif template.kind is not kind:
        raise ValueError(f"template for {template.kind.value} cannot render {kind.value}")
    return template.format(build_context(value))


class DirectiveRenderer:
    """Renders option values with one resolved template per kind."""

    def __init__(self, overrides: Mapping[TemplateKind, str] | None = None) -> None:
        overrides = overrides or {}
        self._templates: dict[TemplateKind, CompiledTemplate] = {}
        for kind in TemplateKind:
            text = overrides.get(kind, "")
            self._templates[kind] = compile_template(kind, text) if text else _DEFAULT_COMPILED[kind]

    def template(self, kind: TemplateKind) -> CompiledTemplate:
        return self._templates[TemplateKind(kind)]

    def render(self, kind: TemplateKind, value: BaseModel) -> str:
        kind = TemplateKind(kind)
        return render(kind, value, self._templates[kind])
