"""Policy assembly: render, filter, partition, validate and flatten.

``assemble()`` turns a :class:`Policy` into the header map a response needs.
``PolicyAssembler.compile()`` keeps the intermediate static and dynamic
directive mappings so callers can cache the static part and only re-render
nonce- or hash-bearing directives per request.
"""

from __future__ import annotations

import types
from dataclasses import dataclass, field
from typing import Mapping

import structlog

from cspheader.models.options import Policy, SourceOptions, TemplateOverrides
from cspheader.policy.directives import (
    DEFAULT_SRC,
    FETCH_DIRECTIVES,
    NON_FETCH_SOURCE_DIRECTIVES,
    SOURCE_DIRECTIVES,
    UPGRADE_INSECURE_REQUESTS,
    flatten,
    is_redundant,
    partition,
)
from cspheader.policy.renderer import DirectiveRenderer, TemplateKind
from cspheader.policy.validator import validate_report_to

logger = structlog.get_logger()

CSP_HEADER = "Content-Security-Policy"
REPORT_TO_HEADER = "Report-To"


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return types.MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CompiledPolicy:
    """Rendered directives of one policy, split by per-request volatility."""

    static_directives: Mapping[str, str] = field(default_factory=dict)
    dynamic_directives: Mapping[str, str] = field(default_factory=dict)
    report_to_payload: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "static_directives", _frozen(self.static_directives))
        object.__setattr__(self, "dynamic_directives", _frozen(self.dynamic_directives))

    @property
    def content_security_policy(self) -> str:
        return flatten(self.static_directives, self.dynamic_directives)

    def headers(self) -> dict[str, str]:
        return self._header_map(self.content_security_policy)

    def merge_dynamic(self, dynamic: Mapping[str, str]) -> dict[str, str]:
        """Flatten the static snapshot with freshly rendered dynamic directives.

        Entries in ``dynamic`` override this policy's dynamic directives of the
        same name; directives not re-rendered keep their compiled text. The
        snapshot itself is left untouched.
        """
        unknown = set(dynamic) - set(SOURCE_DIRECTIVES)
        if unknown:
            raise KeyError(f"not source-list directives: {', '.join(sorted(unknown))}")
        return self._header_map(flatten(self.static_directives, self.dynamic_directives, dynamic))

    def _header_map(self, csp: str) -> dict[str, str]:
        headers = {CSP_HEADER: csp}
        if self.report_to_payload:
            headers[REPORT_TO_HEADER] = self.report_to_payload
        return headers


class PolicyAssembler:
    """Compiles policies with one resolved template per option kind."""

    def __init__(self, templates: TemplateOverrides | None = None) -> None:
        templates = templates or TemplateOverrides()
        # TemplateInvalid surfaces here, before any directive work
        self._renderer = DirectiveRenderer({
            kind: getattr(templates, kind.value) for kind in TemplateKind
        })

    @property
    def renderer(self) -> DirectiveRenderer:
        return self._renderer

    def compile(self, policy: Policy) -> CompiledPolicy:
        policy = policy.model_copy(deep=True)
        validate_report_to(policy)

        render = self._renderer.render
        static: dict[str, str] = {}
        dynamic: dict[str, str] = {}

        default_text = render(TemplateKind.source_option, policy.default_src)
        static[DEFAULT_SRC] = default_text

        redundant = []
        for name, attr in FETCH_DIRECTIVES.items():
            options: SourceOptions = getattr(policy, attr)
            text = render(TemplateKind.source_option, options)
            if is_redundant(text, default_text):
                redundant.append(name)
                continue
            partition(name, text, options, static, dynamic)
        if redundant:
            logger.debug("directive_redundant", directives=redundant, default_src=default_text)

        for name, attr in NON_FETCH_SOURCE_DIRECTIVES.items():
            options = getattr(policy, attr)
            partition(name, render(TemplateKind.source_option, options), options, static, dynamic)

        static["sandbox"] = render(TemplateKind.sandbox, policy.sandbox)
        static["frame-ancestors"] = render(TemplateKind.frame_ancestors, policy.frame_ancestors)
        static["report-uri"] = render(TemplateKind.unquoted_multi, policy.report_uri)
        static["report-to"] = render(TemplateKind.unquoted_single, policy.report_to)
        static[UPGRADE_INSECURE_REQUESTS] = (
            UPGRADE_INSECURE_REQUESTS if policy.upgrade_insecure_requests else ""
        )

        compiled = CompiledPolicy(
            static_directives=static,
            dynamic_directives=dynamic,
            report_to_payload=policy.report_to_payload,
        )
        logger.info(
            "policy_compiled",
            static=sum(1 for v in static.values() if v),
            dynamic=len(dynamic),
            redundant=len(redundant),
        )
        return compiled

    def assemble(self, policy: Policy) -> dict[str, str]:
        return self.compile(policy).headers()

    def render_dynamic(self, directives: Mapping[str, SourceOptions]) -> dict[str, str]:
        """Render per-request source directives for ``CompiledPolicy.merge_dynamic``.

        No redundancy filtering is applied.
        """
        rendered: dict[str, str] = {}
        for name, options in directives.items():
            if name not in SOURCE_DIRECTIVES:
                raise KeyError(f"{name} is not a source-list directive")
            rendered[name] = self._renderer.render(TemplateKind.source_option, options)
        return rendered


def compile_policy(policy: Policy) -> CompiledPolicy:
    return PolicyAssembler(policy.templates).compile(policy)


def assemble(policy: Policy) -> dict[str, str]:
    """Build the Content-Security-Policy (and Report-To) header map for ``policy``.

    Raises TemplateInvalid, ReportToMissing, ReportToMismatch or RenderError;
    no partial output is returned.
    """
    return compile_policy(policy).headers()
