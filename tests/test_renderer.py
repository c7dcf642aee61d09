"""Tests for directive rendering."""

from __future__ import annotations

import pytest

from cspheader.errors import AssemblyError, RenderError, TemplateInvalid
from cspheader.models.options import (
    FrameAncestorOptions,
    SandboxOptions,
    SourceOptions,
    UnquotedOption,
    UnquotedOptions,
)
from cspheader.policy.renderer import (
    DEFAULT_TEMPLATES,
    DirectiveRenderer,
    TemplateKind,
    compile_template,
    render,
)


def _source(**kwargs) -> str:
    return render(TemplateKind.source_option, SourceOptions(**kwargs))


# ── Source options ───────────────────────────────────────────────────────


class TestSourceOptions:
    def test_default_is_none(self):
        assert _source() == "'none'"

    def test_disallow_overrides_everything(self):
        text = _source(
            allow=False,
            allow_self=True,
            values=["https://cdn.example.com"],
            unsafe_inline=True,
            nonce_value="'nonce-abc123'",
            hash_value="'sha256-dGVzdA=='",
            strict_dynamic=True,
        )
        assert text == "'none'"

    def test_allow_self(self):
        assert _source(allow=True, allow_self=True) == "'self'"

    def test_allow_with_nothing_is_empty(self):
        assert _source(allow=True) == ""

    def test_values_preserve_order(self):
        text = _source(allow=True, allow_self=True, values=["https://b.example", "data:", "https://a.example"])
        assert text == "'self' https://b.example data: https://a.example"

    def test_values_without_self_have_no_leading_space(self):
        assert _source(allow=True, values=["https://cdn.example.com"]) == "https://cdn.example.com"

    def test_all_tokens_in_order(self):
        text = _source(
            allow=True,
            allow_self=True,
            values=["https:"],
            unsafe_eval=True,
            wasm_unsafe_eval=True,
            unsafe_hashes=True,
            unsafe_inline=True,
            nonce_value="'nonce-abc123'",
            hash_value="'sha256-dGVzdA=='",
            strict_dynamic=True,
            report_sample=True,
        )
        assert text == (
            "'self' https: 'unsafe-eval' 'wasm-unsafe-eval' 'unsafe-hashes' "
            "'unsafe-inline' 'nonce-abc123' 'sha256-dGVzdA==' 'strict-dynamic' 'report-sample'"
        )

    def test_nonce_is_space_separated(self):
        text = _source(allow=True, allow_self=True, nonce_value="'nonce-abc123'")
        assert text == "'self' 'nonce-abc123'"

    def test_strict_dynamic_alone(self):
        assert _source(allow=True, strict_dynamic=True) == "'strict-dynamic'"

    def test_value_whitespace_kept_inside_token(self):
        text = _source(allow=True, values=["a\tb", " c ", "   "])
        assert text == "a\tb c"

    def test_template_whitespace_collapses_between_tokens(self):
        renderer = DirectiveRenderer({TemplateKind.unquoted_multi: "  {values}\t "})
        opts = UnquotedOptions(values=["https://r.example/a b", "https://r.example/c"])
        assert renderer.render(TemplateKind.unquoted_multi, opts) == "https://r.example/a b https://r.example/c"

    def test_multi_token_field_with_adjacent_literal(self):
        renderer = DirectiveRenderer({TemplateKind.unquoted_multi: "<{values}>"})
        opts = UnquotedOptions(values=["a", "b"])
        assert renderer.render(TemplateKind.unquoted_multi, opts) == "<a b>"

    def test_never_double_or_trailing_spaced(self):
        text = _source(allow=True, unsafe_inline=True, report_sample=True)
        assert text == "'unsafe-inline' 'report-sample'"
        assert "  " not in text
        assert text == text.strip()

    def test_deterministic(self):
        opts = SourceOptions(allow=True, allow_self=True, values=["https:"], unsafe_eval=True)
        assert render(TemplateKind.source_option, opts) == render(TemplateKind.source_option, opts)


# ── Sandbox ──────────────────────────────────────────────────────────────


class TestSandbox:
    def test_forms_and_scripts(self):
        text = render(TemplateKind.sandbox, SandboxOptions(allow_forms=True, allow_scripts=True))
        assert text == "allow-forms allow-scripts"

    def test_canonical_order_ignores_argument_order(self):
        text = render(TemplateKind.sandbox, SandboxOptions(allow_scripts=True, allow_downloads=True))
        assert text == "allow-downloads allow-scripts"

    def test_all_false_is_empty(self):
        assert render(TemplateKind.sandbox, SandboxOptions()) == ""

    def test_long_token_names(self):
        opts = SandboxOptions(
            allow_popups_to_escape_sandbox=True,
            allow_top_navigation_by_user_activation=True,
            allow_top_navigation_to_custom_protocols=True,
        )
        assert render(TemplateKind.sandbox, opts) == (
            "allow-popups-to-escape-sandbox "
            "allow-top-navigation-by-user-activation "
            "allow-top-navigation-to-custom-protocols"
        )

    def test_all_thirteen_tokens(self):
        opts = SandboxOptions(**{name: True for name in SandboxOptions.model_fields})
        tokens = render(TemplateKind.sandbox, opts).split(" ")
        assert len(tokens) == 13
        assert tokens[0] == "allow-downloads"
        assert all(not t.startswith("'") for t in tokens)


# ── Frame ancestors and unquoted ─────────────────────────────────────────


class TestFrameAncestors:
    def test_default_is_none(self):
        assert render(TemplateKind.frame_ancestors, FrameAncestorOptions()) == "'none'"

    def test_self_then_hosts_then_schemes(self):
        opts = FrameAncestorOptions(
            allow=True,
            allow_self=True,
            scheme_sources=["https:"],
            host_sources=["https://a.example", "https://b.example"],
        )
        assert render(TemplateKind.frame_ancestors, opts) == "'self' https://a.example https://b.example https:"

    def test_disallow_overrides_sources(self):
        opts = FrameAncestorOptions(allow=False, allow_self=True, host_sources=["https://a.example"])
        assert render(TemplateKind.frame_ancestors, opts) == "'none'"


class TestUnquoted:
    def test_multi_has_no_trailing_space(self):
        opts = UnquotedOptions(values=["https://r.example/a", "https://r.example/b"])
        assert render(TemplateKind.unquoted_multi, opts) == "https://r.example/a https://r.example/b"

    def test_multi_empty(self):
        assert render(TemplateKind.unquoted_multi, UnquotedOptions()) == ""

    def test_single(self):
        assert render(TemplateKind.unquoted_single, UnquotedOption(value="default")) == "default"

    def test_wrong_value_type(self):
        with pytest.raises(TypeError):
            render(TemplateKind.unquoted_single, UnquotedOptions(values=["x"]))


# ── Templates ────────────────────────────────────────────────────────────


class TestCompileTemplate:
    def test_defaults_compile(self):
        for kind, text in DEFAULT_TEMPLATES.items():
            assert compile_template(kind, text).kind is kind

    def test_accepts_kind_string(self):
        assert compile_template("unquoted_single", "{value}").kind is TemplateKind.unquoted_single

    def test_malformed_braces(self):
        with pytest.raises(TemplateInvalid):
            compile_template(TemplateKind.source_option, "{self")

    def test_unknown_field(self):
        with pytest.raises(TemplateInvalid, match="bogus"):
            compile_template(TemplateKind.source_option, "{self} {bogus}")

    def test_field_from_other_kind(self):
        with pytest.raises(TemplateInvalid):
            compile_template(TemplateKind.sandbox, "{self}")

    @pytest.mark.parametrize("text", ["{}", "{0}", "{self.upper}", "{values[0]}"])
    def test_positional_and_compound_fields_rejected(self, text):
        with pytest.raises(TemplateInvalid):
            compile_template(TemplateKind.source_option, text)

    def test_template_invalid_is_assembly_error(self):
        with pytest.raises(AssemblyError) as exc_info:
            compile_template(TemplateKind.unquoted_single, "{nope}")
        assert exc_info.value.reason == "template_invalid"


class TestDirectiveRenderer:
    def test_uses_defaults_without_overrides(self):
        renderer = DirectiveRenderer()
        assert renderer.render(TemplateKind.source_option, SourceOptions()) == "'none'"

    def test_custom_order(self):
        renderer = DirectiveRenderer({TemplateKind.source_option: "{self} {report_sample} {values}"})
        opts = SourceOptions(allow=True, allow_self=True, values=["https:"], report_sample=True, unsafe_eval=True)
        assert renderer.render(TemplateKind.source_option, opts) == "'self' 'report-sample' https:"

    def test_custom_literal_text(self):
        renderer = DirectiveRenderer({TemplateKind.unquoted_single: "csp-{value}"})
        assert renderer.render(TemplateKind.unquoted_single, UnquotedOption(value="default")) == "csp-default"

    def test_empty_override_falls_back_to_default(self):
        renderer = DirectiveRenderer({TemplateKind.sandbox: ""})
        assert renderer.template(TemplateKind.sandbox).text == DEFAULT_TEMPLATES[TemplateKind.sandbox]

    def test_invalid_override_fails_on_construction(self):
        with pytest.raises(TemplateInvalid):
            DirectiveRenderer({TemplateKind.frame_ancestors: "{host_sources"})

    def test_format_failure_is_render_error(self):
        renderer = DirectiveRenderer({TemplateKind.source_option: "{self:d}"})
        with pytest.raises(RenderError, match="source_option"):
            renderer.render(TemplateKind.source_option, SourceOptions(allow=True, allow_self=True))
