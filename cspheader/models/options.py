"""Pydantic models describing a Content-Security-Policy configuration.

These are plain data holders. Rendering lives in
:mod:`cspheader.policy.renderer`.

Reference: https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Content-Security-Policy
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SourceOptions(_Options):
    """Source list for a fetch, document or navigation directive.

    ``allow=False`` overrides every other field and renders ``'none'``.
    """

    allow: bool = False
    allow_self: bool = False
    # <host-source>, <scheme-source>, etc. appended as given, one source each;
    # only surrounding whitespace is trimmed
    values: list[str] = Field(default_factory=list)
    unsafe_eval: bool = False
    wasm_unsafe_eval: bool = False
    unsafe_hashes: bool = False
    unsafe_inline: bool = False
    # pre-formatted tokens, e.g. "'nonce-abc123'" or "'sha256-...'"
    nonce_value: str = ""
    hash_value: str = ""
    strict_dynamic: bool = False
    report_sample: bool = False

    @property
    def is_dynamic(self) -> bool:
        """True when the directive carries a nonce or hash."""
        return bool(self.nonce_value or self.hash_value)


class SandboxOptions(_Options):
    """Sandbox flags, declared in canonical token order."""

    allow_downloads: bool = False
    allow_forms: bool = False
    allow_modals: bool = False
    allow_orientation_lock: bool = False
    allow_pointer_lock: bool = False
    allow_popups: bool = False
    allow_popups_to_escape_sandbox: bool = False
    allow_presentation: bool = False
    allow_same_origin: bool = False
    allow_scripts: bool = False
    allow_top_navigation: bool = False
    allow_top_navigation_by_user_activation: bool = False
    allow_top_navigation_to_custom_protocols: bool = False


class FrameAncestorOptions(_Options):
    allow: bool = False
    allow_self: bool = False
    host_sources: list[str] = Field(default_factory=list)
    scheme_sources: list[str] = Field(default_factory=list)


class UnquotedOptions(_Options):
    """One or more unquoted values (report-uri)."""

    values: list[str] = Field(default_factory=list)


class UnquotedOption(_Options):
    """A single unquoted value (report-to group name)."""

    value: str = ""


class TemplateOverrides(_Options):
    """Caller-supplied template text per kind. Empty means built-in default."""

    source_option: str = ""
    sandbox: str = ""
    frame_ancestors: str = ""
    unquoted_multi: str = ""
    unquoted_single: str = ""


class Policy(_Options):
    """A complete Content-Security-Policy configuration."""

    # Fetch directives. default_src is the fallback for the others.
    default_src: SourceOptions = Field(default_factory=SourceOptions)
    child_src: SourceOptions = Field(default_factory=SourceOptions)
    connect_src: SourceOptions = Field(default_factory=SourceOptions)
    font_src: SourceOptions = Field(default_factory=SourceOptions)
    frame_src: SourceOptions = Field(default_factory=SourceOptions)
    img_src: SourceOptions = Field(default_factory=SourceOptions)
    manifest_src: SourceOptions = Field(default_factory=SourceOptions)
    media_src: SourceOptions = Field(default_factory=SourceOptions)
    object_src: SourceOptions = Field(default_factory=SourceOptions)
    prefetch_src: SourceOptions = Field(default_factory=SourceOptions)
    script_src: SourceOptions = Field(default_factory=SourceOptions)
    script_src_elem: SourceOptions = Field(default_factory=SourceOptions)
    script_src_attr: SourceOptions = Field(default_factory=SourceOptions)
    style_src: SourceOptions = Field(default_factory=SourceOptions)
    style_src_elem: SourceOptions = Field(default_factory=SourceOptions)
    style_src_attr: SourceOptions = Field(default_factory=SourceOptions)
    worker_src: SourceOptions = Field(default_factory=SourceOptions)

    # Document directives
    base_uri: SourceOptions = Field(default_factory=SourceOptions)
    sandbox: SandboxOptions = Field(default_factory=SandboxOptions)

    # Navigation directives
    form_action: SourceOptions = Field(default_factory=SourceOptions)
    frame_ancestors: FrameAncestorOptions = Field(default_factory=FrameAncestorOptions)

    # Reporting directives. report-uri is deprecated but still needed for Firefox.
    report_uri: UnquotedOptions = Field(default_factory=UnquotedOptions)
    report_to: UnquotedOption = Field(default_factory=UnquotedOption)

    upgrade_insecure_requests: bool = False

    # Literal Report-To header body, referenced by report_to.value
    report_to_payload: str = ""

    templates: TemplateOverrides = Field(default_factory=TemplateOverrides)
