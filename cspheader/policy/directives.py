"""Directive tables, redundancy filtering and static/dynamic partitioning."""

from __future__ import annotations

import types
from typing import Mapping, MutableMapping

from cspheader.models.options import SourceOptions

DEFAULT_SRC = "default-src"
UPGRADE_INSECURE_REQUESTS = "upgrade-insecure-requests"

# Fetch directives fall back to default-src: directive name -> Policy attribute
FETCH_DIRECTIVES: Mapping[str, str] = types.MappingProxyType({
    "child-src": "child_src",
    "connect-src": "connect_src",
    "font-src": "font_src",
    "frame-src": "frame_src",
    "img-src": "img_src",
    "manifest-src": "manifest_src",
    "media-src": "media_src",
    "object-src": "object_src",
    "prefetch-src": "prefetch_src",
    "script-src": "script_src",
    "script-src-elem": "script_src_elem",
    "script-src-attr": "script_src_attr",
    "style-src": "style_src",
    "style-src-elem": "style_src_elem",
    "style-src-attr": "style_src_attr",
    "worker-src": "worker_src",
})

# Source-list directives with no default-src fallback
NON_FETCH_SOURCE_DIRECTIVES: Mapping[str, str] = types.MappingProxyType({
    "base-uri": "base_uri",
    "form-action": "form_action",
})

SOURCE_DIRECTIVES: Mapping[str, str] = types.MappingProxyType({
    DEFAULT_SRC: "default_src",
    **FETCH_DIRECTIVES,
    **NON_FETCH_SOURCE_DIRECTIVES,
})

# Flattening order for the Content-Security-Policy header
DIRECTIVE_ORDER: tuple[str, ...] = (
    DEFAULT_SRC,
    *FETCH_DIRECTIVES,
    "base-uri",
    "sandbox",
    "form-action",
    "frame-ancestors",
    "report-uri",
    "report-to",
    UPGRADE_INSECURE_REQUESTS,
)

# Directives that take no value
VALUELESS_DIRECTIVES = frozenset({UPGRADE_INSECURE_REQUESTS})


def is_redundant(rendered: str, default_rendered: str) -> bool:
    """True when a fetch directive says exactly what default-src says."""
    return rendered == default_rendered


def is_dynamic(options: SourceOptions) -> bool:
    """Nonce- or hash-bearing directives must be regenerated per response."""
    return options.is_dynamic


def partition(
    name: str,
    text: str,
    options: SourceOptions,
    static: MutableMapping[str, str],
    dynamic: MutableMapping[str, str],
) -> None:
    """Store a rendered source directive in the static or dynamic mapping."""
    if is_dynamic(options):
        dynamic[name] = text
    else:
        static[name] = text


def flatten(*mappings: Mapping[str, str]) -> str:
    """Join rendered directives into a header value in canonical order.

    Empty entries are skipped. Later mappings win on duplicate names.
    """
    merged: dict[str, str] = {}
    for mapping in mappings:
        merged.update(mapping)
    fragments = []
    for name in DIRECTIVE_ORDER:
        text = merged.get(name, "")
        if not text:
            continue
        if name in VALUELESS_DIRECTIVES:
            fragments.append(f"{name};")
        else:
            fragments.append(f"{name} {text};")
    return " ".join(fragments)
