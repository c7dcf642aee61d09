"""Nonce and hash source tokens for dynamic directives."""

from __future__ import annotations

import base64
import hashlib
import secrets

HASH_ALGORITHMS = frozenset({"sha256", "sha384", "sha512"})


def generate_nonce(nbytes: int = 16) -> str:
    """Return a fresh ``'nonce-<base64>'`` token. Use once per response."""
    value = base64.b64encode(secrets.token_bytes(nbytes)).decode("ascii")
    return f"'nonce-{value}'"


def hash_source(content: str | bytes, algorithm: str = "sha256") -> str:
    """Return a ``'<algorithm>-<base64 digest>'`` token for inline content."""
    algorithm = algorithm.lower()
    if algorithm not in HASH_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    if isinstance(content, str):
        content = content.encode("utf-8")
    digest = hashlib.new(algorithm, content).digest()
    return f"'{algorithm}-{base64.b64encode(digest).decode('ascii')}'"
