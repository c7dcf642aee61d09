"""Shared test fixtures."""

from __future__ import annotations

import logging
import os

import pytest
import structlog

from cspheader.logging_config import use_stdlib_logging
from cspheader.models.options import Policy, SourceOptions, UnquotedOption
from tests.helpers.csp import REPORT_TO_PAYLOAD


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch):
    """Run every test against default settings and an empty preset cache."""
    for key in list(os.environ):
        if key.startswith("CSP_"):
            monkeypatch.delenv(key, raising=False)

    import cspheader.config.loader as loader
    import cspheader.config.presets as presets
    loader._settings = None
    presets.reset_presets_cache()
    yield
    loader._settings = None
    presets.reset_presets_cache()


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo setup_logging() so handlers bound to captured streams don't leak."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
    use_stdlib_logging()


@pytest.fixture
def scenario_policy() -> Policy:
    """Baseline policy: restrictive default, self scripts and forms, report-to."""
    return Policy(
        default_src=SourceOptions(allow=False),
        script_src=SourceOptions(allow=True, allow_self=True),
        base_uri=SourceOptions(allow=False),
        form_action=SourceOptions(allow=True, allow_self=True),
        report_to=UnquotedOption(value="default"),
        report_to_payload=REPORT_TO_PAYLOAD,
    )
