"""Cross-field checks between the report-to directive and the Report-To header."""

from __future__ import annotations

import structlog

from cspheader.errors import ReportToMismatch, ReportToMissing
from cspheader.models.options import Policy

logger = structlog.get_logger()


def validate_report_to(policy: Policy) -> None:
    """Ensure a report-to group name is backed by a Report-To payload.

    The payload is matched textually; it is not parsed as JSON.
    """
    group = policy.report_to.value
    if not group:
        return
    payload = policy.report_to_payload
    if not payload:
        logger.warning("report_to_validation_failed", group=group, reason="missing_payload")
        raise ReportToMissing(
            "Report-To payload is required when Content-Security-Policy report-to is set"
        )
    if group not in payload:
        logger.warning("report_to_validation_failed", group=group, reason="group_not_found")
        raise ReportToMismatch(f"report-to group {group!r} not found in Report-To payload")
