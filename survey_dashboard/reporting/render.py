"""Render the dashboard digest using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from survey_dashboard.models import AggregateView
from survey_dashboard.reporting.context import build_report_context

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown output – HTML escaping would mangle quotes and ampersands.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_report(view: AggregateView) -> str:
    """Render a markdown digest of *view*."""

    context = build_report_context(view)
    template = _env.get_template("report.md.j2")
    report_text = template.render(**context.to_dict())
    logger.debug(
        "Report rendered role=%s mode=%s len=%d",
        view.role_filter,
        view.view_mode,
        len(report_text),
    )
    return report_text
