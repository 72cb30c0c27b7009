"""Application bootstrap for the survey dashboard pipeline.

Loads ``.env``, configures logging, performs the session's single fetch and
prints the overview and deep-dive digests. Live data requires
``SURVEY_ENDPOINT_URL``; without it the session always uses the generated
fallback dataset. Keeping the side-effects here lets the pipeline modules be
imported by tests without configuring logging.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from survey_dashboard.config import DashboardConfig
from survey_dashboard.pipeline import DashboardPipeline
from survey_dashboard.reporting.render import render_report

logger = logging.getLogger(__name__)


def main() -> None:  # pragma: no cover — manual run path
    load_dotenv()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=os.environ.get("SURVEY_LOG_LEVEL", "INFO"),
    )

    config = DashboardConfig.from_env()
    if not config.endpoint_url:
        logger.warning("SURVEY_ENDPOINT_URL is not set; the fallback dataset will be used.")

    pipeline = DashboardPipeline(config)
    pipeline.load()
    if pipeline.is_fallback:
        logger.warning("Showing fallback data: %s", pipeline.fallback_reason)

    print(render_report(pipeline.view()))
    print(render_report(pipeline.view(view_mode="deep-dive")))


if __name__ == "__main__":  # pragma: no cover
    main()
