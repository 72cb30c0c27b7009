"""Configuration constants for the markdown report."""
from __future__ import annotations

import os

# Maximum number of ranked themes listed per panel
MAX_THEMES: int = int(os.getenv("REPORT_MAX_THEMES", "5"))

# Maximum verbatim answers quoted per feedback bucket
MAX_QUOTES: int = int(os.getenv("REPORT_MAX_QUOTES", "10"))

# Maximum gallery links listed
MAX_LINKS: int = int(os.getenv("REPORT_MAX_LINKS", "10"))

# Width (characters) of the text bar drawn next to each satisfaction item
BAR_WIDTH: int = int(os.getenv("REPORT_BAR_WIDTH", "20"))
