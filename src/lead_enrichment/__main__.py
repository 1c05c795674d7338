"""Run the lead-enrich command line with ``python -m lead_enrichment``."""

import sys

from .cli import main

sys.exit(main())
