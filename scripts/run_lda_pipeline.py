#!/usr/bin/env python3
"""
Run the LDA topic service CLI from a source checkout.

Usage:
    python scripts/run_lda_pipeline.py train --csv data/docs.csv --model-id news-v1
    python scripts/run_lda_pipeline.py predict --model-id news-v1 --text "rates rise again"

Reads the project-root .env file when present.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

env_path = project_root / ".env"
if env_path.exists():
    load_dotenv(env_path)

from lda_service.src.cli import main

if __name__ == "__main__":
    sys.exit(main())
