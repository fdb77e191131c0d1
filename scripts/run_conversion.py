#!/usr/bin/env python3
"""SUBCAM raw observation conversion runner.

Usage:
    python scripts/run_conversion.py data/site4_raw.csv
    python scripts/run_conversion.py data/site4_raw.csv --mode obvs
    python scripts/run_conversion.py data/site4_raw.csv --config scripts/user_config.py --min-confidence 3

Note: User config in scripts/user_config.py, expert defaults in src/subcam/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from subcam.cli.run_conversion import main


if __name__ == "__main__":
    sys.exit(main())
