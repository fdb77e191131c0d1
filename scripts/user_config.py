"""SUBCAM User Configuration.

This is the user-facing configuration file. Modify settings here to customize
conversion behavior. Expert defaults are in src/subcam/schemas/param.py

Usage:
    python scripts/run_conversion.py data/site4_raw.csv --config scripts/user_config.py
    subcam-convert data/site4_raw.csv --mode obvs --config scripts/user_config.py
"""

CONFIG = {
    # ========================================================================
    # QUALITY FILTERS (None = keep every row)
    # ========================================================================
    "MIN_CONFIDENCE": None,    # Drop rows with Confidence Level below this (1-5)
    "MIN_QUALITY": None,       # Drop rows with Quality of Video below this (1-5)

    # ========================================================================
    # AGGREGATION
    # ========================================================================
    "FILL_MISSING_DAYS": False,  # Emit zero rows for days without observations

    # ========================================================================
    # INPUT VALIDATION & LOGGING
    # ========================================================================
    "SAMPLE_SIZE": 5,          # Rows checked by the input format validator
    "LOG_LEVEL": "INFO",
}
