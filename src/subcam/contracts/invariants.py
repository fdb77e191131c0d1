"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor; enforcement lives in subcam.contracts.output.
"""

PIPELINE_INVARIANTS = {
    "load": [
        "At least one data row follows the header, else EmptyInputError",
        "Every cell is normalized text (NBSP removed, whitespace collapsed)",
        "Malformed lines are skipped and counted, never fatal",
    ],

    "normalize": [
        "Quantity is an integer >= 0 (non-numeric -> 0, negative -> 0)",
        "Timestamp is a datetime or None, never an exception",
    ],

    "filter": [
        "A row missing confidence or quality is never dropped for it",
        "Thresholds compose conjunctively",
    ],

    "resolve": [
        "Scientific name wins over common name",
        "Rows resolving to None are excluded from every total",
    ],

    "aggregate": [
        "One row per distinct calendar date, ascending",
        "Summary columns first, taxon columns in first-seen order",
        "Every numeric cell is an integer >= 0",
        "Cumulative fields never decrease",
        "Cumulative Unique Species <= number of taxon columns",
        "Unique organisms today == positive taxon cells in that row",
        "Obvs: Total Observations == sum of taxon cells",
    ],
}

# Which stages can fail a conversion
STAGE_REQUIREMENTS = {
    "load": "FATAL_IF_EMPTY",
    "normalize": "RECOVERABLE",
    "filter": "FATAL_IF_EMPTY",
    "resolve": "FATAL_IF_EMPTY",
    "aggregate": "FATAL_ON_CONTRACT",
}
