"""Column names for raw input files and the daily output matrices."""

FILE_NAME = "File Name"
CLOCK_TIME = "Timestamps (HH:MM:SS)"
ADJUSTED_TIMESTAMP = "Adjusted Date and Time"
EVENT_OBSERVATION = "Event Observation"
QUANTITY = "Quantity (Nmax)"
COMMON_NAME = "Common Name"
SCIENTIFIC_NAME = "Lowest Order Scientific Name"
CONFIDENCE = "Confidence Level"
QUALITY = "Quality of Video"

# Expected raw schema, in file order
RAW_COLUMNS = [
    FILE_NAME,
    CLOCK_TIME,
    ADJUSTED_TIMESTAMP,
    EVENT_OBSERVATION,
    QUANTITY,
    COMMON_NAME,
    SCIENTIFIC_NAME,
    CONFIDENCE,
    QUALITY,
]

OPTIONAL_COLUMNS = {CONFIDENCE, QUALITY}

# Alternative headers seen in older exports, keyed by canonical name
HEADER_ALIASES = {
    CONFIDENCE: ["Confidence Level (1-5)"],
    QUALITY: ["Quality of Video (1-5)"],
}

# Consulted in order when the adjusted timestamp is empty or unparsable
TIMESTAMP_FALLBACK_COLUMNS = [
    "Adjusted Date / Time",
    "Date/Time of Recording",
]

# _raw2 exports (lower-case, underscore headers)
RAW2_COLUMNS = [
    "file_name", "location_1-9_thirds", "quantity", "note", "time_stamp",
    "confidence_1-5", "species", "genus", "family", "order", "class",
    "phylum", "kingdom", "notes",
]

DATE = "Date"
TOTAL_OBSERVATIONS = "Total Observations"
CUMULATIVE_OBSERVATIONS = "Cumulative Observations"
UNIQUE_TODAY = "All Unique Organisms Observed Today"
NEW_TODAY = "New Unique Organisms Today"
CUMULATIVE_NEW = "Cumulative New Unique Organisms"
CUMULATIVE_SPECIES = "Cumulative Unique Species"

# Fixed prefix shared by the Nmax and Obvs matrices
SUMMARY_COLUMNS = [
    DATE,
    TOTAL_OBSERVATIONS,
    CUMULATIVE_OBSERVATIONS,
    UNIQUE_TODAY,
    NEW_TODAY,
    CUMULATIVE_NEW,
    CUMULATIVE_SPECIES,
]

CUMULATIVE_COLUMNS = [CUMULATIVE_OBSERVATIONS, CUMULATIVE_NEW, CUMULATIVE_SPECIES]
