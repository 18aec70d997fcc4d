"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_VACATION_DAYS = 30
DEFAULT_LIST_LIMIT = 500
MIN_PASSWORD_LENGTH = 8

# Excel stores dates as days since this epoch (1900 leap-year bug included).
EXCEL_EPOCH_ORDINAL = 693594  # date(1899, 12, 30).toordinal()

IMPORT_LOCATION = "Importado (Excel)"
IMPORT_DEVICE = "System Import"

# Anomaly scoring
ANOMALY_MAX_SCORE = 100
ANOMALY_DAY_START_HOUR = 5
ANOMALY_DAY_END_HOUR = 22
ANOMALY_DUPLICATE_MINUTES = 30
ANOMALY_HISTORY_DAYS = 90
ANOMALY_HISTORY_SIZE = 30
ANOMALY_PATTERN_MIN_SAMPLES = 5
ANOMALY_PATTERN_TOLERANCE_MINUTES = 120
ANOMALY_RECENT_ABSENCE_DAYS = 60
ANOMALY_LONG_ABSENCE_DAYS = 10
