import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = False

# Uploaded and generated files (documents, payroll spreadsheets)
STORAGE_DIR = os.getenv("STORAGE_DIR", "uploads")

# Values printed on generated HR forms
COMPANY_CITY = os.getenv("COMPANY_CITY", "Palma de Mallorca")
SIGNATORY_NAME = os.getenv("SIGNATORY_NAME", "")
MODEL_145_TEMPLATE = os.getenv("MODEL_145_TEMPLATE", "templates/modelo145.pdf")
LOGO_PATH = os.getenv("LOGO_PATH", "assets/logo.png")

# Local holidays on top of the national/regional calendar, "MM-DD,MM-DD"
HOLIDAY_EXTRA_DATES = os.getenv("HOLIDAY_EXTRA_DATES", "01-20")
DEFAULT_VACATION_DAYS = int(os.getenv("DEFAULT_VACATION_DAYS", "30"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
