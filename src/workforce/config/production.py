import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = True

STORAGE_DIR = os.getenv("STORAGE_DIR", "/var/lib/workforce/uploads")

COMPANY_CITY = os.getenv("COMPANY_CITY", "Palma de Mallorca")
SIGNATORY_NAME = os.getenv("SIGNATORY_NAME", "")
MODEL_145_TEMPLATE = os.getenv("MODEL_145_TEMPLATE", "templates/modelo145.pdf")
LOGO_PATH = os.getenv("LOGO_PATH", "assets/logo.png")

HOLIDAY_EXTRA_DATES = os.getenv("HOLIDAY_EXTRA_DATES", "")
DEFAULT_VACATION_DAYS = int(os.getenv("DEFAULT_VACATION_DAYS", "30"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
