import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_JSON = False

STORAGE_DIR = os.getenv("STORAGE_DIR", "/tmp/workforce-test-uploads")

COMPANY_CITY = "Palma de Mallorca"
SIGNATORY_NAME = "Firmante Pruebas"
MODEL_145_TEMPLATE = os.getenv("MODEL_145_TEMPLATE", "templates/modelo145.pdf")
LOGO_PATH = ""

HOLIDAY_EXTRA_DATES = ""
DEFAULT_VACATION_DAYS = 30

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
