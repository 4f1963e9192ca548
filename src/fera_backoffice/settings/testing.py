import os

SECRET_KEY = "test-secret-key"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

STORE_BACKEND = "memory"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "fera_backoffice_test"),
}

AUTO_INIT_DB = False

SUPABASE_URL = ""
SUPABASE_ANON_KEY = ""

ASSISTANT_API_KEY = ""
ASSISTANT_MODEL = "gemini-2.5-flash"

LOCAL_ADMIN_EMAIL = "diretoria@fera.local"
LOCAL_ADMIN_PASSWORD = "fera123"
LOCAL_ADMIN_COMPANY = "fera-service"
