"""Global configuration: paths, env vars.

DEPLOYMENT:
  Copy .env.example → .env and fill in the values.
  Moving the data directory or switching storage backends only needs a .env change.
"""

import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # backend/
PROJECT_DIR = os.path.dirname(BASE_DIR)  # project root

# Load .env from project root (overrides any system env vars with same name)
load_dotenv(os.path.join(PROJECT_DIR, ".env"), override=True)

# ─── Paths ───────────────────────────────────────────────────
DATA_DIR = os.path.expanduser(
    os.environ.get("ZENPLAN_DATA_DIR", os.path.join("~", "Documents", "ZenPlan"))
)
DB_PATH = os.environ.get("ZENPLAN_DB", os.path.join(DATA_DIR, "zenplan.db"))

# ─── Storage ─────────────────────────────────────────────────
# sqlite: single database file (default)
# files:  one <date>.md note + one <date>.json record list per day
STORAGE_BACKEND = os.environ.get("ZENPLAN_STORAGE", "sqlite").strip().lower()

# ─── Timer ───────────────────────────────────────────────────
TIMER_DEFAULT_MINUTES = int(os.environ.get("TIMER_DEFAULT_MINUTES", 25))

# ─── Subjects ────────────────────────────────────────────────
# Offered in the entry form; free text is still accepted.
_raw_subjects = os.environ.get(
    "DEFAULT_SUBJECTS", "Physics,Mathematics,Computer Science,Russian Language"
)
DEFAULT_SUBJECTS = [s.strip() for s in _raw_subjects.split(",") if s.strip()]

# ─── Logging ─────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ─── Server ──────────────────────────────────────────────────
# Change PORT in .env to run on a different port.
PORT = int(os.environ.get("PORT", 8000))

# ─── CORS ────────────────────────────────────────────────────
# Dev:  ALLOWED_ORIGINS=*   (allows any origin)
# Prod: ALLOWED_ORIGINS=https://yourdomain.com,https://www.yourdomain.com
_raw_origins = os.environ.get("ALLOWED_ORIGINS", "*")
ALLOWED_ORIGINS = ["*"] if _raw_origins.strip() == "*" else [
    o.strip() for o in _raw_origins.split(",") if o.strip()
]
