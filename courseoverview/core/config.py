from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# DEV ONLY: hardcoded secret. Later we will load from env vars.
SECRET_KEY = "change-me-in-production"
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(minutes=60)

DATABASE_URL = f"sqlite:///{BASE_DIR}/courseoverview.db"

# The overview is only injected on this page type (the user dashboard).
DASHBOARD_PAGETYPE = "my-index"

# Forum posts older than this never count as unread.
FORUM_OLD_POST_DAYS = 14

DEFAULT_LANG = "en"

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
