import os


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./badminton.db")

# e.g. "require" for hosted PostgreSQL
DATABASE_SSLMODE = os.environ.get("DATABASE_SSLMODE")

API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")
