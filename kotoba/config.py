"""Configuration settings for kotoba."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
INDEX_DIR = Path(os.getenv("INDEX_DIR", DATA_DIR / "indexes"))
RESOURCES_DIR = Path(os.getenv("RESOURCES_DIR", DATA_DIR / "resources"))
SUGGESTION_DIR = Path(os.getenv("SUGGESTION_DIR", DATA_DIR / "suggestions"))
DICT_DB_PATH = Path(os.getenv("DICT_DB_PATH", DATA_DIR / "dictionary.db"))

# Suggestion settings
SUGGESTION_TIMEOUT_MS = int(os.getenv("SUGGESTION_TIMEOUT_MS", "1000"))
SUGGESTION_WORKERS = int(os.getenv("SUGGESTION_WORKERS", "4"))
MAX_SUGGESTIONS = 10
MAX_SUGGESTION_INPUT_LEN = 37

# Kanji cache capacity (entries)
KANJI_CACHE_SIZE = int(os.getenv("KANJI_CACHE_SIZE", "10000"))

# Search task defaults
SEARCH_THRESHOLD = float(os.getenv("SEARCH_THRESHOLD", "0.2"))
SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "1000"))
VECTOR_LIMIT = int(os.getenv("VECTOR_LIMIT", "100000"))

# Results shown per page at the request boundary
PAGE_SIZE = int(os.getenv("PAGE_SIZE", "10"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Default user preferences
DEFAULT_USER_LANG = os.getenv("DEFAULT_USER_LANG", "en-US")
SHOW_ENGLISH = os.getenv("SHOW_ENGLISH", "true").lower() == "true"
