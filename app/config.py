import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ───── API Keys & URLs ─────
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/codehut")
MONGODB_DB = os.getenv("MONGODB_DB", "codehut")
SNIPPETS_COLLECTION = os.getenv("SNIPPETS_COLLECTION", "snippets")

OPENROUTER_API_URL = os.getenv("OPENROUTER_API_URL", "https://openrouter.ai/api/v1/chat/completions")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")
TAVILY_API_URL = os.getenv("TAVILY_API_URL", "https://api.tavily.com/search")

APP_URL = os.getenv("APP_URL", "http://localhost:5000")
APP_TITLE = os.getenv("APP_TITLE", "CodeHut - Code Snippet Marketplace")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")


def get_openrouter_api_key() -> str:
    return os.getenv("OPENROUTER_API_KEY", "")


def get_search_api_key() -> str:
    return os.getenv("TAVILY_API_KEY") or os.getenv("LANGSEARCH_API_KEY", "")


# ───── Similarity thresholds ─────
RELEVANCE_THRESHOLD = _float_env("RELEVANCE_THRESHOLD", 0.3)
REVIEW_THRESHOLD = _float_env("REVIEW_THRESHOLD", 0.5)
FAIL_THRESHOLD = _float_env("FAIL_THRESHOLD", 0.7)
FALLBACK_MATCH_THRESHOLD = _float_env("FALLBACK_MATCH_THRESHOLD", 0.5)
DEFAULT_SEARCH_SCORE = 0.5

# ───── Corpus & result limits ─────
MAX_SURFACED_MATCHES = _int_env("MAX_SURFACED_MATCHES", 5)
MAX_CORPUS_SIZE = _int_env("MAX_CORPUS_SIZE", 15)

# ───── Internet search ─────
SEARCH_MAX_RESULTS = _int_env("SEARCH_MAX_RESULTS", 10)
SEARCH_DEPTH = "advanced"
SEARCH_TIMEOUT = _int_env("SEARCH_TIMEOUT", 30)
MAX_QUERY_IDENTIFIERS = 3
QUERY_FALLBACK_CHARS = 200
QUERY_SITE_HINT = "site:github.com OR site:stackoverflow.com"
SEARCH_DOMAINS = [
    "github.com",
    "stackoverflow.com",
    "gitlab.com",
    "bitbucket.org",
    "geeksforgeeks.org",
    "dev.to",
    "medium.com",
]

# ───── LLM ─────
LLM_TIMEOUT = _int_env("LLM_TIMEOUT", 60)
LLM_TEMPERATURE = _float_env("LLM_TEMPERATURE", 0.3)
LLM_MAX_TOKENS = _int_env("LLM_MAX_TOKENS", 4000)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "plagiarism.log")
