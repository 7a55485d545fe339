from typing import Dict, List, Optional
import asyncio
import logging
import re

from app.config import (
    DEFAULT_SEARCH_SCORE,
    FAIL_THRESHOLD,
    MAX_QUERY_IDENTIFIERS,
    QUERY_FALLBACK_CHARS,
    QUERY_SITE_HINT,
    RELEVANCE_THRESHOLD,
    SEARCH_DEPTH,
    SEARCH_DOMAINS,
    SEARCH_MAX_RESULTS,
    SEARCH_TIMEOUT,
    TAVILY_API_URL,
    get_search_api_key,
)
from app.schemas.plagiarism_schemas import (
    InternetMatch,
    InternetMatchSummary,
    InternetSearchResult,
)
from app.utils.http_utils import make_session

logger = logging.getLogger("plagiarism.web_search")

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"//.*")
_HASH_COMMENT = re.compile(r"#.*")
_DECLARATION = re.compile(r"\b(?:function|def|class|const|let|var)\s+([a-zA-Z_][a-zA-Z0-9_]*)")

# URL substring -> source name, checked in order
SOURCE_PATTERNS = [
    ("github.com", "github"),
    ("stackoverflow.com", "stackoverflow"),
    ("gitlab.com", "gitlab"),
    ("bitbucket.org", "bitbucket"),
]

_SESSION = make_session()


# ---- Helpers ----
def _normalize_whitespace(s: str) -> str:
    return " ".join(s.split())


def clean_code_for_query(code: str) -> str:
    """Strip block, line and hash comments and collapse whitespace."""
    text = _BLOCK_COMMENT.sub("", code or "")
    text = _LINE_COMMENT.sub("", text)
    text = _HASH_COMMENT.sub("", text)
    return _normalize_whitespace(text)


def extract_identifiers(code: str, limit: int = MAX_QUERY_IDENTIFIERS) -> List[str]:
    return _DECLARATION.findall(code)[:limit]


def build_code_search_query(code: str, language: Optional[str] = None) -> str:
    """
    Build a search query from submitted code:
      1) identifiers declared with function/def/class/const/let/var (max 3)
      2) otherwise the first 200 characters of the cleaned code
    Prefixed with the language and suffixed with a GitHub/Stack Overflow hint.
    """
    clean = clean_code_for_query(code)
    names = extract_identifiers(clean)

    query = ""
    if language:
        query += f"{language} code "
    if names:
        query += " ".join(names)
    else:
        query += clean[:QUERY_FALLBACK_CHARS]
    query += f" {QUERY_SITE_HINT}"
    return query


def classify_source(url: str) -> str:
    for needle, name in SOURCE_PATTERNS:
        if needle in url:
            return name
    return "web"


def _to_internet_match(item: Dict) -> Optional[InternetMatch]:
    url = item.get("url") or ""
    snippet = item.get("content") or item.get("snippet") or item.get("description") or ""
    if not url or not snippet:
        return None
    score = item.get("score")
    try:
        # falsy scores (missing, 0) count as unscored
        score = float(score) if score else DEFAULT_SEARCH_SCORE
    except (TypeError, ValueError):
        score = DEFAULT_SEARCH_SCORE
    return InternetMatch(
        url=url,
        title=item.get("title") or "Untitled",
        snippet=snippet,
        relevanceScore=score,
        source=classify_source(url),
    )


# ---- Tavily Search ----
def tavily_search(query: str, api_key: str) -> List[Dict]:
    """Single advanced search restricted to code-hosting and Q&A domains."""
    payload = {
        "query": query,
        "search_depth": SEARCH_DEPTH,
        "max_results": SEARCH_MAX_RESULTS,
        "include_domains": SEARCH_DOMAINS,
    }
    r = _SESSION.post(
        TAVILY_API_URL,
        json=payload,
        headers={"Authorization": f"Bearer {api_key}"},
        timeout=SEARCH_TIMEOUT,
    )
    r.raise_for_status()
    data = r.json() or {}
    items = data.get("results", []) or []
    logger.info(f"tavily_search: got {len(items)} items for '{query[:60]}'")
    return items


def search_internet_sync(code: str, language: Optional[str] = None) -> InternetSearchResult:
    """Blocking search; never raises, degrades to an empty result."""
    api_key = get_search_api_key()
    if not api_key:
        logger.warning("Missing TAVILY_API_KEY; skipping internet search")
        return InternetSearchResult(found=False)

    query = build_code_search_query(code, language)
    logger.info(f"🔎 Internet search (code length {len(code)}, language {language or 'unknown'})")

    try:
        items = tavily_search(query, api_key)
        matches = []
        for item in items:
            if not isinstance(item, dict):
                continue
            m = _to_internet_match(item)
            if m and m.relevanceScore > RELEVANCE_THRESHOLD:
                matches.append(m)
    except Exception as e:
        logger.warning(f"Internet search failed: {e}")
        return InternetSearchResult(found=False, searched=True)

    logger.info(f"   ✅ Kept {len(matches)}/{len(items)} results above relevance {RELEVANCE_THRESHOLD}")
    return InternetSearchResult(
        found=len(matches) > 0,
        matches=matches,
        totalResults=len(matches),
        searchQuery=query,
        searched=True,
    )


async def search_internet_for_code(code: str, language: Optional[str] = None) -> InternetSearchResult:
    return await asyncio.to_thread(search_internet_sync, code, language)


def analyze_internet_matches(matches: List[InternetMatch]) -> InternetMatchSummary:
    """Average relevance across matches plus the single strongest hit."""
    if not matches:
        return InternetMatchSummary(overallSimilarity=0.0, highestMatch=None, isPlagiarized=False)

    highest = max(matches, key=lambda m: m.relevanceScore)
    avg = sum(m.relevanceScore for m in matches) / len(matches)
    return InternetMatchSummary(
        overallSimilarity=min(avg, 1.0),
        highestMatch=highest,
        isPlagiarized=highest.relevanceScore > FAIL_THRESHOLD,
    )
