"""
AI similarity analysis over the comparison corpus.

The model is asked for a strict JSON verdict. Its reply is parsed with an
ordered list of strategies; every match it returns is resolved back to the
corpus by id, so titles, authors and URLs always come from our own records.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from app.config import (
    FAIL_THRESHOLD,
    LLM_MAX_TOKENS,
    LLM_TEMPERATURE,
    MAX_SURFACED_MATCHES,
    OPENROUTER_MODEL,
    REVIEW_THRESHOLD,
)
from app.schemas.plagiarism_schemas import CandidateSnippet, PlagiarismMatch, PlagiarismVerdict
from app.utils.llm_client import acall_openrouter, system_message, user_message
from app.utils.prompts import SNIPPET_BLOCK, SYSTEM_PROMPT, USER_PROMPT
from app.utils.verdict_utils import STATUS_MESSAGES, clamp_similarity, derive_status, is_plagiarized

logger = logging.getLogger("plagiarism.ai_analyzer")

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FIRST_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIResponseParseError(ValueError):
    pass


# ---- Response parser strategies ----
# Each returns a dict, or None when it cannot handle the text.

def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except (TypeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


def parse_direct(text: str) -> Optional[Dict[str, Any]]:
    return _loads_object(text.strip())


def parse_fenced_block(text: str) -> Optional[Dict[str, Any]]:
    m = _FENCED_JSON.search(text)
    return _loads_object(m.group(1)) if m else None


def parse_first_object(text: str) -> Optional[Dict[str, Any]]:
    m = _FIRST_OBJECT.search(text)
    return _loads_object(m.group(0)) if m else None


RESPONSE_PARSERS: List[Callable[[str], Optional[Dict[str, Any]]]] = [
    parse_direct,
    parse_fenced_block,
    parse_first_object,
]


def parse_ai_response(text: str) -> Dict[str, Any]:
    for parser in RESPONSE_PARSERS:
        result = parser(text or "")
        if result is not None:
            logger.debug(f"AI response parsed by {parser.__name__}")
            return result
    raise AIResponseParseError("Could not parse AI response as JSON")


# ---- Prompt ----

def build_messages(
    submitted_code: str,
    corpus: List[CandidateSnippet],
    language: Optional[str] = None,
) -> List[Dict[str, str]]:
    fence = language or ""
    blocks = []
    for idx, snippet in enumerate(corpus, start=1):
        source = snippet.sourceUrl if snippet.provenance == "internet" else "database"
        blocks.append(SNIPPET_BLOCK.format(
            index=idx,
            id=snippet.id,
            title=snippet.title,
            author=snippet.author,
            source=source,
            fence=fence,
            code=snippet.code,
        ))

    system = SYSTEM_PROMPT.format(review=REVIEW_THRESHOLD, fail=FAIL_THRESHOLD)
    user = USER_PROMPT.format(
        language=language or "code",
        fence=fence,
        code=submitted_code,
        snippets="\n---\n".join(blocks),
    )
    return [system_message(system), user_message(user)]


# ---- Result mapping ----

def map_ai_matches(raw_matches: Any, corpus: List[CandidateSnippet]) -> List[PlagiarismMatch]:
    """Keep model ordering; drop ids that are not in the corpus."""
    if not isinstance(raw_matches, list):
        return []

    by_id = {c.id: c for c in corpus}
    matches: List[PlagiarismMatch] = []
    for raw in raw_matches:
        if not isinstance(raw, dict):
            continue
        snippet_id = str(raw.get("snippetId") or raw.get("id") or "")
        candidate = by_id.get(snippet_id)
        if candidate is None:
            logger.warning(f"AI referenced unknown snippet id '{snippet_id}', skipping")
            continue
        matches.append(PlagiarismMatch(
            snippetId=candidate.id,
            title=candidate.title,
            author=candidate.author,
            similarity=clamp_similarity(raw.get("similarity")),
            explanation=str(raw.get("explanation") or "No explanation provided"),
            provenance=candidate.provenance,
            sourceUrl=candidate.sourceUrl,
        ))
        if len(matches) >= MAX_SURFACED_MATCHES:
            break
    return matches


def build_ai_verdict(
    ai_result: Dict[str, Any],
    corpus: List[CandidateSnippet],
    internet_searched: bool,
) -> PlagiarismVerdict:
    similarity = clamp_similarity(ai_result.get("overallSimilarity"))
    status = derive_status(similarity)

    model_status = ai_result.get("status")
    if model_status and str(model_status).upper() != status:
        logger.warning(f"Model status {model_status} disagrees with bands for {similarity:.3f}; using {status}")

    analysis = ai_result.get("analysis")
    return PlagiarismVerdict(
        isPlagiarized=is_plagiarized(status),
        similarity=similarity,
        status=status,
        message=STATUS_MESSAGES[status],
        matches=map_ai_matches(ai_result.get("matches"), corpus),
        analysis=str(analysis) if analysis is not None else None,
        aiPowered=True,
        internetSearched=internet_searched,
    )


async def analyze_with_ai(
    submitted_code: str,
    corpus: List[CandidateSnippet],
    language: Optional[str] = None,
    internet_searched: bool = False,
) -> PlagiarismVerdict:
    """Raises LLMProviderError or AIResponseParseError; the caller owns the fallback."""
    logger.info(f"🤖 AI analysis against {len(corpus)} candidates")
    response = await acall_openrouter(
        build_messages(submitted_code, corpus, language),
        model=OPENROUTER_MODEL,
        temperature=LLM_TEMPERATURE,
        max_tokens=LLM_MAX_TOKENS,
        response_format="json",
    )
    ai_result = parse_ai_response(response)
    verdict = build_ai_verdict(ai_result, corpus, internet_searched)
    logger.info(f"   ✅ AI verdict: {verdict.status} ({verdict.similarity:.3f})")
    return verdict
