import logging
import re
from typing import Iterable, List, Set

from app.config import FALLBACK_MATCH_THRESHOLD, MAX_SURFACED_MATCHES
from app.schemas.plagiarism_schemas import CandidateSnippet, PlagiarismMatch, PlagiarismVerdict
from app.utils.verdict_utils import (
    BASIC_STATUS_MESSAGES,
    FALLBACK_NOTE,
    derive_status,
    is_plagiarized,
)

logger = logging.getLogger("plagiarism.lexical")


def normalize_code(code: str) -> str:
    if not code:
        return ""
    return re.sub(r"\s+", " ", code.strip().lower())


def _token_set(norm_code: str) -> Set[str]:
    return set(norm_code.split())


def _jaccard(a: Set[str], b: Set[str]) -> float:
    if not a and not b:
        return 0.0
    inter = len(a & b)
    union = len(a | b) or 1
    return inter / union


def jaccard_similarity(code_a: str, code_b: str) -> float:
    """Jaccard over whitespace-token sets of the normalized code. Two empty inputs score 0."""
    return _jaccard(_token_set(normalize_code(code_a)), _token_set(normalize_code(code_b)))


def detect_plagiarism_basic(
    submitted_code: str,
    candidates: Iterable[CandidateSnippet],
    internet_searched: bool = False,
) -> PlagiarismVerdict:
    """
    Deterministic fallback used when the AI path fails.
    Only database candidates are scored; internet evidence is ignored here.
    """
    submitted_tokens = _token_set(normalize_code(submitted_code))
    max_similarity = 0.0
    matches: List[PlagiarismMatch] = []

    for snippet in candidates:
        if snippet.provenance != "database":
            continue
        similarity = _jaccard(submitted_tokens, _token_set(normalize_code(snippet.code)))
        if similarity > max_similarity:
            max_similarity = similarity

        if similarity >= FALLBACK_MATCH_THRESHOLD:
            matches.append(PlagiarismMatch(
                snippetId=snippet.id,
                title=snippet.title,
                author=snippet.author,
                similarity=similarity,
                explanation=f"Basic text similarity: {similarity * 100:.1f}%",
                provenance=snippet.provenance,
                sourceUrl=snippet.sourceUrl,
            ))

    matches.sort(key=lambda m: m.similarity, reverse=True)
    status = derive_status(max_similarity)
    logger.info(f"Basic detection: max similarity {max_similarity:.3f} -> {status} ({len(matches)} matches)")

    return PlagiarismVerdict(
        isPlagiarized=is_plagiarized(status),
        similarity=max_similarity,
        status=status,
        message=BASIC_STATUS_MESSAGES[status] + FALLBACK_NOTE,
        matches=matches[:MAX_SURFACED_MATCHES],
        aiPowered=False,
        internetSearched=internet_searched,
    )
