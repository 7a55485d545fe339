import logging
from typing import Iterable, List, Optional, Union

import app.logger  # noqa: F401  configures handlers
from app.schemas.plagiarism_schemas import ExistingSnippet, PlagiarismVerdict
from app.utils.ai_analyzer import analyze_with_ai
from app.utils.corpus_utils import build_comparison_corpus, snippet_to_candidate
from app.utils.lexical_utils import detect_plagiarism_basic
from app.utils.web_utils import search_internet_for_code

logger = logging.getLogger("plagiarism.detector")

EMPTY_CORPUS_MESSAGE = "No existing snippets or internet matches found for comparison. Code appears to be original."

SnippetInput = Union[ExistingSnippet, dict]


def _coerce_snippets(existing_snippets: Optional[Iterable[SnippetInput]]) -> List[ExistingSnippet]:
    if existing_snippets is None:
        return []
    return [
        s if isinstance(s, ExistingSnippet) else ExistingSnippet.model_validate(s)
        for s in existing_snippets
    ]


async def detect_plagiarism(
    submitted_code: str,
    existing_snippets: Optional[Iterable[SnippetInput]] = None,
    language: Optional[str] = None,
) -> PlagiarismVerdict:
    """
    Full pipeline: internet search -> corpus -> AI analysis.
    Any AI-path failure falls back to Jaccard scoring over local snippets.
    Only contract errors (non-string code, malformed snippet records) raise.
    """
    if not isinstance(submitted_code, str):
        raise TypeError("submitted_code must be a string")
    local = _coerce_snippets(existing_snippets)

    logger.info(f"🔍 Plagiarism check: {len(submitted_code)} chars, {len(local)} local snippets")

    search = await search_internet_for_code(submitted_code, language)
    corpus = build_comparison_corpus(local, search.matches)

    if not corpus:
        logger.info("   Empty comparison corpus, skipping AI analysis")
        return PlagiarismVerdict(
            isPlagiarized=False,
            similarity=0.0,
            status="PASS",
            message=EMPTY_CORPUS_MESSAGE,
            matches=[],
            aiPowered=False,
            internetSearched=True,
        )

    try:
        return await analyze_with_ai(
            submitted_code,
            corpus,
            language=language,
            internet_searched=search.searched,
        )
    except Exception as e:
        logger.error(f"❌ AI plagiarism detection failed, falling back to basic detection: {e}", exc_info=True)

    return detect_plagiarism_basic(
        submitted_code,
        [snippet_to_candidate(s) for s in local],
        internet_searched=search.searched,
    )
