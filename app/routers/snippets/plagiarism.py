from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
import logging

from app.dependencies.auth import verify_token
from app.dependencies.snippets import SnippetRepository, get_snippet_repository
from app.schemas.plagiarism_schemas import (
    DetectPlagiarismRequest,
    InternetSearchRequest,
    InternetSearchResponse,
    PlagiarismVerdict,
)
from app.utils import plagiarism_detector, web_utils

router = APIRouter(prefix="/snippets", tags=["snippets-plagiarism"])

logger = logging.getLogger("plagiarism.routes")


@router.post("/detect-plagiarism", response_model=PlagiarismVerdict)
async def detect_plagiarism_route(
    body: DetectPlagiarismRequest,
    repository: SnippetRepository = Depends(get_snippet_repository),
    current_user=Depends(verify_token),
):
    if not body.code or not body.code.strip():
        raise HTTPException(status_code=400, detail="Code is required")

    t0 = datetime.utcnow()
    existing = await repository.list_for_comparison(
        language=body.language,
        exclude_author_id=body.excludeAuthorId,
    )
    logger.info(f"📄 Loaded {len(existing)} snippets for comparison")

    verdict = await plagiarism_detector.detect_plagiarism(body.code, existing, body.language)

    elapsed = (datetime.utcnow() - t0).total_seconds()
    logger.info(
        f"✅ Verdict {verdict.status} ({verdict.similarity:.3f}) "
        f"ai={verdict.aiPowered} internet={verdict.internetSearched} in {elapsed:.1f}s"
    )
    return verdict


@router.post("/internet-search", response_model=InternetSearchResponse)
async def internet_search_route(
    body: InternetSearchRequest,
    current_user=Depends(verify_token),
):
    if not body.code or not body.code.strip():
        raise HTTPException(status_code=400, detail="Code is required")

    result = await web_utils.search_internet_for_code(body.code, body.language)
    return InternetSearchResponse(
        result=result,
        summary=web_utils.analyze_internet_matches(result.matches),
    )
