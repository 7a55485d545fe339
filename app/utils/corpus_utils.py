from typing import Iterable, List

from app.config import MAX_CORPUS_SIZE
from app.schemas.plagiarism_schemas import CandidateSnippet, ExistingSnippet, InternetMatch


def snippet_to_candidate(snippet: ExistingSnippet) -> CandidateSnippet:
    return CandidateSnippet(
        id=snippet.id,
        title=snippet.title,
        code=snippet.code,
        author=snippet.author,
        provenance="database",
    )


def internet_match_to_candidate(match: InternetMatch, index: int) -> CandidateSnippet:
    return CandidateSnippet(
        id=f"internet-{index}",
        title=match.title,
        code=match.snippet,
        author=match.source,
        provenance="internet",
        sourceUrl=match.url,
    )


def build_comparison_corpus(
    existing: Iterable[ExistingSnippet],
    internet_matches: Iterable[InternetMatch],
    limit: int = MAX_CORPUS_SIZE,
) -> List[CandidateSnippet]:
    """Local snippets first, then internet matches, truncated to `limit`. No re-ranking."""
    corpus = [snippet_to_candidate(s) for s in existing]
    corpus.extend(internet_match_to_candidate(m, i) for i, m in enumerate(internet_matches))
    return corpus[:limit]
