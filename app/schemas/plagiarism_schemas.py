from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional

Provenance = Literal["database", "internet"]
Status = Literal["PASS", "REVIEW", "FAIL"]


class SubmittedCode(BaseModel):
    code: str
    language: Optional[str] = None


class ExistingSnippet(BaseModel):
    # Caller-supplied local snippet record
    id: str
    title: str = ""
    code: str = ""
    author: str = "Unknown"

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # database ids may arrive as ints or ObjectIds
        return str(v) if v is not None else v


class CandidateSnippet(BaseModel):
    id: str
    title: str
    code: str
    author: str
    provenance: Provenance
    sourceUrl: Optional[str] = None


class InternetMatch(BaseModel):
    url: str
    title: str
    snippet: str
    relevanceScore: float
    source: str  # 'github', 'stackoverflow', 'gitlab', 'bitbucket', 'web'


class InternetSearchResult(BaseModel):
    found: bool
    matches: List[InternetMatch] = Field(default_factory=list)
    totalResults: int = 0
    searchQuery: str = ""
    searched: bool = False  # False when no search request was issued


class InternetMatchSummary(BaseModel):
    overallSimilarity: float
    highestMatch: Optional[InternetMatch] = None
    isPlagiarized: bool


class PlagiarismMatch(BaseModel):
    snippetId: str
    title: str
    author: str
    similarity: float  # 0–1
    explanation: str
    provenance: Provenance = "database"
    sourceUrl: Optional[str] = None


class PlagiarismVerdict(BaseModel):
    isPlagiarized: bool
    similarity: float  # 0–1
    status: Status
    message: str
    matches: List[PlagiarismMatch] = Field(default_factory=list)
    analysis: Optional[str] = None
    aiPowered: bool
    internetSearched: bool


# ---- HTTP bodies ----

class DetectPlagiarismRequest(BaseModel):
    code: str
    language: Optional[str] = None
    excludeAuthorId: Optional[str] = None


class InternetSearchRequest(BaseModel):
    code: str
    language: Optional[str] = None


class InternetSearchResponse(BaseModel):
    result: InternetSearchResult
    summary: InternetMatchSummary
