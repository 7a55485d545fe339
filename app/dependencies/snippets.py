import logging
from typing import Dict, List, Optional

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient

from app.config import MONGODB_DB, SNIPPETS_COLLECTION
from app.dependencies.auth import get_mongo_client
from app.schemas.plagiarism_schemas import ExistingSnippet

logger = logging.getLogger("plagiarism.snippets")

_PROJECTION = {"_id": 1, "id": 1, "title": 1, "code": 1, "author": 1}


def build_snippet_filter(language: Optional[str] = None, exclude_author_id: Optional[str] = None) -> Dict:
    query: Dict = {}
    if language:
        query["language"] = language
    if exclude_author_id:
        query["authorId"] = {"$ne": exclude_author_id}
    return query


def snippet_from_document(doc: Dict) -> ExistingSnippet:
    return ExistingSnippet(
        id=str(doc.get("id") or doc.get("_id")),
        title=doc.get("title") or "Untitled",
        code=doc.get("code") or "",
        author=doc.get("author") or "Unknown",
    )


class SnippetRepository:
    """Read-only access to published snippets used as the local comparison set."""

    def __init__(self, collection):
        self.collection = collection

    async def list_for_comparison(
        self,
        language: Optional[str] = None,
        exclude_author_id: Optional[str] = None,
    ) -> List[ExistingSnippet]:
        query = build_snippet_filter(language, exclude_author_id)
        try:
            docs = await self.collection.find(query, _PROJECTION).to_list(length=None)
        except Exception as e:
            logger.error(f"❌ Failed to fetch snippets for comparison: {e}")
            return []
        return [snippet_from_document(d) for d in docs]


async def get_snippet_repository(client: AsyncIOMotorClient = Depends(get_mongo_client)) -> SnippetRepository:
    return SnippetRepository(client[MONGODB_DB][SNIPPETS_COLLECTION])
