"""Search service implementation.

Two scoped searches (public notes, then the requester's own notes) are run
separately and merged here, since the index only filters on one equality
field per query.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..access import ANONYMOUS, YOU, display_name
from ..models.note import Note
from ..redis_client import get_redis_client
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import NoteWithAuthor
from ..text_match import match_score, query_terms
from .interfaces import ISearchService
from .note_service import note_fields

logger = logging.getLogger(__name__)


def merge_scopes(scopes: List[List[Note]], limit: int) -> List[Note]:
    """Concatenate scope results, keep the first occurrence of each note, cap at ``limit``."""
    seen = set()
    merged = []
    for notes in scopes:
        for note in notes:
            if note.id in seen:
                continue
            seen.add(note.id)
            merged.append(note)
    return merged[:limit]


class SearchService(ISearchService):
    """Search service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.note_repo = NoteRepository(session)
        self.user_repo = UserRepository(session)
        self.redis_client = get_redis_client()

    async def search_notes(self, requester_id: Optional[UUID], query: str) -> List[NoteWithAuthor]:
        """Search public notes and, when signed in, the requester's own notes."""
        query = (query or "").strip()
        if not query_terms(query):
            return []

        limit = self.settings.search_result_limit
        scopes = [await self._search_scope(query, is_public=True, limit=limit)]
        if requester_id is not None:
            scopes.append(await self._search_scope(query, author_id=requester_id, limit=limit))

        notes = merge_scopes(scopes, limit)
        authors = await self.user_repo.get_many(
            [note.author_id for note in notes if note.author_id != requester_id]
        )
        return [
            NoteWithAuthor(
                **note_fields(note),
                author_name=self._author_label(note, requester_id, authors.get(note.author_id)),
            )
            for note in notes
        ]

    async def _search_scope(
        self,
        query: str,
        is_public: Optional[bool] = None,
        author_id: Optional[UUID] = None,
        limit: int = 10,
    ) -> List[Note]:
        """One scope: index-ranked hits first, then database matches not already listed.

        The index can miss notes (written while Redis was down, or expired),
        so the database query always runs and the index only adds ranking.
        """
        hits = await self.redis_client.search_notes(
            query, is_public=is_public, author_id=author_id, limit=limit
        )
        ranked = await self._load_hits(hits, query_terms(query), is_public, author_id) if hits else []
        matched = await self.note_repo.search_notes(
            query, is_public=is_public, author_id=author_id, limit=limit
        )
        logger.debug(f"Scope search: {len(ranked)} index hits, {len(matched)} database matches")
        return merge_scopes([ranked, matched], limit)

    async def _load_hits(
        self,
        hits: List[dict],
        terms: List[str],
        is_public: Optional[bool],
        author_id: Optional[UUID],
    ) -> List[Note]:
        """Fetch index hits from the database, in index order.

        Hits whose row is gone, no longer passes the scope filter, or whose
        current content no longer matches (a stale index entry) are dropped.
        """
        ids = []
        for hit in hits:
            try:
                ids.append(UUID(hit["note_id"]))
            except (KeyError, ValueError):
                logger.warning(f"Ignoring malformed search hit: {hit!r}")

        by_id = {note.id: note for note in await self.note_repo.get_many(ids)}
        notes = []
        for note_id in ids:
            note = by_id.get(note_id)
            if note is None:
                continue
            if is_public is not None and note.is_public != is_public:
                continue
            if author_id is not None and note.author_id != author_id:
                continue
            if not match_score(terms, note.content):
                continue
            notes.append(note)
        return notes

    @staticmethod
    def _author_label(note: Note, requester_id: Optional[UUID], author) -> str:
        if requester_id is not None and note.author_id == requester_id:
            return YOU
        return display_name(author, ANONYMOUS)
