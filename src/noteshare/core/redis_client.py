"""Redis client backing the note search index.

For every indexed word the note id is added to one set per word prefix
(``search:prefix:<p>``), so a query term is a single set lookup. What counts
as a match is defined in ``text_match``.
"""

import json
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

import redis.asyncio as redis

from ..config import get_settings
from .text_match import indexable_words, prefixes, query_terms

logger = logging.getLogger(__name__)

PUBLIC_KEY = "search:public"


def _note_key(note_id) -> str:
    return f"search:note:{note_id}"


def _prefix_key(prefix: str) -> str:
    return f"search:prefix:{prefix}"


def _prefix_keys(words: List[str]) -> List[str]:
    return sorted({_prefix_key(p) for word in words for p in prefixes(word)})


def _author_key(author_id) -> str:
    return f"search:author:{author_id}"


class RedisClient:
    """Word-prefix index over note content with public/author filter sets.

    Every method is best effort: when Redis is not connected or a command
    fails, writes return False and searches return an empty list.
    """

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.redis = redis.from_url(
                self.settings.redis_url,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
            )
            # Test connection
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            self.redis = None
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        return bool(await self.redis.ping())

    async def index_note_for_search(
        self,
        note_id: UUID,
        content: str,
        is_public: bool,
        author_id: UUID,
        created_at: datetime,
    ) -> bool:
        """(Re)index a note's content and filter fields."""
        if not self.redis:
            return False
        try:
            # drop stale words and filter memberships first
            await self._unindex(str(note_id))

            words = indexable_words(content)
            search_doc = {
                "id": str(note_id),
                "words": words,
                "is_public": bool(is_public),
                "author_id": str(author_id),
                "created_at": created_at.timestamp() if created_at else 0.0,
            }
            ttl = self.settings.search_index_ttl_seconds

            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(_note_key(note_id), json.dumps(search_doc), ex=ttl)
                for key in _prefix_keys(words):
                    pipe.sadd(key, str(note_id))
                    pipe.expire(key, ttl)
                if is_public:
                    pipe.sadd(PUBLIC_KEY, str(note_id))
                pipe.sadd(_author_key(author_id), str(note_id))
                pipe.expire(_author_key(author_id), ttl)
                await pipe.execute()

            logger.debug(f"Indexed note {note_id} for search with {len(words)} words")
            return True

        except Exception as e:
            logger.warning(f"Failed to index note {note_id} for search: {e}")
            return False

    async def remove_note_from_search(self, note_id: UUID) -> bool:
        """Remove note from the search index."""
        if not self.redis:
            return False
        try:
            await self._unindex(str(note_id))
            logger.debug(f"Removed note {note_id} from search index")
            return True
        except Exception as e:
            logger.warning(f"Failed to remove note {note_id} from search index: {e}")
            return False

    async def _unindex(self, note_id: str) -> None:
        raw = await self.redis.get(_note_key(note_id))
        async with self.redis.pipeline(transaction=True) as pipe:
            if raw:
                doc = json.loads(raw)
                for key in _prefix_keys(doc.get("words", [])):
                    pipe.srem(key, note_id)
                if doc.get("author_id"):
                    pipe.srem(_author_key(doc["author_id"]), note_id)
            pipe.srem(PUBLIC_KEY, note_id)
            pipe.delete(_note_key(note_id))
            await pipe.execute()

    async def search_notes(
        self,
        query: str,
        is_public: Optional[bool] = None,
        author_id: Optional[UUID] = None,
        limit: int = 10,
    ) -> List[dict]:
        """Note ids matching any query term, best first.

        Ranked by number of matched terms, then by creation time (newest
        first). ``is_public`` and ``author_id`` restrict the candidates to
        the matching filter set.
        """
        if not self.redis:
            return []
        try:
            terms = query_terms(query)
            if not terms:
                return []

            hits = {}
            for term in terms:
                for note_id in await self.redis.smembers(_prefix_key(term)):
                    hits[note_id] = hits.get(note_id, 0) + 1
            if not hits:
                return []

            candidates = set(hits)
            if is_public is True:
                candidates &= set(await self.redis.smembers(PUBLIC_KEY))
            elif is_public is False:
                candidates -= set(await self.redis.smembers(PUBLIC_KEY))
            if author_id is not None:
                candidates &= set(await self.redis.smembers(_author_key(author_id)))

            results = []
            for note_id in candidates:
                raw = await self.redis.get(_note_key(note_id))
                if not raw:
                    continue  # expired document, prefix set entry is stale
                doc = json.loads(raw)
                results.append({
                    "note_id": note_id,
                    "score": hits[note_id],
                    "created_at": doc.get("created_at", 0.0),
                })

            results.sort(key=lambda r: (r["score"], r["created_at"]), reverse=True)
            return results[:limit]

        except Exception as e:
            logger.warning(f"Redis search failed: {e}")
            return []


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
