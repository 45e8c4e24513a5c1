"""Search aggregation tests: scopes, dedupe, labels, index and fallback paths."""

import uuid
from types import SimpleNamespace

import pytest

from noteshare.core.redis_client import RedisClient
from noteshare.core.services.search_service import SearchService, merge_scopes


def test_merge_scopes_keeps_first_occurrence_and_caps():
    a, b, c = (SimpleNamespace(id=uuid.uuid4()) for _ in range(3))

    merged = merge_scopes([[a, b], [b, c, a]], limit=10)
    assert merged == [a, b, c]

    assert merge_scopes([[a, b], [c]], limit=2) == [a, b]


class TestDatabaseFallback:
    """Redis not connected: every scope is answered by the database."""

    async def test_blank_query_returns_nothing(self, session, owner, make_note):
        await make_note(owner, content="foo", is_public=True)
        service = SearchService(session)
        assert await service.search_notes(None, "") == []
        assert await service.search_notes(owner.id, "   ") == []

    async def test_anonymous_sees_only_public_matches(self, session, owner, make_note):
        public = await make_note(owner, content="foo bar", is_public=True)
        await make_note(owner, content="foo private", is_public=False)
        await make_note(owner, content="nothing here", is_public=True)

        results = await SearchService(session).search_notes(None, "foo")

        assert [r.id for r in results] == [public.id]
        assert results[0].author_name == "Olivia Owner"

    async def test_authenticated_merges_public_and_own(
        self, session, owner, reader, make_note
    ):
        own_private = await make_note(reader, content="foo mine", is_public=False, age_minutes=1)
        own_public = await make_note(reader, content="foo shared with world", is_public=True, age_minutes=2)
        others_public = await make_note(owner, content="foo by owner", is_public=True, age_minutes=3)
        await make_note(owner, content="foo owner private", is_public=False)

        results = await SearchService(session).search_notes(reader.id, "foo")

        ids = [r.id for r in results]
        # public scope first (newest first), then own notes not already present
        assert ids == [own_public.id, others_public.id, own_private.id]
        labels = {r.id: r.author_name for r in results}
        assert labels[own_public.id] == "You"
        assert labels[own_private.id] == "You"
        assert labels[others_public.id] == "Olivia Owner"

    async def test_results_capped_at_ten_without_duplicates(self, session, owner, make_note):
        for i in range(8):
            await make_note(owner, content=f"foo public {i}", is_public=True, age_minutes=i)
        for i in range(8):
            await make_note(owner, content=f"foo private {i}", is_public=False, age_minutes=i)

        results = await SearchService(session).search_notes(owner.id, "foo")

        ids = [r.id for r in results]
        assert len(ids) == 10
        assert len(set(ids)) == 10
        assert all(r.author_name == "You" for r in results)

    async def test_author_without_profile_is_anonymous(self, session, make_user, make_note):
        ghost = await make_user()
        await make_note(ghost, content="foo", is_public=True)

        results = await SearchService(session).search_notes(None, "foo")

        assert results[0].author_name == "Anonymous"

    async def test_like_wildcards_are_literal(self, session, owner, make_note):
        await make_note(owner, content="plain text", is_public=True)
        assert await SearchService(session).search_notes(None, "%") == []


class TestIndexedSearch:
    @pytest.fixture
    def index(self, fake_redis):
        client = RedisClient()
        client.redis = fake_redis
        return client

    async def index_note(self, index, note):
        await index.index_note_for_search(
            note.id, note.content, note.is_public, note.author_id, note.created_at
        )

    async def test_index_ranking_comes_first(self, session, owner, make_note, index):
        # newer note matches one term, older one matches both
        one_term = await make_note(owner, content="apple juice", is_public=True, age_minutes=1)
        both_terms = await make_note(owner, content="apple banana", is_public=True, age_minutes=5)
        await self.index_note(index, one_term)
        await self.index_note(index, both_terms)
        service = SearchService(session)
        service.redis_client = index

        results = await service.search_notes(None, "apple banana")

        assert [r.id for r in results] == [both_terms.id, one_term.id]

    async def test_unindexed_match_is_still_returned(self, session, owner, make_note, index):
        unindexed = await make_note(owner, content="quarterly report draft", is_public=True, age_minutes=5)
        indexed = await make_note(owner, content="report final", is_public=True)
        await self.index_note(index, indexed)
        service = SearchService(session)
        service.redis_client = index

        results = await service.search_notes(None, "report")

        assert [r.id for r in results] == [indexed.id, unindexed.id]

    async def test_same_matches_with_and_without_index(self, session, owner, make_note, index):
        notes = [
            await make_note(owner, content="reporting tools", is_public=True, age_minutes=2),
            await make_note(owner, content="report", is_public=True, age_minutes=1),
            await make_note(owner, content="unreported income", is_public=True),
        ]
        for note in notes:
            await self.index_note(index, note)

        database_only = await SearchService(session).search_notes(None, "report")
        service = SearchService(session)
        service.redis_client = index
        with_index = await service.search_notes(None, "report")

        expected = {notes[0].id, notes[1].id}
        assert {r.id for r in database_only} == expected
        assert {r.id for r in with_index} == expected

    async def test_stale_hit_is_revalidated(self, session, owner, make_note, index):
        note = await make_note(owner, content="secret plans", is_public=True)
        await self.index_note(index, note)
        # visibility flipped in the database without reindexing
        note.is_public = False
        await session.commit()

        service = SearchService(session)
        service.redis_client = index

        assert await service.search_notes(None, "secret") == []

    async def test_stale_content_is_not_returned(self, session, owner, make_note, index):
        note = await make_note(owner, content="lunch menu", is_public=True)
        await self.index_note(index, note)
        note.content = "dinner menu"
        await session.commit()

        service = SearchService(session)
        service.redis_client = index

        assert await service.search_notes(None, "lunch") == []

    async def test_empty_index_uses_database(self, session, owner, make_note, index):
        note = await make_note(owner, content="never indexed", is_public=True)
        service = SearchService(session)
        service.redis_client = index

        results = await service.search_notes(None, "indexed")

        assert [r.id for r in results] == [note.id]

    async def test_two_letter_terms_match(self, session, owner, make_note, index):
        note = await make_note(owner, content="go to it", is_public=True)
        await self.index_note(index, note)
        service = SearchService(session)
        service.redis_client = index

        results = await service.search_notes(None, "go")

        assert [r.id for r in results] == [note.id]
        assert await service.search_notes(None, "g") == []
