"""Note service tests with mocked repositories, focused on call flow."""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from noteshare.core.exceptions import AuthorizationError
from noteshare.core.schemas.notes import NoteCreate, NoteUpdate
from noteshare.core.services.note_service import NoteService


def fake_note(author_id, is_public=False, **overrides):
    now = datetime.now(timezone.utc)
    values = dict(
        id=uuid.uuid4(),
        title="Title",
        content="content",
        is_public=is_public,
        author_id=author_id,
        last_edited_by_id=None,
        last_edited_at=now,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    note = SimpleNamespace(**values)
    note.is_owned_by = lambda user_id: user_id is not None and user_id == note.author_id
    return note


class TestNoteServiceMocked:
    @pytest.fixture
    def mock_session(self):
        return AsyncMock()

    @pytest.fixture
    def note_service(self, mock_session):
        service = NoteService(mock_session)
        service.note_repo = AsyncMock()
        service.share_repo = AsyncMock()
        service.user_repo = AsyncMock()
        service.resolver = AsyncMock()
        service.redis_client = AsyncMock()
        return service

    @pytest.fixture
    def owner_id(self):
        return uuid.uuid4()

    async def test_create_commits_then_indexes(self, note_service, mock_session, owner_id):
        created = fake_note(owner_id, is_public=True)
        note_service.note_repo.create_note.return_value = created

        note_id = await note_service.create_note(owner_id, NoteCreate(title="Title"))

        assert note_id == created.id
        data = note_service.note_repo.create_note.await_args.args[0]
        assert data["author_id"] == owner_id
        assert data["content"] == ""
        assert data["is_public"] is True
        mock_session.commit.assert_awaited_once()
        note_service.redis_client.index_note_for_search.assert_awaited_once_with(
            created.id, created.content, True, owner_id, created.created_at
        )

    async def test_failed_update_rolls_back_and_skips_index(self, note_service, mock_session, owner_id):
        note = fake_note(owner_id)
        note_service.note_repo.get_for_update.return_value = note
        note_service.resolver.resolve.return_value = SimpleNamespace(visible=True, can_edit=False)

        with pytest.raises(AuthorizationError):
            await note_service.update_note(uuid.uuid4(), note.id, NoteUpdate(title="x"))

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
        note_service.note_repo.update_note.assert_not_awaited()
        note_service.redis_client.index_note_for_search.assert_not_awaited()

    async def test_update_by_editor_drops_visibility(self, note_service, owner_id):
        editor_id = uuid.uuid4()
        note = fake_note(owner_id)
        note_service.note_repo.get_for_update.return_value = note
        note_service.resolver.resolve.return_value = SimpleNamespace(visible=True, can_edit=True)

        await note_service.update_note(editor_id, note.id, NoteUpdate(content="new", is_public=True))

        _, data = note_service.note_repo.update_note.await_args.args
        assert data["content"] == "new"
        assert "is_public" not in data
        assert "title" not in data
        assert data["last_edited_by_id"] == editor_id

    async def test_delete_removes_from_index_after_commit(self, note_service, mock_session, owner_id):
        note = fake_note(owner_id)
        note_service.note_repo.get_for_update.return_value = note
        note_service.note_repo.delete_note.return_value = 2

        await note_service.delete_note(owner_id, note.id)

        note_service.note_repo.delete_note.assert_awaited_once_with(note)
        mock_session.commit.assert_awaited_once()
        note_service.redis_client.remove_note_from_search.assert_awaited_once_with(note.id)

    async def test_list_shared_skips_shares_without_note(self, note_service, owner_id):
        reader_id = uuid.uuid4()
        note = fake_note(owner_id)
        note_service.share_repo.list_for_user.return_value = [
            SimpleNamespace(note_id=note.id, permission="read"),
            SimpleNamespace(note_id=uuid.uuid4(), permission="write"),
        ]
        note_service.note_repo.get_many.return_value = [note]
        note_service.user_repo.get_many.return_value = {}

        shared = await note_service.list_shared(reader_id)

        assert [n.id for n in shared] == [note.id]
        assert shared[0].author_name == "Unknown"
        assert shared[0].permission == "read"

    async def test_list_public_clamps_limit(self, note_service):
        note_service.note_repo.list_public.return_value = []
        note_service.user_repo.get_many.return_value = {}

        await note_service.list_public(10_000)

        note_service.note_repo.list_public.assert_awaited_once_with(
            note_service.settings.max_page_size
        )
