"""Create users, notes and shares tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2025-10-02 09:14:05.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from noteshare.core.models.types import GUID


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('name IS NULL OR length(name) <= 100', name='ck_users_name_len'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'notes',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('author_id', GUID(), nullable=False),
        sa.Column('last_edited_by_id', GUID(), nullable=True),
        sa.Column('last_edited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['last_edited_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notes_author_id', 'notes', ['author_id'])
    op.create_index('idx_notes_is_public', 'notes', ['is_public'])
    op.create_index('idx_notes_created_at', 'notes', ['created_at'])
    op.create_index('idx_notes_author_created', 'notes', ['author_id', 'created_at'])
    op.create_index('idx_notes_public_created', 'notes', ['is_public', 'created_at'])

    op.create_table(
        'shares',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('note_id', GUID(), nullable=False),
        sa.Column('shared_with_id', GUID(), nullable=False),
        sa.Column('shared_by_id', GUID(), nullable=False),
        sa.Column('permission', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("permission IN ('read', 'write')", name='ck_shares_permission'),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shared_with_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shared_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('note_id', 'shared_with_id', name='uq_shares_note_recipient'),
    )
    op.create_index('idx_shares_note_id', 'shares', ['note_id'])
    op.create_index('idx_shares_shared_with', 'shares', ['shared_with_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_shares_shared_with', table_name='shares')
    op.drop_index('idx_shares_note_id', table_name='shares')
    op.drop_table('shares')
    op.drop_index('idx_notes_public_created', table_name='notes')
    op.drop_index('idx_notes_author_created', table_name='notes')
    op.drop_index('idx_notes_created_at', table_name='notes')
    op.drop_index('idx_notes_is_public', table_name='notes')
    op.drop_index('idx_notes_author_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_table('users')
