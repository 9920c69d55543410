"""Initial schema: users, books, tags, book_tags

Revision ID: 3f9c2a7d1e04
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1e04'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Lower-cased email address (used for login)'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='bcrypt hash of the password'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the user registered'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Owning user'),
        sa.Column('open_library_key', sa.String(length=100), nullable=True, comment='Open Library work key, e.g. /works/OL45804W'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Book title'),
        sa.Column('authors', sa.JSON(), nullable=False, comment='Ordered author names'),
        sa.Column('publication_year', sa.Integer(), nullable=True, comment='Year of first publication'),
        sa.Column('isbn_13', sa.String(length=20), nullable=True, comment='ISBN-13 (free form, as supplied)'),
        sa.Column('genres', sa.JSON(), nullable=False, comment='Ordered genre/subject names'),
        sa.Column('cover_url', sa.Text(), nullable=True, comment='Cover image URL'),
        sa.Column('status', sa.String(length=20), server_default='unread', nullable=False, comment='unread, in_progress or completed'),
        sa.Column('rating', sa.Integer(), nullable=True, comment='Personal rating 1-5'),
        sa.Column('notes', sa.Text(), nullable=True, comment='Personal notes'),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the book was added to the shelf'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_books_user_id'), 'books', ['user_id'], unique=False)
    op.create_index('idx_books_user_status', 'books', ['user_id', 'status'], unique=False)

    op.create_table('tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Owning user'),
        sa.Column('name', sa.String(length=50), nullable=False, comment='Tag name, unique per user'),
        sa.Column('color', sa.String(length=7), server_default='#6366f1', nullable=False, comment='Hex colour #RRGGBB'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name', name='uq_tags_user_name')
    )
    op.create_index(op.f('ix_tags_user_id'), 'tags', ['user_id'], unique=False)

    op.create_table('book_tags',
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('book_id', 'tag_id')
    )


def downgrade() -> None:
    op.drop_table('book_tags')
    op.drop_index(op.f('ix_tags_user_id'), table_name='tags')
    op.drop_table('tags')
    op.drop_index('idx_books_user_status', table_name='books')
    op.drop_index(op.f('ix_books_user_id'), table_name='books')
    op.drop_table('books')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
