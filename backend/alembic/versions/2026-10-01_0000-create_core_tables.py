"""create users, articles and saved_summaries

Revision ID: 4b1d2c7e9a10
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1d2c7e9a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False, comment='Auto-incrementing primary key'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was last updated (UTC)'),
    ]


def upgrade() -> None:
    """
    Create the initial schema.

    Tables:
    1. users - accounts, reset-token state, saved summary id list
    2. articles - canonical articles, unique on url
    3. saved_summaries - per-user saves, unique on (user_id, article_id)
    """

    # ================================
    # users
    # ================================
    op.create_table(
        'users',
        *_timestamps(),
        sa.Column('name', sa.String(length=100), nullable=False, comment='Display name'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Login email address. Must be unique.'),
        sa.Column('hashed_password', sa.String(length=255), nullable=False, comment='bcrypt password hash'),
        sa.Column('preferences', sa.JSON(), nullable=False, comment='Free-form client preferences (categories, theme, ...)'),
        sa.Column('reset_token_hash', sa.String(length=64), nullable=True, comment='SHA-256 hex digest of the pending password reset token'),
        sa.Column('reset_token_expires_at', sa.DateTime(timezone=True), nullable=True, comment='When the pending reset token stops being accepted (UTC)'),
        sa.Column('saved_summary_ids', sa.JSON(), nullable=False, comment="Ordered ids of the user's saved summaries"),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_reset_token_hash'), 'users', ['reset_token_hash'], unique=False)

    # ================================
    # articles
    # ================================
    op.create_table(
        'articles',
        *_timestamps(),
        sa.Column('title', sa.Text(), nullable=False, comment='Headline'),
        sa.Column('description', sa.Text(), nullable=False, comment='Short description or standfirst'),
        sa.Column('content', sa.Text(), nullable=True, comment='Article body as supplied by the provider (often truncated)'),
        sa.Column('url', sa.String(length=2048), nullable=False, comment='Canonical source URL. Deduplication key.'),
        sa.Column('image_url', sa.String(length=2048), nullable=True, comment='Lead image URL (provider-supplied or fallback)'),
        sa.Column('source_name', sa.String(length=255), nullable=True, comment='Publisher display name'),
        sa.Column('source_id', sa.String(length=255), nullable=False, comment='Provider identifier of the publisher'),
        sa.Column('category', sa.String(length=50), nullable=False, comment='Topic category (see ArticleCategory)'),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=False, comment='Publication time (UTC)'),
        sa.Column('ai_summary', sa.Text(), nullable=True, comment='Generated 2-3 sentence summary'),
        sa.Column('summary_generated_at', sa.DateTime(timezone=True), nullable=True, comment='When ai_summary was generated (UTC)'),
        sa.Column('read_time', sa.Integer(), nullable=False, comment='Estimated read time in minutes'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_articles')),
        sa.UniqueConstraint('url', name=op.f('uq_articles_url')),
    )
    op.create_index('ix_articles_category_published_at', 'articles', ['category', 'published_at'], unique=False)

    # ================================
    # saved_summaries
    # ================================
    op.create_table(
        'saved_summaries',
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Owning user'),
        sa.Column('article_id', sa.Integer(), nullable=False, comment='Saved article'),
        sa.Column('summary', sa.Text(), nullable=False, comment='Summary text snapshot taken at save time'),
        sa.Column('notes', sa.Text(), nullable=False, comment='User notes'),
        sa.Column('tags', sa.JSON(), nullable=False, comment='User tags'),
        sa.Column('saved_at', sa.DateTime(timezone=True), nullable=False, comment='When the article was saved (UTC)'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_saved_summaries_user_id_users'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['article_id'], ['articles.id'], name=op.f('fk_saved_summaries_article_id_articles'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_saved_summaries')),
        sa.UniqueConstraint('user_id', 'article_id', name='uq_saved_summaries_user_article'),
    )
    op.create_index(op.f('ix_saved_summaries_user_id'), 'saved_summaries', ['user_id'], unique=False)
    op.create_index(op.f('ix_saved_summaries_article_id'), 'saved_summaries', ['article_id'], unique=False)


def downgrade() -> None:
    """Drop everything created in upgrade(), children first."""
    op.drop_index(op.f('ix_saved_summaries_article_id'), table_name='saved_summaries')
    op.drop_index(op.f('ix_saved_summaries_user_id'), table_name='saved_summaries')
    op.drop_table('saved_summaries')

    op.drop_index('ix_articles_category_published_at', table_name='articles')
    op.drop_table('articles')

    op.drop_index(op.f('ix_users_reset_token_hash'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
