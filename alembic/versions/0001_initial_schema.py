"""initial cinema schema: users, movies, series, posters, reviews

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-03 10:12:44.218301

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MOVIE_OR_SERIES = (
    "(movie_id IS NOT NULL AND series_id IS NULL) "
    "OR (movie_id IS NULL AND series_id IS NOT NULL)"
)


def upgrade() -> None:
    op.create_table('users',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('role', sa.Enum('User', 'Admin', name='user_role', native_enum=False, length=16), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id', name='users_pkey'),
    sa.UniqueConstraint('email', name='users_email_key'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    op.create_table('movies',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('title', sa.String(length=200), nullable=False),
    sa.Column('director', sa.String(length=100), nullable=False),
    sa.Column('genre', sa.String(length=100), nullable=False),
    sa.Column('release_year', sa.Integer(), nullable=True),
    sa.Column('box_office', sa.Numeric(precision=18, scale=2), nullable=True),
    sa.Column('average_rating', sa.Float(), server_default=sa.text('0'), nullable=False),
    sa.PrimaryKeyConstraint('id', name='movies_pkey'),
    )
    op.create_index('ix_movies_title', 'movies', ['title'], unique=False)
    op.create_index('ix_movies_genre', 'movies', ['genre'], unique=False)

    op.create_table('series',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('title', sa.String(length=200), nullable=False),
    sa.Column('genre', sa.String(length=100), nullable=False),
    sa.Column('seasons', sa.Integer(), nullable=True),
    sa.Column('average_rating', sa.Float(), server_default=sa.text('0'), nullable=False),
    sa.PrimaryKeyConstraint('id', name='series_pkey'),
    )
    op.create_index('ix_series_title', 'series', ['title'], unique=False)
    op.create_index('ix_series_genre', 'series', ['genre'], unique=False)

    op.create_table('posters',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('url', sa.Text(), nullable=False),
    sa.Column('mime_type', sa.String(length=100), nullable=False),
    sa.Column('movie_id', sa.Integer(), nullable=True),
    sa.Column('series_id', sa.Integer(), nullable=True),
    sa.ForeignKeyConstraint(['movie_id'], ['movies.id'], name='posters_movie_id_fkey', ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['series_id'], ['series.id'], name='posters_series_id_fkey', ondelete='CASCADE'),
    sa.CheckConstraint(MOVIE_OR_SERIES, name='ck_posters_movie_or_series'),
    sa.PrimaryKeyConstraint('id', name='posters_pkey'),
    )
    op.create_index('ix_posters_movie_id', 'posters', ['movie_id'], unique=False)
    op.create_index('ix_posters_series_id', 'posters', ['series_id'], unique=False)

    op.create_table('reviews',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('movie_id', sa.Integer(), nullable=True),
    sa.Column('series_id', sa.Integer(), nullable=True),
    sa.Column('text', sa.String(length=2000), nullable=False),
    sa.Column('rating', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='reviews_user_id_fkey', ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['movie_id'], ['movies.id'], name='reviews_movie_id_fkey', ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['series_id'], ['series.id'], name='reviews_series_id_fkey', ondelete='CASCADE'),
    sa.CheckConstraint(MOVIE_OR_SERIES, name='ck_reviews_movie_or_series'),
    sa.PrimaryKeyConstraint('id', name='reviews_pkey'),
    )
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'], unique=False)
    op.create_index('ix_reviews_movie_id', 'reviews', ['movie_id'], unique=False)
    op.create_index('ix_reviews_series_id', 'reviews', ['series_id'], unique=False)
    op.create_index('ix_reviews_created_at', 'reviews', ['created_at'], unique=False)
    op.create_index(
        'uq_reviews_user_movie', 'reviews', ['user_id', 'movie_id'], unique=True,
        postgresql_where=sa.text('movie_id IS NOT NULL'),
        sqlite_where=sa.text('movie_id IS NOT NULL'),
    )
    op.create_index(
        'uq_reviews_user_series', 'reviews', ['user_id', 'series_id'], unique=True,
        postgresql_where=sa.text('series_id IS NOT NULL'),
        sqlite_where=sa.text('series_id IS NOT NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_reviews_user_series', table_name='reviews')
    op.drop_index('uq_reviews_user_movie', table_name='reviews')
    op.drop_index('ix_reviews_created_at', table_name='reviews')
    op.drop_index('ix_reviews_series_id', table_name='reviews')
    op.drop_index('ix_reviews_movie_id', table_name='reviews')
    op.drop_index('ix_reviews_user_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_index('ix_posters_series_id', table_name='posters')
    op.drop_index('ix_posters_movie_id', table_name='posters')
    op.drop_table('posters')
    op.drop_index('ix_series_genre', table_name='series')
    op.drop_index('ix_series_title', table_name='series')
    op.drop_table('series')
    op.drop_index('ix_movies_genre', table_name='movies')
    op.drop_index('ix_movies_title', table_name='movies')
    op.drop_table('movies')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
