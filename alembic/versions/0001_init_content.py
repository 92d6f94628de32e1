from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '0001_init_content'
down_revision = None
branch_labels = None
depends_on = None

UUID = postgresql.UUID(as_uuid=True)


def _id():
    return sa.Column('id', UUID, primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def _owner():
    return sa.Column('user_id', UUID, sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)


def upgrade():
    op.execute('CREATE EXTENSION IF NOT EXISTS pgcrypto')

    op.create_table(
        'profiles',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        _created_at(),
    )

    op.create_table(
        'ads',
        _id(),
        _owner(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('brand', sa.String(), nullable=True),
        sa.Column('media_url', sa.String(), nullable=True),
        sa.Column('shop_url', sa.String(), nullable=True),
        _created_at(),
    )

    op.create_table(
        'remixes',
        _id(),
        _owner(),
        sa.Column('ad_id', UUID, sa.ForeignKey('ads.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('media_url', sa.String(), nullable=True),
        _created_at(),
    )

    op.create_table(
        'surveys',
        _id(),
        _owner(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('brand', sa.String(), nullable=True),
        sa.Column('media_url', sa.String(), nullable=True),
        sa.Column('questions', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        _created_at(),
    )

    for table in ('ads', 'remixes', 'surveys'):
        op.create_index(f'ix_{table}_user_id', table, ['user_id'])
        op.create_index(f'ix_{table}_created_at', table, ['created_at'])
    op.create_index('ix_remixes_ad_id', 'remixes', ['ad_id'])

    op.create_table(
        'likes',
        _id(),
        _owner(),
        sa.Column('content_type', sa.String(16), nullable=False),
        sa.Column('content_id', UUID, nullable=False),
        _created_at(),
        sa.UniqueConstraint('user_id', 'content_type', 'content_id', name='uq_like_once'),
    )
    op.create_index('ix_likes_user_id', 'likes', ['user_id'])

    op.create_table(
        'comments',
        _id(),
        _owner(),
        sa.Column('content_type', sa.String(16), nullable=False),
        sa.Column('content_id', UUID, nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index('ix_comments_user_id', 'comments', ['user_id'])
    op.create_index('ix_comments_content_id', 'comments', ['content_id'])

    op.create_table(
        'reviews',
        _id(),
        _owner(),
        sa.Column('ad_id', UUID, sa.ForeignKey('ads.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        _created_at(),
        sa.UniqueConstraint('ad_id', 'user_id', name='uq_review_per_user'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_review_rating'),
    )
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])
    op.create_index('ix_reviews_ad_id', 'reviews', ['ad_id'])

    op.create_table(
        'survey_responses',
        _id(),
        sa.Column('survey_id', UUID, sa.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False),
        _owner(),
        sa.Column('answers', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.UniqueConstraint('survey_id', 'user_id', name='uq_survey_response_per_user'),
    )
    op.create_index('ix_survey_responses_survey_id', 'survey_responses', ['survey_id'])
    op.create_index('ix_survey_responses_user_id', 'survey_responses', ['user_id'])


def downgrade():
    op.drop_table('survey_responses')
    op.drop_table('reviews')
    op.drop_table('comments')
    op.drop_table('likes')
    op.drop_table('surveys')
    op.drop_table('remixes')
    op.drop_table('ads')
    op.drop_table('profiles')
