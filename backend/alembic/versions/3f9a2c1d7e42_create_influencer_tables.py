"""create users, influencers, notes and import tables

Revision ID: 3f9a2c1d7e42
Revises:
Create Date: 2025-11-03 10:12:44.512309

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import UUID, ARRAY, JSONB


# revision identifiers, used by Alembic.
revision = '3f9a2c1d7e42'
down_revision = None
branch_labels = None
depends_on = None

user_role = postgresql.ENUM('admin', 'staff', name='user_role', create_type=False)
platform = postgresql.ENUM('instagram', 'youtube', 'tiktok', 'threads', 'other', name='platform', create_type=False)
influencer_status = postgresql.ENUM('candidate', 'active', 'blacklist', name='influencer_status', create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    user_role.create(bind, checkfirst=True)
    platform.create(bind, checkfirst=True)
    influencer_status.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('clerk_user_id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('username', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False, server_default='staff'),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_clerk_user_id', 'users', ['clerk_user_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('idx_users_role', 'users', ['role'])

    op.create_table(
        'influencers',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('platform', platform, nullable=False),
        sa.Column('handle', sa.String(), nullable=False),
        sa.Column('profile_url', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('languages', ARRAY(sa.Text()), nullable=True),
        sa.Column('followers', sa.Integer(), nullable=True),
        sa.Column('avg_likes', sa.Integer(), nullable=True),
        sa.Column('avg_comments', sa.Integer(), nullable=True),
        sa.Column('avg_shares', sa.Integer(), nullable=True),
        sa.Column('engagement_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('main_category', sa.String(), nullable=True),
        sa.Column('sub_categories', ARRAY(sa.Text()), nullable=True),
        sa.Column('collab_types', ARRAY(sa.Text()), nullable=True),
        sa.Column('tags', ARRAY(sa.Text()), nullable=True),
        sa.Column('base_price_text', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_dm', sa.String(), nullable=True),
        sa.Column('notes_summary', sa.Text(), nullable=True),
        sa.Column('status', influencer_status, nullable=False, server_default='candidate'),
        sa.Column('created_by', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_influencers_platform', 'influencers', ['platform'])
    op.create_index('ix_influencers_handle', 'influencers', ['handle'])
    op.create_index('ix_influencers_country', 'influencers', ['country'])
    op.create_index('ix_influencers_followers', 'influencers', ['followers'])
    op.create_index('ix_influencers_main_category', 'influencers', ['main_category'])
    op.create_index('ix_influencers_status', 'influencers', ['status'])
    op.create_index('ix_influencers_created_at', 'influencers', ['created_at'])
    op.create_index('ix_influencers_engagement_rate', 'influencers', ['engagement_rate'])
    op.create_index('ix_influencers_platform_handle', 'influencers', ['platform', 'handle'])

    # GIN indexes for the && (overlap) filters
    op.execute('CREATE INDEX ix_influencers_collab_types_gin ON influencers USING GIN (collab_types)')
    op.execute('CREATE INDEX ix_influencers_tags_gin ON influencers USING GIN (tags)')

    op.create_table(
        'influencer_notes',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('influencer_id', UUID(as_uuid=True), sa.ForeignKey('influencers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_influencer_notes_influencer_id', 'influencer_notes', ['influencer_id'])
    op.create_index('ix_influencer_notes_influencer_created', 'influencer_notes', ['influencer_id', 'created_at'])

    op.create_table(
        'import_batches',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('uploaded_by', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('total_rows', sa.Integer(), nullable=False),
        sa.Column('success_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('error_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_import_batches_uploaded_by', 'import_batches', ['uploaded_by'])
    op.create_index('ix_import_batches_created_at', 'import_batches', ['created_at'])

    op.create_table(
        'import_errors',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('batch_id', UUID(as_uuid=True), sa.ForeignKey('import_batches.id', ondelete='CASCADE'), nullable=False),
        sa.Column('row_index', sa.Integer(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=False),
        sa.Column('raw_data', JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_import_errors_batch_row', 'import_errors', ['batch_id', 'row_index'])


def downgrade() -> None:
    op.drop_table('import_errors')
    op.drop_table('import_batches')
    op.drop_table('influencer_notes')
    op.drop_table('influencers')
    op.drop_table('users')

    bind = op.get_bind()
    influencer_status.drop(bind, checkfirst=True)
    platform.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
