"""initial schema

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-03-02 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c1d2e3f4a5b6'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('role', sa.String(length=32), nullable=False, server_default='creator'),
            sa.Column('age', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if "profiles" not in existing_tables:
        op.create_table(
            'profiles',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('username', sa.String(length=30), nullable=True),
            sa.Column('username_changed_at', sa.DateTime(), nullable=True),
            sa.Column('full_name', sa.String(length=120), nullable=True),
            sa.Column('bio', sa.Text(), nullable=True),
            sa.Column('avatar_url', sa.String(length=512), nullable=True),
            sa.Column('phone_number', sa.String(length=32), nullable=True),
            *_timestamps(),
        )
        op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
        op.create_index('ix_profiles_username', 'profiles', ['username'], unique=True)

    if "business_profiles" not in existing_tables:
        op.create_table(
            'business_profiles',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('company_name', sa.String(length=160), nullable=False, server_default=''),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('website', sa.String(length=255), nullable=True),
            sa.Column('industry', sa.String(length=120), nullable=True),
            sa.Column('target_audience', sa.String(length=255), nullable=True),
            sa.Column('brand_values', sa.String(length=255), nullable=True),
            sa.Column('logo_url', sa.String(length=512), nullable=True),
            sa.Column('organization_number', sa.String(length=32), nullable=True),
            sa.Column('vat_number', sa.String(length=32), nullable=True),
            sa.Column('phone_number', sa.String(length=32), nullable=True),
            sa.Column('address', sa.String(length=255), nullable=True),
            sa.Column('postal_code', sa.String(length=16), nullable=True),
            sa.Column('city', sa.String(length=80), nullable=True),
            sa.Column('country', sa.String(length=80), nullable=True),
            sa.Column('onboarding_complete', sa.Boolean(), nullable=False, server_default=sa.text('0')),
            *_timestamps(),
        )
        op.create_index('ix_business_profiles_user_id', 'business_profiles', ['user_id'], unique=True)

    if "tiktok_accounts" not in existing_tables:
        op.create_table(
            'tiktok_accounts',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('tiktok_user_id', sa.String(length=64), nullable=False),
            sa.Column('tiktok_username', sa.String(length=64), nullable=False),
            sa.Column('follower_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
            sa.Column('access_token', sa.Text(), nullable=True),
            sa.Column('refresh_token', sa.Text(), nullable=True),
            sa.Column('token_expires_at', sa.DateTime(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint('user_id', 'tiktok_user_id', name='uq_tiktok_accounts_user_tiktok'),
        )
        op.create_index('ix_tiktok_accounts_user_id', 'tiktok_accounts', ['user_id'])

    if "campaigns" not in existing_tables:
        op.create_table(
            'campaigns',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('business_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('brand_name', sa.String(length=160), nullable=False),
            sa.Column('brand_logo_url', sa.String(length=512), nullable=True),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('category', sa.String(length=120), nullable=True),
            sa.Column('product_visibility', sa.String(length=120), nullable=True),
            sa.Column('video_length', sa.String(length=64), nullable=True),
            sa.Column('cover_image_url', sa.String(length=512), nullable=True),
            sa.Column('example_image_urls', sa.JSON(), nullable=True),
            sa.Column('assets_urls', sa.JSON(), nullable=True),
            sa.Column('guidelines', sa.JSON(), nullable=True),
            sa.Column('total_budget', sa.Float(), nullable=True),
            sa.Column('max_earnings', sa.Float(), nullable=True),
            sa.Column('deadline', sa.DateTime(), nullable=True),
            sa.Column('status', sa.String(length=24), nullable=False, server_default='active'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
            *_timestamps(),
        )
        op.create_index('ix_campaigns_business_id', 'campaigns', ['business_id'])
        op.create_index('ix_campaigns_is_active', 'campaigns', ['is_active'])
        op.create_index('ix_campaigns_created_at', 'campaigns', ['created_at'])

    if "campaign_tiers" not in existing_tables:
        op.create_table(
            'campaign_tiers',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('campaign_id', sa.Integer(), sa.ForeignKey('campaigns.id'), nullable=False),
            sa.Column('min_views', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('max_views', sa.Integer(), nullable=True),
            sa.Column('rate_per_view', sa.Float(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        )
        op.create_index('ix_campaign_tiers_campaign_id', 'campaign_tiers', ['campaign_id'])

    if "content_submissions" not in existing_tables:
        op.create_table(
            'content_submissions',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('campaign_id', sa.Integer(), sa.ForeignKey('campaigns.id'), nullable=False),
            sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('tiktok_account_id', sa.Integer(), sa.ForeignKey('tiktok_accounts.id'), nullable=False),
            sa.Column('tiktok_video_url', sa.String(length=512), nullable=False),
            sa.Column('tiktok_video_id', sa.String(length=64), nullable=True),
            sa.Column('current_views', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('current_likes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('stats_refreshed_at', sa.DateTime(), nullable=True),
            sa.Column('status', sa.String(length=24), nullable=False, server_default='pending_review'),
            sa.Column('review_notes', sa.Text(), nullable=True),
            sa.Column('reviewed_at', sa.DateTime(), nullable=True),
            sa.Column('reviewed_by', sa.Integer(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint('campaign_id', 'tiktok_video_url', name='uq_content_submissions_campaign_url'),
        )
        op.create_index('ix_content_submissions_campaign_id', 'content_submissions', ['campaign_id'])
        op.create_index('ix_content_submissions_creator_id', 'content_submissions', ['creator_id'])
        op.create_index('ix_content_submissions_status', 'content_submissions', ['status'])

    if "earnings" not in existing_tables:
        op.create_table(
            'earnings',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('submission_id', sa.Integer(), sa.ForeignKey('content_submissions.id'), nullable=False, unique=True),
            sa.Column('amount', sa.Float(), nullable=False, server_default='0'),
            sa.Column('views_counted', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.text('0')),
            sa.Column('paid_at', sa.DateTime(), nullable=True),
            *_timestamps(),
        )
        op.create_index('ix_earnings_creator_id', 'earnings', ['creator_id'])

    if "favorites" not in existing_tables:
        op.create_table(
            'favorites',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('campaign_id', sa.Integer(), sa.ForeignKey('campaigns.id'), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.UniqueConstraint('user_id', 'campaign_id', name='uq_favorites_user_campaign'),
        )
        op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
        op.create_index('ix_favorites_campaign_id', 'favorites', ['campaign_id'])

    if "deals" not in existing_tables:
        op.create_table(
            'deals',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('business_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('brand_name', sa.String(length=160), nullable=False),
            sa.Column('brand_logo_url', sa.String(length=512), nullable=True),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('guidelines', sa.JSON(), nullable=True),
            sa.Column('category', sa.String(length=120), nullable=True),
            sa.Column('cover_image_url', sa.String(length=512), nullable=True),
            sa.Column('rate_per_view', sa.Float(), nullable=False, server_default='0'),
            sa.Column('max_earnings', sa.Float(), nullable=False, server_default='0'),
            sa.Column('total_budget', sa.Float(), nullable=True),
            sa.Column('status', sa.String(length=24), nullable=False, server_default='active'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
            *_timestamps(),
        )
        op.create_index('ix_deals_business_id', 'deals', ['business_id'])
        op.create_index('ix_deals_is_active', 'deals', ['is_active'])
        op.create_index('ix_deals_created_at', 'deals', ['created_at'])

    if "deal_applications" not in existing_tables:
        op.create_table(
            'deal_applications',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('deal_id', sa.Integer(), sa.ForeignKey('deals.id'), nullable=False),
            sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('status', sa.String(length=24), nullable=False, server_default='pending'),
            sa.Column('message', sa.Text(), nullable=True),
            sa.Column('tiktok_video_url', sa.String(length=512), nullable=True),
            sa.Column('tiktok_video_id', sa.String(length=64), nullable=True),
            sa.Column('current_views', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('stats_refreshed_at', sa.DateTime(), nullable=True),
            sa.Column('reviewed_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.UniqueConstraint('deal_id', 'creator_id', name='uq_deal_applications_deal_creator'),
        )
        op.create_index('ix_deal_applications_deal_id', 'deal_applications', ['deal_id'])
        op.create_index('ix_deal_applications_creator_id', 'deal_applications', ['creator_id'])

    if "withdrawals" not in existing_tables:
        op.create_table(
            'withdrawals',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('amount', sa.Float(), nullable=False, server_default='0'),
            sa.Column('currency', sa.String(length=8), nullable=False, server_default='SEK'),
            sa.Column('method', sa.String(length=16), nullable=False, server_default='swish'),
            sa.Column('status', sa.String(length=24), nullable=False, server_default='pending'),
            *_timestamps(),
        )
        op.create_index('ix_withdrawals_user_id', 'withdrawals', ['user_id'])

    if "onboarding_sessions" not in existing_tables:
        op.create_table(
            'onboarding_sessions',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('step', sa.String(length=32), nullable=False, server_default='ask_company'),
            sa.Column('messages', sa.JSON(), nullable=False),
            sa.Column('pending_updates', sa.JSON(), nullable=True),
            *_timestamps(),
        )
        op.create_index('ix_onboarding_sessions_user_id', 'onboarding_sessions', ['user_id'], unique=True)

    if "audit_logs" not in existing_tables:
        op.create_table(
            'audit_logs',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('actor_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
            sa.Column('action', sa.String(length=64), nullable=False),
            sa.Column('target_type', sa.String(length=64), nullable=False),
            sa.Column('target_id', sa.Integer(), nullable=False),
            sa.Column('details', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        )
        op.create_index('ix_audit_logs_target', 'audit_logs', ['target_type', 'target_id'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    for table in (
        'audit_logs',
        'onboarding_sessions',
        'withdrawals',
        'deal_applications',
        'deals',
        'favorites',
        'earnings',
        'content_submissions',
        'campaign_tiers',
        'campaigns',
        'tiktok_accounts',
        'business_profiles',
        'profiles',
        'users',
    ):
        if table in existing_tables:
            op.drop_table(table)
