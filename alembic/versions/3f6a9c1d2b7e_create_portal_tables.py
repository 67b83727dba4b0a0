"""Create applications, email_verification_tokens and admins tables

Revision ID: 3f6a9c1d2b7e
Revises:
Create Date: 2026-10-19 10:12:41.205113
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f6a9c1d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'applications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('reference_number', sa.String(length=20), nullable=False, unique=True),
        sa.Column('application_step', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),

        # SECTION A: Founder Information
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('marketing_consent', sa.Boolean(), nullable=False, server_default=sa.false()),

        # SECTION B: Startup Information
        sa.Column('startup_name', sa.String(length=200), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('social_linkedin', sa.String(length=500), nullable=True),
        sa.Column('social_x', sa.String(length=500), nullable=True),
        sa.Column('social_instagram', sa.String(length=500), nullable=True),
        sa.Column('social_facebook', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('locations', sa.Text(), nullable=True),
        sa.Column('legally_registered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('year_of_incorporation', sa.Integer(), nullable=True),
        sa.Column('cac_reg_number', sa.String(length=50), nullable=True),

        # SECTION C: Problem & Solution
        sa.Column('farmer_challenges', sa.Text(), nullable=True),
        sa.Column('solution_description', sa.Text(), nullable=True),
        sa.Column('product_stage', sa.String(length=100), nullable=True),
        sa.Column('product_link', sa.String(length=500), nullable=True),
        sa.Column('innovation_highlight', sa.Text(), nullable=True),
        sa.Column('primary_users', sa.Text(), nullable=True),
        sa.Column('no_of_active_users', sa.Integer(), nullable=False, server_default='0'),

        # SECTION D: Business Model
        sa.Column('business_model', sa.Text(), nullable=True),
        sa.Column('is_revenue_generation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('go_to_market_strategy', sa.Text(), nullable=True),
        sa.Column('no_of_customers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_cac', sa.Numeric(14, 2), nullable=True),
        sa.Column('competitors', sa.Text(), nullable=True),

        # SECTION E: Impact
        sa.Column('farmers_served_previous_year', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('farmers_served_total', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('impact_on_farmers', sa.Text(), nullable=True),
        sa.Column('sustainability_promotion', sa.Text(), nullable=True),
        sa.Column('impact_evidence', sa.String(length=1000), nullable=True),

        # SECTION F: Inclusion & Sustainability
        sa.Column('gender_inclusion', sa.Text(), nullable=True),
        sa.Column('jobs_created', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('environmental_sustainability', sa.Text(), nullable=True),
        sa.Column('data_protection_measures', sa.Text(), nullable=True),

        # SECTION G: Team
        sa.Column('no_of_founders', sa.Integer(), nullable=True),
        sa.Column('founders_details', sa.Text(), nullable=True),
        sa.Column('no_of_employees', sa.Integer(), nullable=True),
        sa.Column('team_skill', sa.Text(), nullable=True),

        # SECTION H: Growth & Vision
        sa.Column('milestone', sa.Text(), nullable=True),
        sa.Column('biggest_risk_facing', sa.Text(), nullable=True),
        sa.Column('twelve_month_revenue_projection', sa.Text(), nullable=True),
        sa.Column('long_term_vision', sa.Text(), nullable=True),

        # SECTION I: Documents & Agreements
        sa.Column('pitch_deck_url', sa.String(length=500), nullable=True),
        sa.Column('cac_url', sa.String(length=500), nullable=True),
        sa.Column('tin_url', sa.String(length=500), nullable=True),
        sa.Column('others_url', sa.String(length=500), nullable=True),
        sa.Column('agree_to_tos_ayute', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('agree_to_tos_heifer', sa.Boolean(), nullable=False, server_default=sa.false()),

        # Meta Information
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_email', 'applications', ['email'], unique=True)
    op.create_index('ix_applications_status', 'applications', ['status'])

    op.create_table(
        'email_verification_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('token', sa.String(length=100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('used_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_email_verification_tokens_user_id', 'email_verification_tokens', ['user_id'])

    op.create_table(
        'admins',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='portal'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('admins')
    op.drop_index('ix_email_verification_tokens_user_id', table_name='email_verification_tokens')
    op.drop_table('email_verification_tokens')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_email', table_name='applications')
    op.drop_index('ix_applications_id', table_name='applications')
    op.drop_table('applications')
