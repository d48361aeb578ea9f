"""Create leads, userleads and referrals

Revision ID: 3f9b2c61d0a4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9b2c61d0a4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- leads --
    op.create_table(
        'leads',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('company', sa.Text(), nullable=False),
        sa.Column('location', sa.Text()),
        sa.Column('team', sa.Text()),
        sa.Column('compensation', sa.JSON()),
        sa.Column('contact_name', sa.Text()),
        sa.Column('contact_email', sa.Text()),
        sa.Column('additional_emails', sa.JSON()),
        sa.Column('additional_links', sa.JSON(), nullable=True),
        sa.Column('contact_linkedin', sa.Text()),
        sa.Column('source_link', sa.Text()),
        sa.Column('source_application_link', sa.Text()),
        sa.Column('date_posted', sa.DateTime(timezone=True), nullable=True),
        sa.Column('industry', sa.Text()),
        sa.Column('is_global', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.Text(), nullable=True),
        sa.Column('shared_by', sa.Text(), nullable=True),
        sa.Column('shared_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_leads_company_title', 'leads', ['company', 'title'])
    op.create_index('ix_leads_created_by', 'leads', ['created_by'])
    op.create_index('ix_leads_is_global', 'leads', ['is_global'])
    op.create_index('ix_leads_created_at', 'leads', ['created_at'])

    # -- userleads --
    op.create_table(
        'userleads',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('lead_id', sa.Text(), nullable=False),
        sa.Column('current_status', sa.Text(), nullable=False),
        sa.Column('status_history', sa.JSON(), nullable=False),
        sa.Column('priority', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('saved_at', sa.DateTime(timezone=True)),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('interviewing_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('offer_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_activity_at', sa.DateTime(timezone=True)),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.UniqueConstraint('user_id', 'lead_id', name='uq_userlead_user_lead'),
    )
    op.create_index('ix_userleads_user_id', 'userleads', ['user_id'])
    op.create_index('ix_userleads_lead_id', 'userleads', ['lead_id'])
    op.create_index('ix_userleads_user_status', 'userleads', ['user_id', 'current_status'])
    op.create_index('ix_userleads_user_activity', 'userleads', ['user_id', 'last_activity_at'])

    # -- referrals --
    op.create_table(
        'referrals',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('company', sa.Text()),
        sa.Column('email', sa.Text()),
        sa.Column('linkedin', sa.Text()),
        sa.Column('notes', sa.Text()),
        sa.Column('linked_leads', sa.JSON(), nullable=False),
        sa.Column('activity_history', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_referrals_user_id', 'referrals', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_referrals_user_id', table_name='referrals')
    op.drop_table('referrals')

    op.drop_index('ix_userleads_user_activity', table_name='userleads')
    op.drop_index('ix_userleads_user_status', table_name='userleads')
    op.drop_index('ix_userleads_lead_id', table_name='userleads')
    op.drop_index('ix_userleads_user_id', table_name='userleads')
    op.drop_table('userleads')

    op.drop_index('ix_leads_created_at', table_name='leads')
    op.drop_index('ix_leads_is_global', table_name='leads')
    op.drop_index('ix_leads_created_by', table_name='leads')
    op.drop_index('ix_leads_company_title', table_name='leads')
    op.drop_table('leads')
