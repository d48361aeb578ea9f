"""Create activities

Revision ID: 8c41e7a2b5f3
Revises: 3f9b2c61d0a4
Create Date: 2026-10-19 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41e7a2b5f3'
down_revision: Union[str, None] = '3f9b2c61d0a4'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'activities',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('lead_id', sa.Text(), nullable=False),
        sa.Column('saved_lead_id', sa.Text(), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_activities_saved_lead_created', 'activities', ['saved_lead_id', 'created_at'])
    op.create_index('ix_activities_user_created', 'activities', ['user_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_activities_user_created', table_name='activities')
    op.drop_index('ix_activities_saved_lead_created', table_name='activities')
    op.drop_table('activities')
