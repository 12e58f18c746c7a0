"""create_availability_matching

Revision ID: 20261019_0900_availability
Revises:
Create Date: 2026-10-19 09:00:00

Adds: users, interventions, intervention_assignments, user_availabilities,
availability_matches
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision = '20261019_0900_availability'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'interventions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('tenant_id', sa.String(length=36), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('scheduled_time', sa.Time(), nullable=True),
        sa.Column('manager_comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_interventions_status', 'interventions', ['status'])
    op.create_index('ix_interventions_tenant_id', 'interventions', ['tenant_id'])

    op.create_table(
        'intervention_assignments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('intervention_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(['intervention_id'], ['interventions.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('intervention_id', 'user_id', name='uq_intervention_assignment')
    )
    op.create_index('ix_intervention_assignments_intervention_id', 'intervention_assignments', ['intervention_id'])
    op.create_index('ix_intervention_assignments_user_id', 'intervention_assignments', ['user_id'])

    op.create_table(
        'user_availabilities',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('intervention_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='ck_user_availability_time_order'),
        sa.ForeignKeyConstraint(['intervention_id'], ['interventions.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_availabilities_user_id', 'user_availabilities', ['user_id'])
    op.create_index('ix_user_availabilities_intervention_id', 'user_availabilities', ['intervention_id'])
    op.create_index('idx_user_availabilities_lookup', 'user_availabilities', ['intervention_id', 'user_id'])

    op.create_table(
        'availability_matches',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('intervention_id', sa.String(length=36), nullable=False),
        sa.Column('matched_date', sa.Date(), nullable=False),
        sa.Column('matched_start_time', sa.Time(), nullable=False),
        sa.Column('matched_end_time', sa.Time(), nullable=False),
        sa.Column('overlap_duration', sa.Integer(), nullable=False),
        sa.Column('participant_user_ids', JSONB(), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=False),
        sa.Column('tier', sa.String(length=20), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('is_perfect', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('calculated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['intervention_id'], ['interventions.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_availability_matches_intervention_id', 'availability_matches', ['intervention_id'])
    op.create_index('ix_availability_matches_matched_date', 'availability_matches', ['matched_date'])


def downgrade() -> None:
    op.drop_index('ix_availability_matches_matched_date', table_name='availability_matches')
    op.drop_index('ix_availability_matches_intervention_id', table_name='availability_matches')
    op.drop_table('availability_matches')

    op.drop_index('idx_user_availabilities_lookup', table_name='user_availabilities')
    op.drop_index('ix_user_availabilities_intervention_id', table_name='user_availabilities')
    op.drop_index('ix_user_availabilities_user_id', table_name='user_availabilities')
    op.drop_table('user_availabilities')

    op.drop_index('ix_intervention_assignments_user_id', table_name='intervention_assignments')
    op.drop_index('ix_intervention_assignments_intervention_id', table_name='intervention_assignments')
    op.drop_table('intervention_assignments')

    op.drop_index('ix_interventions_tenant_id', table_name='interventions')
    op.drop_index('ix_interventions_status', table_name='interventions')
    op.drop_table('interventions')

    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
