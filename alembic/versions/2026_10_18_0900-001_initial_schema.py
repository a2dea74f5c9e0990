"""Initial schema: users, performance samples, daily metrics, progression settings

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the four application tables."""
    op.create_table('users', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('performance_samples', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('exercise_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('rpe', sa.Float(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_performance_samples_user_id'), 'performance_samples', ['user_id'])
    op.create_index(op.f('ix_performance_samples_exercise_name'), 'performance_samples', ['exercise_name'])
    op.create_index(op.f('ix_performance_samples_date'), 'performance_samples', ['date'])

    op.create_table('daily_metrics', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=False),
        sa.Column('sleep_quality', sa.Integer(), nullable=True),
        sa.Column('energy_level', sa.Integer(), nullable=False),
        sa.Column('soreness_level', sa.Integer(), nullable=False),
        sa.Column('stress_level', sa.Integer(), nullable=False),
        sa.Column('motivation_level', sa.Integer(), nullable=True),
        sa.Column('hrv_score', sa.Float(), nullable=True),
        sa.Column('resting_hr', sa.Integer(), nullable=True),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_daily_metrics_user_date'))
    op.create_index(op.f('ix_daily_metrics_user_id'), 'daily_metrics', ['user_id'])
    op.create_index(op.f('ix_daily_metrics_date'), 'daily_metrics', ['date'])

    op.create_table('progression_settings', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('experience_level', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('aggressiveness', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('primary_goal', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('target_rpe', sa.Float(), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_progression_settings_user_id'), 'progression_settings', ['user_id'], unique=True)


def downgrade() -> None:
    """Drop the application tables."""
    op.drop_index(op.f('ix_progression_settings_user_id'), table_name='progression_settings')
    op.drop_table('progression_settings')
    op.drop_index(op.f('ix_daily_metrics_date'), table_name='daily_metrics')
    op.drop_index(op.f('ix_daily_metrics_user_id'), table_name='daily_metrics')
    op.drop_table('daily_metrics')
    op.drop_index(op.f('ix_performance_samples_date'), table_name='performance_samples')
    op.drop_index(op.f('ix_performance_samples_exercise_name'), table_name='performance_samples')
    op.drop_index(op.f('ix_performance_samples_user_id'), table_name='performance_samples')
    op.drop_table('performance_samples')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
