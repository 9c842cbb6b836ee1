"""Create training engine tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

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
    """Create users, exercises, sessions, sets, check-ins, fatigue logs and deload periods."""
    op.create_table('users', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('exercises', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('equipment', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('default_rest_seconds', sa.Integer(), nullable=False, server_default='120'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_exercises_slug'), 'exercises', ['slug'], unique=True)

    op.create_table('training_sessions', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False,
                  server_default='in_progress'),
        sa.Column('avg_rpe', sa.Float(), nullable=True),
        sa.Column('total_volume', sa.Float(), nullable=False, server_default='0'),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_training_sessions_user_id'), 'training_sessions', ['user_id'])
    op.create_index(op.f('ix_training_sessions_date'), 'training_sessions', ['date'])
    op.create_index(op.f('ix_training_sessions_status'), 'training_sessions', ['status'])

    op.create_table('exercise_sets', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('set_number', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('weight', sa.Float(), nullable=False, server_default='0'),
        sa.Column('reps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rpe', sa.Float(), nullable=True),
        sa.Column('is_warmup', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('completed_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['session_id'], ['training_sessions.id']),
        sa.ForeignKeyConstraint(['exercise_id'], ['exercises.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_exercise_sets_session_id'), 'exercise_sets', ['session_id'])
    op.create_index(op.f('ix_exercise_sets_exercise_id'), 'exercise_sets', ['exercise_id'])

    op.create_table('recovery_check_ins', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=True),
        sa.Column('energy_level', sa.Integer(), nullable=True),
        sa.Column('soreness', sa.Integer(), nullable=True),
        sa.Column('stress_level', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_recovery_check_ins_user_id'), 'recovery_check_ins', ['user_id'])
    op.create_index(op.f('ix_recovery_check_ins_date'), 'recovery_check_ins', ['date'])

    op.create_table('fatigue_logs', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('level', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('rpe_creep', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('performance_drop', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('recovery_debt', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('volume_load', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('recommendations', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_fatigue_user_date'))
    op.create_index(op.f('ix_fatigue_logs_user_id'), 'fatigue_logs', ['user_id'])
    op.create_index(op.f('ix_fatigue_logs_date'), 'fatigue_logs', ['date'])

    op.create_table('deload_periods', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('deload_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('trigger_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('volume_modifier', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('intensity_modifier', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('fatigue_score_at_trigger', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('ended_on', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_deload_periods_user_id'), 'deload_periods', ['user_id'])
    # At most one active deload per user.
    op.create_index('uq_deload_one_active_per_user', 'deload_periods', ['user_id'], unique=True,
                    postgresql_where=sa.text('is_active'), sqlite_where=sa.text('is_active = 1'))


def downgrade() -> None:
    """Drop all engine tables."""
    op.drop_index('uq_deload_one_active_per_user', table_name='deload_periods')
    op.drop_index(op.f('ix_deload_periods_user_id'), table_name='deload_periods')
    op.drop_table('deload_periods')
    op.drop_index(op.f('ix_fatigue_logs_date'), table_name='fatigue_logs')
    op.drop_index(op.f('ix_fatigue_logs_user_id'), table_name='fatigue_logs')
    op.drop_table('fatigue_logs')
    op.drop_index(op.f('ix_recovery_check_ins_date'), table_name='recovery_check_ins')
    op.drop_index(op.f('ix_recovery_check_ins_user_id'), table_name='recovery_check_ins')
    op.drop_table('recovery_check_ins')
    op.drop_index(op.f('ix_exercise_sets_exercise_id'), table_name='exercise_sets')
    op.drop_index(op.f('ix_exercise_sets_session_id'), table_name='exercise_sets')
    op.drop_table('exercise_sets')
    op.drop_index(op.f('ix_training_sessions_status'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_date'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_user_id'), table_name='training_sessions')
    op.drop_table('training_sessions')
    op.drop_index(op.f('ix_exercises_slug'), table_name='exercises')
    op.drop_table('exercises')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
