"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create update_runs table
    op.create_table('update_runs',
    sa.Column('run_id', sa.Uuid(), nullable=False),
    sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
    sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
    sa.Column('duration_seconds', sa.Integer(), nullable=True),
    sa.Column('duration_formatted', sa.String(20), nullable=True),
    sa.Column('success', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('updates_found', sa.Integer(), nullable=False, server_default='0'),
    sa.Column('server_name', sa.String(255), nullable=False, server_default=''),
    sa.Column('log_file_path', sa.String(1024), nullable=True),
    sa.Column('whatif_mode', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('forced_run', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
    sa.PrimaryKeyConstraint('run_id')
    )
    op.create_index('idx_update_runs_start_time', 'update_runs', ['start_time'], unique=False)

    # Create update_steps table
    op.create_table('update_steps',
    sa.Column('step_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('run_id', sa.Uuid(), nullable=False),
    sa.Column('terminology_type', sa.String(20), nullable=False),
    sa.Column('step_name', sa.String(100), nullable=False),
    sa.Column('step_order', sa.Integer(), nullable=False, server_default='0'),
    sa.Column('success', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('details', sa.Text(), nullable=True),
    sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
    sa.Column('duration_seconds', sa.Integer(), nullable=True),
    sa.Column('duration_formatted', sa.String(20), nullable=True),
    sa.ForeignKeyConstraint(['run_id'], ['update_runs.run_id'], ),
    sa.PrimaryKeyConstraint('step_id')
    )
    op.create_index('idx_update_steps_run_id', 'update_steps', ['run_id'], unique=False)

    # Create update_errors table
    op.create_table('update_errors',
    sa.Column('error_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('run_id', sa.Uuid(), nullable=False),
    sa.Column('error_source', sa.String(255), nullable=True),
    sa.Column('error_message', sa.Text(), nullable=False),
    sa.Column('error_timestamp', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['run_id'], ['update_runs.run_id'], ),
    sa.PrimaryKeyConstraint('error_id')
    )
    op.create_index('idx_update_errors_run_id', 'update_errors', ['run_id'], unique=False)
    op.create_index('idx_update_errors_timestamp', 'update_errors', ['error_timestamp'], unique=False)

    # Create trud_releases table
    op.create_table('trud_releases',
    sa.Column('release_tracking_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('item_name', sa.String(100), nullable=False),
    sa.Column('trud_item_number', sa.Integer(), nullable=False),
    sa.Column('release_id', sa.String(255), nullable=False),
    sa.Column('release_date', sa.Date(), nullable=True),
    sa.Column('detected_date', sa.DateTime(timezone=True), nullable=False),
    sa.Column('downloaded_date', sa.DateTime(timezone=True), nullable=True),
    sa.Column('imported_date', sa.DateTime(timezone=True), nullable=True),
    sa.Column('import_success', sa.Boolean(), nullable=True),
    sa.PrimaryKeyConstraint('release_tracking_id')
    )
    op.create_index('idx_trud_releases_item_name', 'trud_releases', ['item_name'], unique=False)
    op.create_index('idx_trud_releases_detected_date', 'trud_releases', ['detected_date'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_trud_releases_detected_date', table_name='trud_releases')
    op.drop_index('idx_trud_releases_item_name', table_name='trud_releases')
    op.drop_table('trud_releases')
    op.drop_index('idx_update_errors_timestamp', table_name='update_errors')
    op.drop_index('idx_update_errors_run_id', table_name='update_errors')
    op.drop_table('update_errors')
    op.drop_index('idx_update_steps_run_id', table_name='update_steps')
    op.drop_table('update_steps')
    op.drop_index('idx_update_runs_start_time', table_name='update_runs')
    op.drop_table('update_runs')
