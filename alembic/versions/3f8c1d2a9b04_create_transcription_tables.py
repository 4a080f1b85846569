"""create_transcription_tables

Transcriptions, enhanced prompts and their ordered follow-ups.

Revision ID: 3f8c1d2a9b04
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f8c1d2a9b04'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'transcriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('file_name', sa.String(length=500), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_transcriptions_type', 'transcriptions', ['type'], unique=False)
    op.create_index(op.f('ix_transcriptions_created_at'), 'transcriptions', ['created_at'], unique=False)

    op.create_table(
        'enhanced_prompts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('transcription_id', sa.Uuid(), nullable=False),
        sa.Column('enhanced_prompt', sa.Text(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('original_text', sa.Text(), nullable=False),
        sa.Column('target_agent', sa.String(length=50), nullable=False),
        sa.Column('prompt_style', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['transcription_id'], ['transcriptions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_enhanced_prompts_transcription_id'), 'enhanced_prompts', ['transcription_id'], unique=False)
    op.create_index(op.f('ix_enhanced_prompts_created_at'), 'enhanced_prompts', ['created_at'], unique=False)

    op.create_table(
        'follow_ups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('enhanced_prompt_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['enhanced_prompt_id'], ['enhanced_prompts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_follow_ups_enhanced_prompt_id'), 'follow_ups', ['enhanced_prompt_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_follow_ups_enhanced_prompt_id'), table_name='follow_ups')
    op.drop_table('follow_ups')

    op.drop_index(op.f('ix_enhanced_prompts_created_at'), table_name='enhanced_prompts')
    op.drop_index(op.f('ix_enhanced_prompts_transcription_id'), table_name='enhanced_prompts')
    op.drop_table('enhanced_prompts')

    op.drop_index(op.f('ix_transcriptions_created_at'), table_name='transcriptions')
    op.drop_index('idx_transcriptions_type', table_name='transcriptions')
    op.drop_table('transcriptions')
