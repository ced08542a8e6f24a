"""Create ingestion tables

Revision ID: 20261017_000001
Revises:
Create Date: 2026-10-17

This migration creates the tables for statement ingestion:
- tracks / works: canonical recordings and compositions
- uploaded_files / prs_statements: one row per upload, with status
- royalty_entries / performance_royalties: statement line items
- track_integrations: external catalog matches
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Status is stored as plain text (processing, completed, failed)
    op.create_table(
        'tracks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('isrc', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('artist', sa.Text(), nullable=False),
        sa.Column('upc', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_tracks_isrc', 'tracks', ['isrc'], unique=True)

    op.create_table(
        'uploaded_files',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('original_name', sa.Text(), nullable=False),
        sa.Column('file_type', sa.String(50), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('record_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='processing'),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'royalty_entries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('track_id', sa.Uuid(), sa.ForeignKey('tracks.id'), nullable=False, index=True),
        sa.Column('uploaded_file_id', sa.Uuid(), sa.ForeignKey('uploaded_files.id'), nullable=False, index=True),
        sa.Column('date_inserted', sa.Date(), nullable=True),
        sa.Column('reporting_date', sa.Date(), nullable=True),
        sa.Column('sale_month', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('store', sa.Text(), nullable=False, server_default='Unknown'),
        sa.Column('country_of_sale', sa.Text(), nullable=True),
        sa.Column('song_or_album', sa.Text(), nullable=True),
        sa.Column('release_title', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('team_percentage', sa.Numeric(precision=7, scale=4), nullable=True),
        sa.Column('songwriter_royalties_withheld', sa.Numeric(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('earnings', sa.Numeric(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('net_earnings', sa.Numeric(precision=18, scale=8), nullable=True),
        sa.Column('commission', sa.Text(), nullable=True),
        sa.Column('splits_percent', sa.Text(), nullable=True),
        sa.Column('commission_type', sa.Text(), nullable=True),
        sa.Column('recoup', sa.Numeric(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('extras', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'works',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('work_no', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('ip1', sa.Text(), nullable=True),
        sa.Column('ip2', sa.Text(), nullable=True),
        sa.Column('ip3', sa.Text(), nullable=True),
        sa.Column('ip4', sa.Text(), nullable=True),
        sa.Column('your_share_percent', sa.Numeric(precision=7, scale=4), nullable=True),
        sa.Column('track_id', sa.Uuid(), sa.ForeignKey('tracks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_works_work_no', 'works', ['work_no'], unique=True)

    op.create_table(
        'prs_statements',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('original_name', sa.Text(), nullable=False),
        sa.Column('statement_period', sa.Text(), nullable=True),
        sa.Column('statement_date', sa.Date(), nullable=True),
        sa.Column('total_royalties', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='GBP'),
        sa.Column('work_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='processing'),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'performance_royalties',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('work_id', sa.Uuid(), sa.ForeignKey('works.id'), nullable=False, index=True),
        sa.Column('prs_statement_id', sa.Uuid(), sa.ForeignKey('prs_statements.id'), nullable=False, index=True),
        sa.Column('usage_territory', sa.Text(), nullable=True),
        sa.Column('broadcast_region', sa.Text(), nullable=True),
        sa.Column('period', sa.Text(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('production', sa.Text(), nullable=True),
        sa.Column('performances', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('royalty_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='GBP'),
        sa.Column('extras', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'track_integrations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('track_id', sa.Uuid(), sa.ForeignKey('tracks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('provider', sa.String(50), nullable=False),
        sa.Column('provider_id', sa.String(100), nullable=False),
        sa.Column('provider_uri', sa.String(255), nullable=True),
        sa.Column('matched_name', sa.String(500), nullable=True),
        sa.Column('matched_artists', sa.JSON(), nullable=True),
        sa.Column('matched_album', sa.String(500), nullable=True),
        sa.Column('album_art', sa.String(500), nullable=True),
        sa.Column('preview_url', sa.String(500), nullable=True),
        sa.Column('match_confidence', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('match_method', sa.String(20), nullable=True),
        sa.Column('popularity', sa.Integer(), nullable=True),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('provider_isrc', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('track_id', 'provider', name='uq_track_integration_provider'),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('track_integrations')
    op.drop_table('performance_royalties')
    op.drop_table('prs_statements')
    op.drop_index('ix_works_work_no', table_name='works')
    op.drop_table('works')
    op.drop_table('royalty_entries')
    op.drop_table('uploaded_files')
    op.drop_index('ix_tracks_isrc', table_name='tracks')
    op.drop_table('tracks')
