"""create delivery_notes, production_batches and batch_import_runs tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "delivery_notes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("delivery_number", sa.String(length=64), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("formula_code", sa.String(length=64), nullable=True),
        sa.Column("volume_m3", sa.Numeric(precision=10, scale=3), nullable=False),
        sa.Column("delivery_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.Time(), nullable=True),
        sa.Column("scheduled_time", sa.Time(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("delivery_number"),
    )
    op.create_index("ix_delivery_notes_delivery_date", "delivery_notes", ["delivery_date"], unique=False)

    op.create_table(
        "batch_import_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("rows_seen", sa.Integer(), nullable=False),
        sa.Column("rows_imported", sa.Integer(), nullable=False),
        sa.Column("rows_failed", sa.Integer(), nullable=False),
        sa.Column("rows_auto_linked", sa.Integer(), nullable=False),
        sa.Column("errors", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("imported_by", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_batch_import_runs_created_at", "batch_import_runs", ["created_at"], unique=False)

    op.create_table(
        "production_batches",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("import_run_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("batch_number", sa.String(length=64), nullable=False),
        sa.Column("batch_datetime", sa.DateTime(timezone=False), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("formula_code", sa.String(length=64), nullable=False),
        sa.Column("cement_kg", sa.Float(), nullable=False),
        sa.Column("sand_kg", sa.Float(), nullable=False),
        sa.Column("gravel_kg", sa.Float(), nullable=False),
        sa.Column("water_liters", sa.Float(), nullable=False),
        sa.Column("additives_liters", sa.Float(), nullable=False),
        sa.Column("total_volume_m3", sa.Float(), nullable=False),
        sa.Column("operator_name", sa.String(length=255), nullable=True),
        sa.Column("raw_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("link_status", sa.String(length=32), nullable=False),
        sa.Column("link_confidence", sa.Integer(), nullable=True),
        sa.Column("linked_delivery_id", sa.String(length=64), nullable=True),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_production_batches_batch_datetime", "production_batches", ["batch_datetime"], unique=False)
    op.create_index("ix_production_batches_link_status", "production_batches", ["link_status"], unique=False)
    op.create_index("ix_production_batches_content_hash", "production_batches", ["content_hash"], unique=False)
    op.create_index("ix_production_batches_import_run_id", "production_batches", ["import_run_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_production_batches_import_run_id", table_name="production_batches")
    op.drop_index("ix_production_batches_content_hash", table_name="production_batches")
    op.drop_index("ix_production_batches_link_status", table_name="production_batches")
    op.drop_index("ix_production_batches_batch_datetime", table_name="production_batches")
    op.drop_table("production_batches")
    op.drop_index("ix_batch_import_runs_created_at", table_name="batch_import_runs")
    op.drop_table("batch_import_runs")
    op.drop_index("ix_delivery_notes_delivery_date", table_name="delivery_notes")
    op.drop_table("delivery_notes")
