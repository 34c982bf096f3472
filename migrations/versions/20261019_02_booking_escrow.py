"""booking fees and escrow transactions

Revision ID: 8d41b6c0e2a9
Revises: 3f9c2a7e1b04
Create Date: 2026-10-19 15:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "8d41b6c0e2a9"
down_revision = "3f9c2a7e1b04"
branch_labels = None
depends_on = None

MONEY = sa.Numeric(14, 2)


def upgrade() -> None:
    with op.batch_alter_table("bookings") as batch_op:
        batch_op.add_column(sa.Column("service_fee", MONEY, nullable=False, server_default="0"))
        batch_op.add_column(sa.Column("caution_fee", MONEY, nullable=False, server_default="0"))
        batch_op.add_column(sa.Column("payment_status", sa.String(length=20)))
        batch_op.create_index("ix_bookings_payment_status", ["payment_status"])

    op.create_table(
        "escrow_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("booking_id", sa.String(length=36), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="COMPLETED"),
        sa.Column("reference", sa.String(length=64), nullable=False, unique=True),
        sa.Column("from_user_id", sa.String(length=36)),
        sa.Column("to_user_id", sa.String(length=36)),
        sa.Column("metadata", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_escrow_transactions_booking_id", "escrow_transactions", ["booking_id"])
    op.create_index("ix_escrow_transactions_type", "escrow_transactions", ["type"])


def downgrade() -> None:
    op.drop_index("ix_escrow_transactions_type", table_name="escrow_transactions")
    op.drop_index("ix_escrow_transactions_booking_id", table_name="escrow_transactions")
    op.drop_table("escrow_transactions")

    with op.batch_alter_table("bookings") as batch_op:
        batch_op.drop_index("ix_bookings_payment_status")
        batch_op.drop_column("payment_status")
        batch_op.drop_column("caution_fee")
        batch_op.drop_column("service_fee")
