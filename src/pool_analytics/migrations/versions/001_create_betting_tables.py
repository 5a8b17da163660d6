"""Create events, bet_options and bets.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = "pool_betting"


def upgrade() -> None:
    # Schema is created by env.py before migrations run.
    op.create_table(
        "events",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="open"),
        sa.Column("total_pool", sa.Numeric, nullable=False, server_default="0"),
        sa.Column("participant_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        schema=SCHEMA,
    )

    op.create_table(
        "bet_options",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("event_id", sa.Text, sa.ForeignKey(f"{SCHEMA}.events.id"), nullable=False),
        sa.Column("label", sa.Text, nullable=False),
        sa.Column("total_bets", sa.Numeric, nullable=False, server_default="0"),
        sa.Column("bettors", sa.Integer, nullable=False, server_default="0"),
        schema=SCHEMA,
    )

    op.create_table(
        "bets",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Text, sa.ForeignKey(f"{SCHEMA}.events.id"), nullable=False),
        sa.Column("option_id", sa.Text, nullable=False),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("amount", sa.Numeric, nullable=False),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_bets_event_placed_at",
        "bets",
        ["event_id", "placed_at"],
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_index("ix_bets_event_placed_at", table_name="bets", schema=SCHEMA)
    op.drop_table("bets", schema=SCHEMA)
    op.drop_table("bet_options", schema=SCHEMA)
    op.drop_table("events", schema=SCHEMA)
