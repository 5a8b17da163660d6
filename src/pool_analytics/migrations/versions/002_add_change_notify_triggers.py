"""Notify pool_changes on writes to events, bet_options and bets.

Revision ID: 002
Revises: 001
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = "pool_betting"
CHANNEL = "pool_changes"
TABLES = ("events", "bet_options", "bets")


def upgrade() -> None:
    # events carries its own id; the other tables reference it via event_id
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {SCHEMA}.notify_pool_change() RETURNS trigger AS $$
        DECLARE
            row_json jsonb;
        BEGIN
            IF TG_OP = 'DELETE' THEN
                row_json := to_jsonb(OLD);
            ELSE
                row_json := to_jsonb(NEW);
            END IF;
            PERFORM pg_notify(
                '{CHANNEL}',
                json_build_object(
                    'table', TG_TABLE_NAME,
                    'op', TG_OP,
                    'event_id', COALESCE(row_json ->> 'event_id', row_json ->> 'id')
                )::text
            );
            RETURN NULL;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    for table in TABLES:
        op.execute(
            f"""
            CREATE TRIGGER {table}_notify_pool_change
            AFTER INSERT OR UPDATE OR DELETE ON {SCHEMA}.{table}
            FOR EACH ROW EXECUTE FUNCTION {SCHEMA}.notify_pool_change()
            """
        )


def downgrade() -> None:
    for table in TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {table}_notify_pool_change ON {SCHEMA}.{table}")
    op.execute(f"DROP FUNCTION IF EXISTS {SCHEMA}.notify_pool_change()")
