"""db hardening: one active case per customer (unique partial index)

Revision ID: 8d2c4a9e6f13
Revises: 3b7e1f0c2a41
Create Date: 2026-10-12
"""
from typing import Sequence, Union

from alembic import op


revision: str = "8d2c4a9e6f13"
down_revision: Union[str, Sequence[str], None] = "3b7e1f0c2a41"
branch_labels = None
depends_on = None


INDEX_NAME = "uq_cases_one_active_per_customer"


def upgrade() -> None:
    # Existing duplicates must be resolved by hand before the index can exist.
    op.execute(
        """
        DO $$
        BEGIN
            IF EXISTS (
                SELECT customer_id
                FROM cases
                WHERE status = 'active'
                GROUP BY customer_id
                HAVING COUNT(*) > 1
            ) THEN
                RAISE EXCEPTION 'one-active-case violation: multiple active cases for the same customer_id';
            END IF;
        END$$;
        """
    )

    # at most one active case per customer_id (organization or individual alike)
    op.execute(
        f"""
        CREATE UNIQUE INDEX IF NOT EXISTS {INDEX_NAME}
        ON cases (customer_id)
        WHERE status = 'active'
        """
    )


def downgrade() -> None:
    op.execute(f"DROP INDEX IF EXISTS {INDEX_NAME}")
