"""002: create orders table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            order_id        VARCHAR(64)     NOT NULL,
            reference       VARCHAR(100)    NOT NULL,
            user_id         VARCHAR(64)     NOT NULL,
            email           VARCHAR(255),
            line_items      JSONB           NOT NULL DEFAULT '[]'::jsonb,
            grand_total     NUMERIC(12, 2)  NOT NULL,
            metadata        JSONB,
            status          VARCHAR(20)     NOT NULL DEFAULT 'pending',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_reference      UNIQUE (reference),
            CONSTRAINT ck_orders_grand_total    CHECK (grand_total > 0),
            CONSTRAINT ck_orders_status         CHECK (
                status IN ('pending', 'successful', 'failed')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user_created ON orders (user_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE orders IS 'Laundry orders and their payment reconciliation status';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
