"""Orders, cards, login users and refund requests.

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261019_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUS = sa.Enum("pending", "paid", "delivered", "cancelled", "refunded", name="order_status")


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("order_id", sa.String(), primary_key=True),
        sa.Column("product_id", sa.String(), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("status", ORDER_STATUS, nullable=False, server_default="pending"),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("points_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("card_key", sa.String(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("delivered_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("points_used >= 0", name="orders_points_used_positive"),
    )

    op.create_table(
        "cards",
        sa.Column("card_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("product_id", sa.String(), nullable=True),
        sa.Column("card_key", sa.String(), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reserved_order_id", sa.String(), nullable=True),
        sa.Column("reserved_at", sa.DateTime(), nullable=True),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_cards_reserved_order_id", "cards", ["reserved_order_id"])

    op.create_table(
        "login_users",
        sa.Column("user_id", sa.String(), primary_key=True),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("points >= 0", name="login_users_points_positive"),
    )

    op.create_table(
        "refund_requests",
        sa.Column("refund_request_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.String(),
            sa.ForeignKey("orders.order_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_refund_requests_order_id", "refund_requests", ["order_id"])


def downgrade() -> None:
    op.drop_index("ix_refund_requests_order_id", table_name="refund_requests")
    op.drop_table("refund_requests")
    op.drop_table("login_users")
    op.drop_index("ix_cards_reserved_order_id", table_name="cards")
    op.drop_table("cards")
    op.drop_table("orders")
    ORDER_STATUS.drop(op.get_bind(), checkfirst=True)
