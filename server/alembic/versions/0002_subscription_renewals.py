"""link renewed subscriptions to the plan they replaced

Revision ID: 0002_subscription_renewals
Revises: 0001_initial
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_subscription_renewals"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("subscriptions") as batch_op:
        batch_op.add_column(sa.Column("renewed_from_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_subscriptions_renewed_from_id",
            "subscriptions",
            ["renewed_from_id"],
            ["id"],
        )


def downgrade() -> None:
    with op.batch_alter_table("subscriptions") as batch_op:
        batch_op.drop_constraint("fk_subscriptions_renewed_from_id", type_="foreignkey")
        batch_op.drop_column("renewed_from_id")
