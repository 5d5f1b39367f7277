"""create visitor, control_counter and user tables

Revision ID: 4c1d2e7a9b10
Revises:
Create Date: 2025-06-02 09:12:41.108233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "visitor",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("control_number", sa.String(32), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("purpose", sa.String(40), nullable=False),
        sa.Column("purpose_other", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_visitor_control_number", "visitor", ["control_number"], unique=True)
    op.create_index("ix_visitor_created_at", "visitor", ["created_at"], unique=False)

    op.create_table(
        "control_counter",
        sa.Column("year", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("last_sequence", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "user",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)


def downgrade():
    op.drop_index("ix_user_username", table_name="user")
    op.drop_table("user")
    op.drop_table("control_counter")
    op.drop_index("ix_visitor_created_at", table_name="visitor")
    op.drop_index("ix_visitor_control_number", table_name="visitor")
    op.drop_table("visitor")
