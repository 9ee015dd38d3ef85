"""create_tank_documents

One JSON document per tank, keyed by building level and tank id.

Revision ID: e1f2a3b4c5d6
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic
revision: str = 'e1f2a3b4c5d6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

tank_level = sa.Enum("N00", "N10", "N20", "N30", name="tank_level")


def upgrade() -> None:
    op.create_table(
        "tank_documents",
        sa.Column("level", tank_level, nullable=False),
        sa.Column("tank_id", sa.String(length=100), nullable=False),
        sa.Column("document", sa.JSON(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("level", "tank_id"),
    )


def downgrade() -> None:
    op.drop_table("tank_documents")
    tank_level.drop(op.get_bind(), checkfirst=True)
