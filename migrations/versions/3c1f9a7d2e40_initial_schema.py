"""initial_schema

Create the schema for the invite service:
- Conversations (invite tag, display metadata, self-destruct time)
- Consumed invite tags (single-use invite redemption)
- Pending invites (joiner side, waiting to be added)

Revision ID: 3c1f9a7d2e40
Revises:
Create Date: 2026-10-18 10:12:44.318502

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        "conversations",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("invite_tag", sa.String(64), nullable=False, unique=True),
        sa.Column("creator_inbox_id", sa.String(255), nullable=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )
    op.create_index(
        "idx_conversations_invite_tag", "conversations", ["invite_tag"]
    )

    op.create_table(
        "consumed_invite_tags",
        sa.Column("tag", sa.String(64), primary_key=True),
        sa.Column(
            "conversation_id",
            sa.String(255),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("inbox_id", sa.String(255), nullable=False),
        sa.Column(
            "consumed_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    op.create_table(
        "pending_invites",
        sa.Column(
            "id",
            postgresql.UUID,
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column("invite_tag", sa.String(64), nullable=False, unique=True),
        sa.Column("creator_inbox_id", sa.String(255), nullable=False),
        sa.Column("slug", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "conversation_expires_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )
    op.create_index(
        "idx_pending_invites_created_at", "pending_invites", ["created_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_pending_invites_created_at", table_name="pending_invites")
    op.drop_table("pending_invites")
    op.drop_table("consumed_invite_tags")
    op.drop_index("idx_conversations_invite_tag", table_name="conversations")
    op.drop_table("conversations")
