"""SQLAlchemy table definitions for the invite service.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import Column, ForeignKey, Index, MetaData, String, Table, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# CONVERSATIONS TABLE
# ============================================================================
conversations_table = Table(
    "conversations",
    metadata,
    Column("id", String(255), primary_key=True),  # Transport-assigned id
    Column("invite_tag", String(64), nullable=False, unique=True),
    Column("creator_inbox_id", String(255), nullable=True),  # Hex
    Column("name", Text, nullable=True),
    Column("description", Text, nullable=True),
    Column("image_url", Text, nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),  # Self-destruct
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_conversations_invite_tag", conversations_table.c.invite_tag)

# ============================================================================
# CONSUMED INVITE TAGS TABLE (single-use invites)
# ============================================================================
# The primary key on tag makes consumption an atomic INSERT ... ON CONFLICT
consumed_invite_tags_table = Table(
    "consumed_invite_tags",
    metadata,
    Column("tag", String(64), primary_key=True),
    Column(
        "conversation_id",
        String(255),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("inbox_id", String(255), nullable=False),  # Redeeming inbox, hex
    Column(
        "consumed_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# PENDING INVITES TABLE (joiner side)
# ============================================================================
pending_invites_table = Table(
    "pending_invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("invite_tag", String(64), nullable=False, unique=True),
    Column("creator_inbox_id", String(255), nullable=False),
    Column("slug", Text, nullable=False),
    Column("name", Text, nullable=True),
    Column("description", Text, nullable=True),
    Column("image_url", Text, nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("conversation_expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_pending_invites_created_at", pending_invites_table.c.created_at)
