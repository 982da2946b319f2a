"""001: create meme_coins table

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Timestamps are written by the application at millisecond resolution,
    # so there is no updated_at trigger and no column defaults for them.
    op.execute("""
        CREATE TABLE meme_coins (
            id                  BIGSERIAL       PRIMARY KEY,
            name                VARCHAR(255)    NOT NULL,
            description         VARCHAR(128),
            popularity_score    BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL,
            updated_at          TIMESTAMPTZ     NOT NULL,
            CONSTRAINT uq_meme_coins_name               UNIQUE (name),
            CONSTRAINT ck_meme_coins_popularity_gte_0   CHECK (popularity_score >= 0),
            CONSTRAINT ck_meme_coins_updated_after_created CHECK (updated_at >= created_at)
        );
    """)
    op.execute("COMMENT ON TABLE meme_coins IS 'Meme coins — source of truth behind the coin:{id} Redis cache';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS meme_coins CASCADE;")
