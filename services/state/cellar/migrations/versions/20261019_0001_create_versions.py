"""create cellar versions table"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the append-only versions table."""
    op.create_table(
        "versions",
        sa.Column(
            "seq",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("model_name", sa.String(length=255), nullable=False),
        sa.Column("model_id", sa.String(length=255), nullable=True),
        sa.Column("model_inserted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Text(), nullable=False),
        sa.Column("inserted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_versions_model_lookup",
        "versions",
        ["model_name", "model_id", "seq"],
    )


def downgrade() -> None:
    """Drop the versions table."""
    op.drop_index("ix_versions_model_lookup", table_name="versions")
    op.drop_table("versions")
