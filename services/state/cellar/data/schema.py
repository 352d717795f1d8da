"""SQLAlchemy table definitions owned by the Cellar service."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
SEQ_TYPE = BigInteger().with_variant(Integer(), "sqlite")

versions = Table(
    "versions",
    metadata,
    Column("seq", SEQ_TYPE, primary_key=True, autoincrement=True),
    Column("model_name", String(255), nullable=False),
    Column("model_id", String(255), nullable=True),
    Column("model_inserted_at", DateTime(timezone=True), nullable=True),
    Column("version", Text, nullable=False),
    Column("inserted_at", DateTime(timezone=True), nullable=False),
    Index("ix_versions_model_lookup", "model_name", "model_id", "seq"),
)
