from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


META = sa.MetaData()

_UUID_DEFAULT = sa.text("uuid_generate_v4()")

users = sa.Table(
    "users",
    META,
    sa.Column("id", UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("email", sa.Text(), nullable=False, unique=True),
    sa.Column("password", sa.Text(), nullable=False),
)

customers = sa.Table(
    "customers",
    META,
    sa.Column("id", UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("email", sa.String(255), nullable=False),
    sa.Column("image_url", sa.String(255), nullable=False),
)

# customer_id is intentionally not a foreign key.
invoices = sa.Table(
    "invoices",
    META,
    sa.Column("id", UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT),
    sa.Column("customer_id", UUID(as_uuid=False), nullable=False),
    sa.Column("amount", sa.Integer(), nullable=False),
    sa.Column("status", sa.String(255), nullable=False),
    sa.Column("date", sa.Date(), nullable=False),
)

revenue = sa.Table(
    "revenue",
    META,
    sa.Column("month", sa.String(4), nullable=False, unique=True),
    sa.Column("revenue", sa.Integer(), nullable=False),
)

UUID_EXTENSION_DDL = sa.text('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

