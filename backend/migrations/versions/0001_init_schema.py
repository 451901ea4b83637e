"""init schema: users, auth providers, credential links, money flows

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE = "deleted_at IS NULL"


def _versioned_columns():
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _versioned_indexes(table):
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])
    op.create_index(f"ix_{table}_deleted_at", table, ["deleted_at"])


def _partial_unique(name, table, columns, where):
    op.create_index(
        name,
        table,
        columns,
        unique=True,
        postgresql_where=sa.text(where),
        sqlite_where=sa.text(where),
    )


def upgrade():
    op.create_table(
        "users",
        *_versioned_columns(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=255), nullable=False),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    _versioned_indexes("users")
    _partial_unique("uq_users_phone_number", "users", ["phone_number"], ACTIVE)

    op.create_table(
        "auth_providers",
        *_versioned_columns(),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("client_id", sa.String(length=255), nullable=True),
        sa.Column("client_secret", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_auth_providers")),
    )
    _versioned_indexes("auth_providers")
    _partial_unique(
        "uq_auth_providers_name", "auth_providers", ["name"], f"{ACTIVE} AND name IS NOT NULL"
    )

    op.create_table(
        "user_auths",
        *_versioned_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("auth_provider_id", sa.Uuid(), nullable=False),
        sa.Column("credential_id", sa.String(length=255), nullable=False),
        sa.Column("credential_secret", sa.Text(), nullable=True),
        sa.Column("credential_refresh", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_user_auths_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["auth_provider_id"],
            ["auth_providers.id"],
            name=op.f("fk_user_auths_auth_provider_id_auth_providers"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_auths")),
    )
    _versioned_indexes("user_auths")
    op.create_index("ix_user_auths_user_id", "user_auths", ["user_id"])
    op.create_index("ix_user_auths_credential_id", "user_auths", ["credential_id"])
    _partial_unique(
        "uq_user_auths_user_id_auth_provider_id",
        "user_auths",
        ["user_id", "auth_provider_id"],
        ACTIVE,
    )

    op.create_table(
        "money_flows",
        *_versioned_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("amount", sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), server_default="IDR", nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            server_default="[]",
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_money_flows_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_money_flows")),
    )
    _versioned_indexes("money_flows")
    op.create_index("ix_money_flows_user_id", "money_flows", ["user_id"])
    op.create_index("ix_money_flows_category", "money_flows", ["category"])


def downgrade():
    op.drop_table("money_flows")
    op.drop_table("user_auths")
    op.drop_table("auth_providers")
    op.drop_table("users")
