"""Create identity tables for every role plus the donations ledger.

Revision ID: 001_identities
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001_identities"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.Text, nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "is_blocked",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _unique(table: str, *columns: str) -> list[sa.UniqueConstraint]:
    # R: Named uq_<table>_<column>; the repository maps the name back to a field
    return [sa.UniqueConstraint(c, name=f"uq_{table}_{c}") for c in columns]


def upgrade() -> None:
    op.create_table(
        "donors",
        *_base_columns(),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("full_name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("contact_number", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("profile_photo", sa.Text, nullable=False),
        *_unique("donors", "username", "email"),
    )

    op.create_table(
        "volunteers",
        *_base_columns(),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("phone", sa.Text, nullable=False),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("volunteer_role", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column(
            "skills",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "availability",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("profile_photo", sa.Text, nullable=False),
        sa.Column(
            "ratings",
            postgresql.ARRAY(sa.Integer),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "feedback",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "average_rating",
            sa.Float,
            nullable=False,
            server_default=sa.text("0"),
        ),
        *_unique("volunteers", "username", "email"),
    )
    op.create_check_constraint(
        "ck_volunteers_volunteer_role",
        "volunteers",
        "volunteer_role IN ('Caretaker', 'Medical Assistance', "
        "'Educational Support', 'General Helper', 'Other')",
    )

    op.create_table(
        "elder_home_operators",
        *_base_columns(),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("full_name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("contact_number", sa.Text, nullable=False),
        sa.Column("elder_home_name", sa.Text, nullable=False),
        sa.Column("elder_home_address", sa.Text, nullable=False),
        sa.Column("account_number", sa.Text, nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("license_path", sa.Text, nullable=True),
        sa.Column(
            "home_photos",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "approval_status",
            sa.Text,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        *_unique("elder_home_operators", "username", "email", "elder_home_name"),
    )
    op.create_check_constraint(
        "ck_elder_home_operators_approval_status",
        "elder_home_operators",
        "approval_status IN ('pending', 'approved', 'rejected')",
    )
    op.create_index(
        "ix_elder_home_operators_approval_status",
        "elder_home_operators",
        ["approval_status"],
    )

    op.create_table(
        "administrators",
        *_base_columns(),
        *_unique("administrators", "username"),
    )

    op.create_table(
        "donations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "donor_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("donors.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_check_constraint(
        "ck_donations_amount_positive", "donations", "amount > 0"
    )
    op.create_index("ix_donations_created_at", "donations", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_donations_created_at", table_name="donations")
    op.drop_table("donations")
    op.drop_table("administrators")
    op.drop_index(
        "ix_elder_home_operators_approval_status",
        table_name="elder_home_operators",
    )
    op.drop_table("elder_home_operators")
    op.drop_table("volunteers")
    op.drop_table("donors")
