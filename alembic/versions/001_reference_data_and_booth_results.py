"""Initial migration: election years, constituencies, booths and booth results.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "election_years",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("year", name="uq_election_years_year"),
    )

    op.create_table(
        "constituencies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("number", sa.Integer, nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("number", name="uq_constituencies_number"),
    )

    # Booths are created by the result import; the unique key is what makes
    # concurrent imports converge on a single booth row.
    op.create_table(
        "booths",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "constituency_id",
            sa.Integer,
            sa.ForeignKey("constituencies.id", ondelete="RESTRICT", name="fk_booths_constituency_id_constituencies"),
            nullable=False,
        ),
        sa.Column("booth_no", sa.Integer, nullable=False),
        sa.Column("village_name", sa.String(255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("constituency_id", "booth_no", name="uq_booth_constituency_booth_no"),
    )

    op.create_table(
        "booth_results",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "booth_id",
            sa.Integer,
            sa.ForeignKey("booths.id", ondelete="CASCADE", name="fk_booth_results_booth_id_booths"),
            nullable=False,
        ),
        sa.Column(
            "year_id",
            sa.Integer,
            sa.ForeignKey("election_years.id", ondelete="RESTRICT", name="fk_booth_results_year_id_election_years"),
            nullable=False,
        ),
        sa.Column("polling_percentage", sa.Float, nullable=True),
        sa.Column("party_percentage", sa.Float, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("booth_id", "year_id", name="uq_booth_result_booth_year"),
    )
    op.create_index("idx_booth_results_year_id", "booth_results", ["year_id"])


def downgrade() -> None:
    op.drop_index("idx_booth_results_year_id", table_name="booth_results")
    op.drop_table("booth_results")
    op.drop_table("booths")
    op.drop_table("constituencies")
    op.drop_table("election_years")
