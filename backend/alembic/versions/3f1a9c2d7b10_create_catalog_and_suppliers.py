"""create catalog (categories, medications) and suppliers

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("code", sa.BigInteger(), primary_key=True),
        sa.Column("label", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
    )
    op.create_table(
        "suppliers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.CheckConstraint("length(trim(name)) > 0", name="ck_supplier_name_not_empty"),
    )
    op.create_table(
        "medications",
        sa.Column("reference", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column(
            "category_code",
            sa.BigInteger(),
            sa.ForeignKey("categories.code", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("quantity_per_unit", sa.String(255)),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("units_in_stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("units_on_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reorder_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unavailable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint("units_in_stock >= 0", name="ck_medication_stock_nonneg"),
        sa.CheckConstraint("units_on_order >= 0", name="ck_medication_on_order_nonneg"),
        sa.CheckConstraint("reorder_level >= 0", name="ck_medication_reorder_level_nonneg"),
        sa.CheckConstraint("unit_price >= 0", name="ck_medication_unit_price_nonneg"),
    )
    op.create_index("ix_medications_category_code", "medications", ["category_code"])
    op.create_index(
        "ix_medications_reorder",
        "medications",
        ["unavailable", "units_in_stock", "reorder_level"],
    )
    op.create_table(
        "supplier_categories",
        sa.Column(
            "supplier_id",
            sa.BigInteger(),
            sa.ForeignKey("suppliers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "category_code",
            sa.BigInteger(),
            sa.ForeignKey("categories.code", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("supplier_categories")
    op.drop_index("ix_medications_reorder", table_name="medications")
    op.drop_index("ix_medications_category_code", table_name="medications")
    op.drop_table("medications")
    op.drop_table("suppliers")
    op.drop_table("categories")
