from __future__ import annotations

from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, BigIntPK

# ---------- ASSOCIATION ----------
# Un fournisseur fournit plusieurs catégories, une catégorie a plusieurs fournisseurs
supplier_categories = Table(
    "supplier_categories",
    Base.metadata,
    Column("supplier_id", ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
    Column("category_code", ForeignKey("categories.code", ondelete="CASCADE"), primary_key=True),
)


# ---------- CATALOGUE ----------
class Category(Base):
    __tablename__ = "categories"
    code: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    medications: Mapped[list["Medication"]] = relationship(back_populates="category")
    suppliers: Mapped[list["Supplier"]] = relationship(
        secondary=supplier_categories,
        back_populates="categories",
    )

    def __repr__(self) -> str:
        return f"Category(code={self.code!r}, label={self.label!r})"


class Medication(Base):
    __tablename__ = "medications"
    reference: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    category_code: Mapped[int] = mapped_column(
        ForeignKey("categories.code", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    quantity_per_unit: Mapped[str | None] = mapped_column(String(255))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    units_in_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    units_on_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reorder_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unavailable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    category: Mapped[Category] = relationship(back_populates="medications")

    __table_args__ = (
        CheckConstraint("units_in_stock >= 0", name="ck_medication_stock_nonneg"),
        CheckConstraint("units_on_order >= 0", name="ck_medication_on_order_nonneg"),
        CheckConstraint("reorder_level >= 0", name="ck_medication_reorder_level_nonneg"),
        CheckConstraint("unit_price >= 0", name="ck_medication_unit_price_nonneg"),
        Index("ix_medications_reorder", "unavailable", "units_in_stock", "reorder_level"),
    )

    def __repr__(self) -> str:
        return f"Medication(reference={self.reference!r}, name={self.name!r})"


# ---------- FOURNISSEURS ----------
class Supplier(Base):
    __tablename__ = "suppliers"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    categories: Mapped[list[Category]] = relationship(
        secondary=supplier_categories,
        back_populates="suppliers",
        order_by=Category.code,
    )

    __table_args__ = (CheckConstraint("length(trim(name)) > 0", name="ck_supplier_name_not_empty"),)

    def __repr__(self) -> str:
        return f"Supplier(id={self.id!r}, name={self.name!r})"
