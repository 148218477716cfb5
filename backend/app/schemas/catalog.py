from decimal import Decimal

from pydantic import BaseModel


class CategoryRead(BaseModel):
    code: int
    label: str
    description: str | None = None

    class Config:
        from_attributes = True


class MedicationRead(BaseModel):
    reference: int
    name: str
    category_code: int
    quantity_per_unit: str | None = None
    unit_price: Decimal
    units_in_stock: int
    units_on_order: int
    reorder_level: int
    unavailable: bool

    class Config:
        from_attributes = True


class SupplierRead(BaseModel):
    id: int
    name: str
    email: str
    categories: list[CategoryRead] = []

    class Config:
        from_attributes = True


class QuotePreviewRead(BaseModel):
    supplier_name: str
    to: str
    subject: str
    body: str  # aperçu seulement, rien n'est envoyé

    class Config:
        from_attributes = True
