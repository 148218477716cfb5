from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.api.deps import get_db
from backend.app.db.models.models_v1 import Category, Medication
from backend.app.schemas.catalog import MedicationRead
from backend.services.catalog import MedicationRepository

router = APIRouter(prefix="/medications")


class MedicationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    category_code: int
    quantity_per_unit: str | None = Field(default=None, max_length=255)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    units_in_stock: int = Field(default=0, ge=0)
    units_on_order: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    unavailable: bool = False


class StockUpdate(BaseModel):
    units_in_stock: int = Field(ge=0)


@router.get("", response_model=list[MedicationRead])
def list_medications(category_code: int | None = None, db: Session = Depends(get_db)):
    stmt = select(Medication).order_by(Medication.reference)
    if category_code is not None:
        stmt = stmt.where(Medication.category_code == category_code)
    return db.execute(stmt).scalars().all()


@router.get("/reorder-candidates", response_model=list[MedicationRead])
def list_reorder_candidates(db: Session = Depends(get_db)):
    return MedicationRepository(db).find_reorder_candidates()


@router.post("")
def create_medication(payload: MedicationCreate, db: Session = Depends(get_db)):
    exists = db.execute(select(Medication).where(Medication.name == payload.name)).scalar_one_or_none()
    if exists:
        raise HTTPException(status_code=409, detail="Medication already exists")

    if not db.get(Category, payload.category_code):
        raise HTTPException(status_code=400, detail="Invalid category_code")

    m = Medication(**payload.model_dump())
    db.add(m)
    db.commit()
    db.refresh(m)
    return {"reference": m.reference, "name": m.name}


@router.patch("/{reference}/stock", response_model=MedicationRead)
def update_stock(reference: int, payload: StockUpdate, db: Session = Depends(get_db)):
    m = db.get(Medication, reference)
    if not m:
        raise HTTPException(status_code=404, detail="Medication not found")

    m.units_in_stock = payload.units_in_stock
    db.commit()
    db.refresh(m)
    return m
