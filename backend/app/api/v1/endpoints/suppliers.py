from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from backend.app.api.deps import get_db
from backend.app.db.models.models_v1 import Category, Supplier
from backend.app.schemas.catalog import SupplierRead

router = APIRouter(prefix="/suppliers")


class SupplierCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    category_codes: list[int] = Field(default_factory=list)


@router.get("", response_model=list[SupplierRead])
def list_suppliers(db: Session = Depends(get_db)):
    stmt = select(Supplier).options(selectinload(Supplier.categories)).order_by(Supplier.name)
    return db.execute(stmt).scalars().all()


@router.post("")
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)):
    exists = db.execute(select(Supplier).where(Supplier.name == payload.name)).scalar_one_or_none()
    if exists:
        raise HTTPException(status_code=409, detail="Supplier already exists")

    categories = []
    for code in dict.fromkeys(payload.category_codes):
        category = db.get(Category, code)
        if not category:
            raise HTTPException(status_code=400, detail=f"Invalid category_code {code}")
        categories.append(category)

    s = Supplier(name=payload.name, email=str(payload.email), categories=categories)
    db.add(s)
    db.commit()
    db.refresh(s)
    return {"id": s.id, "name": s.name}
