from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.api.deps import get_db
from backend.app.db.models.models_v1 import Category
from backend.app.schemas.catalog import CategoryRead
from backend.services.catalog import under_supplied_categories

router = APIRouter(prefix="/categories")


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    label: str = Field(min_length=1, max_length=255)
    description: str | None = None


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return db.execute(select(Category).order_by(Category.code)).scalars().all()


@router.get("/under-supplied")
def list_under_supplied(minimum: int = 2, db: Session = Depends(get_db)):
    """Catégories qui n'ont pas la redondance fournisseurs attendue."""
    rows = under_supplied_categories(db, minimum=minimum)
    return [
        {
            "code": c.code,
            "label": c.label,
            "supplier_count": len(c.suppliers),
        }
        for c in rows
    ]


@router.post("")
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    exists = db.execute(select(Category).where(Category.label == payload.label)).scalar_one_or_none()
    if exists:
        raise HTTPException(status_code=409, detail="Category already exists")

    c = Category(label=payload.label, description=payload.description)
    db.add(c)
    db.commit()
    db.refresh(c)
    return {"code": c.code, "label": c.label}
