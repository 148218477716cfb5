"""
Accès en lecture au catalogue et à l'annuaire fournisseurs.

Les deux requêtes consommées par le réapprovisionnement vivent ici,
derrière des objets dépôt injectés dans le service (pas de session globale).
"""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from backend.app.db.models.models_v1 import (
    Category,
    Medication,
    Supplier,
    supplier_categories,
)


class MedicationRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_reorder_candidates(self) -> list[Medication]:
        """
        Médicaments à réapprovisionner.

        Règle métier :
            unavailable = false AND units_in_stock <= reorder_level

        La comparaison est inclusive : stock == seuil => à commander.
        La catégorie est chargée dans la même requête (pas de N+1 au regroupement).
        """
        stmt = (
            select(Medication)
            .options(joinedload(Medication.category))
            .where(Medication.unavailable.is_(False))
            .where(Medication.units_in_stock <= Medication.reorder_level)
            .order_by(Medication.category_code, Medication.reference)
        )
        return list(self.db.execute(stmt).scalars().all())


class SupplierRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_suppliers_for_medications(self, references: Iterable[int]) -> list[Supplier]:
        """
        Fournisseurs qui fournissent au moins une catégorie contenant
        l'un des médicaments donnés. Catégories pré-chargées, sans doublon.
        """
        references = sorted({int(ref) for ref in references if ref is not None})
        if not references:
            return []

        supplier_ids = (
            select(supplier_categories.c.supplier_id)
            .join(Medication, Medication.category_code == supplier_categories.c.category_code)
            .where(Medication.reference.in_(references))
            .distinct()
        )
        stmt = (
            select(Supplier)
            .options(selectinload(Supplier.categories))
            .where(Supplier.id.in_(supplier_ids))
            .order_by(Supplier.name)
        )
        return list(self.db.execute(stmt).scalars().all())


def under_supplied_categories(db: Session, minimum: int = 2) -> list[Category]:
    """Catégories avec moins de `minimum` fournisseurs (redondance attendue : 2)."""
    stmt = (
        select(Category)
        .options(selectinload(Category.suppliers))
        .order_by(Category.code)
    )
    categories = db.execute(stmt).scalars().all()
    return [c for c in categories if len(c.suppliers) < minimum]
