from __future__ import annotations

import logging

from sqlalchemy import select

from backend.app.core.logging_config import configure_logging
from backend.app.db.session import SessionLocal
from backend.app.db.models.models_v1 import Category, Medication, Supplier

logger = logging.getLogger(__name__)

CATEGORIES = {
    "Antalgiques": "Traitement de la douleur",
    "Antibiotiques": "Traitement des infections bactériennes",
    "Antihistaminiques": "Traitement des allergies",
}

# (nom, catégorie, stock, seuil)
MEDICATIONS = [
    ("Paracétamol 500mg", "Antalgiques", 120, 20),
    ("Ibuprofène 400mg", "Antalgiques", 15, 20),
    ("Amoxicilline 1g", "Antibiotiques", 8, 8),
    ("Azithromycine 250mg", "Antibiotiques", 60, 10),
    ("Cétirizine 10mg", "Antihistaminiques", 40, 10),
]

# Chaque catégorie a au moins deux fournisseurs
SUPPLIERS = [
    ("PharmaDistrib", "contact@pharmadistrib.example", ["Antalgiques", "Antibiotiques"]),
    ("MediFrance", "devis@medifrance.example", ["Antalgiques", "Antihistaminiques"]),
    ("SantéPlus", "achats@santeplus.example", ["Antibiotiques"]),
    ("BioMedic", "commandes@biomedic.example", ["Antihistaminiques"]),
]


def run_seed():
    db = SessionLocal()
    try:
        # 1) Catégories
        by_label = {}
        for label, description in CATEGORIES.items():
            c = db.scalar(select(Category).where(Category.label == label))
            if not c:
                c = Category(label=label, description=description)
                db.add(c)
            by_label[label] = c
        db.flush()

        # 2) Médicaments
        for name, label, stock, level in MEDICATIONS:
            if not db.scalar(select(Medication).where(Medication.name == name)):
                db.add(
                    Medication(
                        name=name,
                        category_code=by_label[label].code,
                        units_in_stock=stock,
                        reorder_level=level,
                    )
                )

        # 3) Fournisseurs
        for name, email, labels in SUPPLIERS:
            if not db.scalar(select(Supplier).where(Supplier.name == name)):
                db.add(Supplier(name=name, email=email, categories=[by_label[label] for label in labels]))

        db.commit()
        logger.info(
            "SEED OK: %d catégories, %d médicaments, %d fournisseurs",
            len(CATEGORIES),
            len(MEDICATIONS),
            len(SUPPLIERS),
        )
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    run_seed()
