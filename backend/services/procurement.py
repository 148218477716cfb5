"""
Procurement service.

Ce module assemble le flux de demande de devis (dépôts SQL + notifier)
mais ne contient AUCUNE logique de sélection ni de composition de mail.

Toute la logique métier est centralisée dans :
    backend.services.reprovisioning
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from backend.app.db.models.core_types import FailurePolicy
from backend.services.catalog import MedicationRepository, SupplierRepository
from backend.services.notifier import Notifier
from backend.services.reprovisioning import ReprovisioningService


def build_reprovisioning_service(
    db: Session,
    *,
    notifier: Notifier,
    failure_policy: FailurePolicy = FailurePolicy.isolate,
) -> ReprovisioningService:
    return ReprovisioningService(
        MedicationRepository(db),
        SupplierRepository(db),
        notifier,
        failure_policy=failure_policy,
    )


def request_quotes(
    db: Session,
    *,
    notifier: Notifier,
    failure_policy: FailurePolicy = FailurePolicy.isolate,
) -> list[str]:
    service = build_reprovisioning_service(db, notifier=notifier, failure_policy=failure_policy)
    return service.request_quotes()


__all__ = ["build_reprovisioning_service", "request_quotes"]
