from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.deps import get_reprovisioning_service
from backend.app.schemas.catalog import QuotePreviewRead
from backend.services.notifier import NotificationError
from backend.services.reprovisioning import ReprovisioningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services/reapprovisionnement")


@router.post("/demander-devis", response_model=list[str])
def request_quotes(service: ReprovisioningService = Depends(get_reprovisioning_service)):
    """
    Lance la demande de devis : un mail par fournisseur concerné.
    Retourne un résumé ligne à ligne.
    """
    logger.info("Contrôleur : demande de devis de réapprovisionnement")
    try:
        return service.request_quotes()
    except NotificationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/apercu", response_model=list[QuotePreviewRead])
def preview_quotes(service: ReprovisioningService = Depends(get_reprovisioning_service)):
    return service.preview_quotes()
