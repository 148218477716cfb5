"""
Demande de devis de réapprovisionnement.

1. Détermine les médicaments à réapprovisionner (units_in_stock <= reorder_level)
2. Trouve les fournisseurs susceptibles de les fournir (via les catégories)
3. Envoie à chaque fournisseur un mail récapitulant, catégorie par catégorie,
   les médicaments qu'il peut fournir
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from backend.app.db.models.core_types import FailurePolicy
from backend.app.db.models.models_v1 import Medication, Supplier
from backend.services.notifier import NotificationError, Notifier

logger = logging.getLogger(__name__)

QUOTE_SUBJECT = "Demande de devis de réapprovisionnement"
NO_CANDIDATE_MESSAGE = "Aucun médicament à réapprovisionner"
NO_SUPPLIER_MESSAGE = "Aucun fournisseur trouvé pour les médicaments à réapprovisionner"


class MedicationSource(Protocol):
    def find_reorder_candidates(self) -> Sequence[Medication]:
        ...


class SupplierSource(Protocol):
    def find_suppliers_for_medications(self, references: Iterable[int]) -> Sequence[Supplier]:
        ...


@dataclass(frozen=True)
class QuotePreview:
    supplier_name: str
    to: str
    subject: str
    body: str


def sent_line(supplier: Supplier) -> str:
    return f"Mail envoyé à {supplier.name} ({supplier.email})"


def failed_line(supplier: Supplier, reason: str) -> str:
    return f"Échec de l'envoi à {supplier.name} ({supplier.email}) : {reason}"


def group_by_category(medications: Iterable[Medication]) -> dict[int, list[Medication]]:
    # clé = code catégorie (pas l'identité de l'objet)
    grouped: dict[int, list[Medication]] = {}
    for medication in medications:
        grouped.setdefault(medication.category_code, []).append(medication)
    return grouped


def compose_quote_request(supplier: Supplier, by_category: dict[int, list[Medication]]) -> str:
    """
    Corps du mail pour un fournisseur.

    On parcourt les catégories du fournisseur (et non toutes les catégories
    à réapprovisionner) : il ne voit que ce qu'il peut fournir.
    """
    lines = [
        f"Bonjour {supplier.name},",
        "",
        "Nous vous contactons pour vous demander un devis de réapprovisionnement "
        "pour les médicaments suivants :",
        "",
    ]
    for category in supplier.categories:
        medications = by_category.get(category.code)
        if not medications:
            continue
        lines.append(f"=== Catégorie : {category.label} ===")
        for m in medications:
            lines.append(
                f"  - {m.name} (stock actuel: {m.units_in_stock}, seuil: {m.reorder_level})"
            )
        lines.append("")

    lines += [
        "Merci de nous transmettre votre devis dans les meilleurs délais.",
        "",
        "Cordialement,",
        "La Pharmacie",
    ]
    return "\n".join(lines)


class ReprovisioningService:
    def __init__(
        self,
        medications: MedicationSource,
        suppliers: SupplierSource,
        notifier: Notifier,
        *,
        failure_policy: FailurePolicy = FailurePolicy.isolate,
    ):
        self.medications = medications
        self.suppliers = suppliers
        self.notifier = notifier
        self.failure_policy = failure_policy

    def _resolve(self) -> tuple[dict[int, list[Medication]], list[Supplier], list[str]]:
        candidates = list(self.medications.find_reorder_candidates())
        if not candidates:
            logger.info(NO_CANDIDATE_MESSAGE)
            return {}, [], [NO_CANDIDATE_MESSAGE]

        logger.info("%d médicament(s) à réapprovisionner", len(candidates))
        by_category = group_by_category(candidates)

        references = {m.reference for m in candidates}
        suppliers = list(self.suppliers.find_suppliers_for_medications(references))
        if not suppliers:
            logger.warning(NO_SUPPLIER_MESSAGE)
            return by_category, [], [NO_SUPPLIER_MESSAGE]

        return by_category, suppliers, []

    def preview_quotes(self) -> list[QuotePreview]:
        """Mails qui seraient envoyés, sans rien envoyer."""
        by_category, suppliers, _ = self._resolve()
        return [
            QuotePreview(
                supplier_name=s.name,
                to=s.email,
                subject=QUOTE_SUBJECT,
                body=compose_quote_request(s, by_category),
            )
            for s in suppliers
        ]

    def request_quotes(self) -> list[str]:
        by_category, suppliers, informational = self._resolve()
        if informational:
            return informational

        results: list[str] = []
        for supplier in suppliers:
            body = compose_quote_request(supplier, by_category)
            try:
                self.notifier.send(supplier.email, QUOTE_SUBJECT, body)
            except NotificationError as exc:
                if self.failure_policy == FailurePolicy.abort:
                    raise
                logger.error("Échec de l'envoi à %s (%s): %s", supplier.name, supplier.email, exc)
                results.append(failed_line(supplier, str(exc)))
                continue

            logger.info("Mail envoyé à %s (%s)", supplier.name, supplier.email)
            results.append(sent_line(supplier))

        return results
