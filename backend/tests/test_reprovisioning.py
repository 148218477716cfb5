import pytest

from backend.app.db.models.core_types import FailurePolicy
from backend.app.db.models.models_v1 import Category, Medication, Supplier
from backend.services.notifier import NotificationError
from backend.services.procurement import build_reprovisioning_service, request_quotes
from backend.services.reprovisioning import (
    NO_CANDIDATE_MESSAGE,
    NO_SUPPLIER_MESSAGE,
    QUOTE_SUBJECT,
    ReprovisioningService,
    compose_quote_request,
    group_by_category,
)


# ---------- Scénarios bout en bout (dépôts SQL) ----------
def test_empty_store_requests_nothing(db_session, notifier):
    results = request_quotes(db_session, notifier=notifier)

    assert results == [NO_CANDIDATE_MESSAGE]
    assert notifier.sent == []


def test_stock_equal_to_threshold_notifies_each_supplier(db_session, make_catalog, notifier):
    """
    GIVEN
    - un médicament stock=5, seuil=5 en catégorie C1
    - C1 fournie par S1 et S2

    THEN
    - deux mails, deux lignes de résultat, chaque mail cite le médicament
    """
    make_catalog(
        categories=["C1"],
        medications=[("Doliprane", "C1", 5, 5)],
        suppliers=[
            ("S1", "s1@example.com", ["C1"]),
            ("S2", "s2@example.com", ["C1"]),
        ],
    )

    results = request_quotes(db_session, notifier=notifier)

    assert results == [
        "Mail envoyé à S1 (s1@example.com)",
        "Mail envoyé à S2 (s2@example.com)",
    ]
    assert notifier.recipients == ["s1@example.com", "s2@example.com"]
    for _, subject, body in notifier.sent:
        assert subject == QUOTE_SUBJECT
        assert "Doliprane (stock actuel: 5, seuil: 5)" in body


def test_stock_above_threshold_requests_nothing(db_session, make_catalog, notifier):
    make_catalog(
        categories=["C1"],
        medications=[("Doliprane", "C1", 100, 10)],
        suppliers=[("S1", "s1@example.com", ["C1"])],
    )

    assert request_quotes(db_session, notifier=notifier) == [NO_CANDIDATE_MESSAGE]
    assert notifier.sent == []


def test_unavailable_medication_is_ignored(db_session, make_catalog, notifier):
    make_catalog(
        categories=["C1"],
        medications=[("Retiré", "C1", 0, 10, True)],
        suppliers=[("S1", "s1@example.com", ["C1"])],
    )

    assert request_quotes(db_session, notifier=notifier) == [NO_CANDIDATE_MESSAGE]
    assert notifier.sent == []


def test_category_without_supplier(db_session, make_catalog, notifier):
    make_catalog(
        categories=["C1"],
        medications=[("Doliprane", "C1", 1, 10)],
    )

    assert request_quotes(db_session, notifier=notifier) == [NO_SUPPLIER_MESSAGE]
    assert notifier.sent == []


def test_supplier_only_sees_its_categories(db_session, make_catalog, notifier):
    """
    GIVEN
    - S1 fournit C1 et C2, seul C1 a un médicament à commander
    - S2 fournit C2 et C3, C3 a un médicament à commander

    THEN
    - le mail de S1 ne parle que de C1
    - le mail de S2 ne parle que de C3
    """
    make_catalog(
        categories=["C1", "C2", "C3"],
        medications=[
            ("MedC1", "C1", 1, 10),
            ("MedC2", "C2", 50, 10),
            ("MedC3", "C3", 3, 3),
        ],
        suppliers=[
            ("S1", "s1@example.com", ["C1", "C2"]),
            ("S2", "s2@example.com", ["C2", "C3"]),
        ],
    )

    results = request_quotes(db_session, notifier=notifier)

    assert len(results) == 2
    bodies = {to: body for to, _, body in notifier.sent}

    assert "=== Catégorie : C1 ===" in bodies["s1@example.com"]
    assert "MedC1" in bodies["s1@example.com"]
    assert "C2" not in bodies["s1@example.com"]
    assert "MedC3" not in bodies["s1@example.com"]

    assert "=== Catégorie : C3 ===" in bodies["s2@example.com"]
    assert "MedC3" in bodies["s2@example.com"]
    assert "MedC1" not in bodies["s2@example.com"]
    assert "=== Catégorie : C2 ===" not in bodies["s2@example.com"]


def test_supplier_matching_several_categories_gets_one_mail(db_session, make_catalog, notifier):
    make_catalog(
        categories=["C1", "C2"],
        medications=[
            ("MedC1", "C1", 0, 1),
            ("MedC2", "C2", 0, 1),
        ],
        suppliers=[("S1", "s1@example.com", ["C1", "C2"])],
    )

    results = request_quotes(db_session, notifier=notifier)

    assert results == ["Mail envoyé à S1 (s1@example.com)"]
    (_, _, body) = notifier.sent[0]
    assert body.index("=== Catégorie : C1 ===") < body.index("=== Catégorie : C2 ===")


def test_preview_sends_nothing(db_session, make_catalog, notifier):
    make_catalog(
        categories=["C1"],
        medications=[("Doliprane", "C1", 1, 10)],
        suppliers=[("S1", "s1@example.com", ["C1"])],
    )

    previews = build_reprovisioning_service(db_session, notifier=notifier).preview_quotes()

    assert notifier.sent == []
    assert [(p.supplier_name, p.to, p.subject) for p in previews] == [
        ("S1", "s1@example.com", QUOTE_SUBJECT)
    ]
    assert "Doliprane" in previews[0].body


# ---------- Unitaires (dépôts en mémoire) ----------
class FakeMedications:
    def __init__(self, medications):
        self.medications = medications

    def find_reorder_candidates(self):
        return [
            m for m in self.medications
            if not m.unavailable and m.units_in_stock <= m.reorder_level
        ]


class FakeSuppliers:
    def __init__(self, suppliers):
        self.suppliers = suppliers
        self.calls = []

    def find_suppliers_for_medications(self, references):
        self.calls.append(set(references))
        return self.suppliers


def _world():
    c1 = Category(code=1, label="Antalgiques")
    c2 = Category(code=2, label="Antibiotiques")
    meds = [
        Medication(reference=10, name="Doliprane", category_code=1, units_in_stock=5, reorder_level=5, unavailable=False),
        Medication(reference=11, name="Ibuprofène", category_code=1, units_in_stock=2, reorder_level=10, unavailable=False),
        Medication(reference=20, name="Amoxicilline", category_code=2, units_in_stock=0, reorder_level=4, unavailable=False),
    ]
    s1 = Supplier(id=1, name="PharmaDistrib", email="pd@example.com", categories=[c1, c2])
    s2 = Supplier(id=2, name="MediFrance", email="mf@example.com", categories=[c1])
    return meds, [s1, s2]


def test_no_candidate_skips_supplier_lookup(notifier):
    suppliers = FakeSuppliers([])
    service = ReprovisioningService(FakeMedications([]), suppliers, notifier)

    assert service.request_quotes() == [NO_CANDIDATE_MESSAGE]
    assert suppliers.calls == []


def test_supplier_lookup_uses_distinct_references(notifier):
    meds, sups = _world()
    suppliers = FakeSuppliers(sups)

    ReprovisioningService(FakeMedications(meds), suppliers, notifier).request_quotes()

    assert suppliers.calls == [{10, 11, 20}]


def test_compose_quote_request_layout():
    meds, (s1, _) = _world()

    body = compose_quote_request(s1, group_by_category(meds))

    assert body.startswith("Bonjour PharmaDistrib,\n\n")
    assert (
        "=== Catégorie : Antalgiques ===\n"
        "  - Doliprane (stock actuel: 5, seuil: 5)\n"
        "  - Ibuprofène (stock actuel: 2, seuil: 10)\n"
    ) in body
    assert "=== Catégorie : Antibiotiques ===\n  - Amoxicilline (stock actuel: 0, seuil: 4)\n" in body
    assert body.endswith("Cordialement,\nLa Pharmacie")


def test_grouping_uses_category_code_not_identity():
    meds = [
        Medication(reference=1, name="A", category_code=7),
        Medication(reference=2, name="B", category_code=7),
    ]
    meds[0].category = Category(code=7, label="X")
    meds[1].category = Category(code=7, label="X")

    grouped = group_by_category(meds)

    assert list(grouped) == [7]
    assert [m.name for m in grouped[7]] == ["A", "B"]


def test_isolate_policy_keeps_going_after_failure(notifier):
    meds, sups = _world()
    notifier.fail_for = {"pd@example.com"}
    service = ReprovisioningService(
        FakeMedications(meds), FakeSuppliers(sups), notifier, failure_policy=FailurePolicy.isolate
    )

    results = service.request_quotes()

    assert results == [
        "Échec de l'envoi à PharmaDistrib (pd@example.com) : refused by pd@example.com",
        "Mail envoyé à MediFrance (mf@example.com)",
    ]
    assert notifier.recipients == ["mf@example.com"]


def test_abort_policy_stops_on_first_failure(notifier):
    meds, sups = _world()
    notifier.fail_for = {"pd@example.com"}
    service = ReprovisioningService(
        FakeMedications(meds), FakeSuppliers(sups), notifier, failure_policy=FailurePolicy.abort
    )

    with pytest.raises(NotificationError):
        service.request_quotes()
    assert notifier.sent == []


def test_unexpected_errors_are_not_swallowed():
    class BrokenNotifier:
        def send(self, to, subject, body):
            raise ValueError("boom")

    meds, sups = _world()
    service = ReprovisioningService(FakeMedications(meds), FakeSuppliers(sups), BrokenNotifier())

    with pytest.raises(ValueError):
        service.request_quotes()
