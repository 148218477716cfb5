import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.db.base import Base
from backend.app.db.models.models_v1 import Category, Medication, Supplier
from backend.services.notifier import NotificationError

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")


@pytest.fixture(scope="function")
def engine():
    """
    Base isolée par test.

    SQLite en mémoire par défaut (StaticPool : une seule connexion partagée,
    utilisable depuis le threadpool du TestClient).
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        eng = create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        eng = create_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class RecordingNotifier:
    """Notifier de test : garde chaque envoi, échoue pour les adresses de `fail_for`."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, body):
        if to in self.fail_for:
            raise NotificationError(f"refused by {to}")
        self.sent.append((to, subject, body))

    @property
    def recipients(self):
        return [to for to, _, _ in self.sent]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_catalog(db_session):
    """
    Fabrique de données : catégories, médicaments, fournisseurs.

    Retourne un dict label/nom -> objet persistant.
    """

    def _make(categories=(), medications=(), suppliers=()):
        objects = {}
        for label in categories:
            c = Category(label=label)
            db_session.add(c)
            objects[label] = c
        db_session.flush()

        for name, label, stock, level, *rest in medications:
            m = Medication(
                name=name,
                category_code=objects[label].code,
                units_in_stock=stock,
                reorder_level=level,
                unavailable=bool(rest and rest[0]),
            )
            db_session.add(m)
            objects[name] = m

        for name, email, labels in suppliers:
            s = Supplier(name=name, email=email, categories=[objects[l] for l in labels])
            db_session.add(s)
            objects[name] = s

        db_session.commit()
        return objects

    return _make
