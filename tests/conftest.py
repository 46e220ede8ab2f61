import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import pizza_store.models.address  # noqa: F401
import pizza_store.models.catalog  # noqa: F401
import pizza_store.models.order  # noqa: F401
import pizza_store.models.pizza  # noqa: F401
from pizza_store.db.seed import seed_catalog
from pizza_store.db.session import Base, get_db
from pizza_store.main import app
from pizza_store.models.catalog import Special as SpecialModel
from pizza_store.models.catalog import Topping as ToppingModel
from pizza_store.schemas.order import OrderCreate


@pytest.fixture()
def engine():
    # one shared in-memory connection so every session sees the same database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    try:
        seed_catalog(db)
    finally:
        db.close()
    return factory


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def toppings(db):
    """Catalog topping ids by name."""
    return {t.name: t.id for t in db.query(ToppingModel).all()}


@pytest.fixture()
def specials(db):
    """Catalog special ids by name."""
    return {s.name: s.id for s in db.query(SpecialModel).all()}


@pytest.fixture()
def order_payload(specials, toppings):
    def _build(**overrides):
        payload = {
            "user_id": "user-001",
            "delivery_address": {
                "name": "Ada Lovelace",
                "line1": "12 Analytical Street",
                "line2": "Flat 3",
                "city": "London",
                "region": "Greater London",
                "postal_code": "N1 9GU",
            },
            "pizzas": [
                {
                    "special_id": specials["Classic pepperoni"],
                    "size": 12,
                    "toppings": [{"id": toppings["Extra cheese"]}, {"id": toppings["Mushrooms"]}],
                },
                {
                    "special_id": specials["Margherita"],
                    "size": 9,
                    "toppings": [],
                },
            ],
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture()
def make_order(order_payload):
    def _build(**overrides):
        return OrderCreate.model_validate(order_payload(**overrides))

    return _build
