import os

os.environ.setdefault("POSTGRES_DSN", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-bytes-for-hs256")

import pytest
from fastapi.testclient import TestClient

import storefront.db.models  # noqa
from storefront.api.deps import get_db, get_session_factory
from storefront.db.session import Base, make_engine, make_sessionmaker
from storefront.main import app
from storefront.schemas import CategoryFields, ProductFields
from storefront.security.utils import create_access_token
from storefront.services.catalog import CatalogStore
from storefront.services.orders import OrderService, OrderStore

JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield make_sessionmaker(engine)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def catalog(db):
    return CatalogStore(db)


@pytest.fixture
def orders(session_factory):
    return OrderService(OrderStore(session_factory))


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token, _ = create_access_token("admin", "admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def audio(catalog):
    return catalog.create_category(CategoryFields(name="Audio", slug="audio"))


@pytest.fixture
def speaker(catalog, audio):
    return catalog.create_product(
        ProductFields(name="Speaker", price=100000, category_id=audio.id), JPEG
    )
