import os

# Base en mémoire et pas de données de démonstration pendant les tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["LOW_STOCK_THRESHOLD"] = "5"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import ADMIN_PASSWORD, USER_PASSWORD
from models import Base, get_db, insert_default_users
from services import CategoryService, ProductService


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def category_service(db) -> CategoryService:
    return CategoryService(db)


@pytest.fixture
def product_service(db, category_service) -> ProductService:
    return ProductService(db, category_service, low_stock_threshold=5)


@pytest.fixture
def app(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    session = session_factory()
    try:
        insert_default_users(session)
    finally:
        session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def bearer(client: TestClient, username: str, password: str) -> dict:
    response = client.post("/api/login", data={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return bearer(client, "admin", ADMIN_PASSWORD)


@pytest.fixture
def user_headers(client):
    return bearer(client, "user", USER_PASSWORD)


@pytest.fixture
def admin_browser(app):
    """Client HTML connecté en administrateur (cookie de session)."""
    browser = TestClient(app)
    response = browser.post("/login", data={"username": "admin", "password": ADMIN_PASSWORD},
                            follow_redirects=False)
    assert response.status_code == 303
    return browser


@pytest.fixture
def user_browser(app):
    browser = TestClient(app)
    response = browser.post("/login", data={"username": "user", "password": USER_PASSWORD},
                            follow_redirects=False)
    assert response.status_code == 303
    return browser
