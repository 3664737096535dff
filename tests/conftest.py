import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import create_app


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    path = Path("test.db")
    if path.exists():
        engine.dispose()
        path.unlink()


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def register(client):
    def _register(email="user@example.com", password="secret123", **overrides):
        body = {"username": "user", "email": email, "phone": "0123456789", "password": password, **overrides}
        return client.post("/auth/register", json=body)

    return _register


@pytest.fixture()
def auth_headers(register):
    response = register()
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
