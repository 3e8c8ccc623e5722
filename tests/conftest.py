"""Shared fixtures: in-memory database, app with overridden dependencies, fake OpenAI client."""
import os

# Must be set before selva_app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ADMIN_EMAILS"] = '["admin@selva.com"]'

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from selva_app.api import create_app
from selva_app.database.models import Base
from selva_app.database.session import get_db
from selva_app.services.ai import RecipeAI, get_recipe_ai


class FakeCompletions:
    """Stands in for client.chat.completions; replies are consumed in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


def fake_openai(*replies):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(replies)))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def ai():
    """No API key: every generation falls back."""
    return RecipeAI(client=None)


@pytest.fixture
def app(session_factory, ai):
    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_recipe_ai] = lambda: ai
    return app


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan would create the file DB and start the scheduler
    return TestClient(app)


def register(client, name="Ana", email="ana@example.com", password="segredo1"):
    res = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert res.status_code == 201, res.text
    return res.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client):
    return auth_headers(register(client)["token"])
