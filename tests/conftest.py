import os

# Settings are read at import time: point the app at SQLite before importing it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "usbest-test-secret-0123456789abcdef"
os.environ["JWT_AUDIENCE"] = "authenticated"

import uuid  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from usbest.core.security import create_access_token  # noqa: E402
from usbest.db.base import Base  # noqa: E402
from usbest.db.session import get_db  # noqa: E402
from usbest.main import app  # noqa: E402
from usbest.models.content import Ad, Remix, Survey  # noqa: E402
from usbest.models.profile import Profile  # noqa: E402

# In-memory SQLite shared by the test session and every request
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

BASE_TIME = datetime(2025, 5, 1, 12, 0, 0)

SURVEY_QUESTIONS = [
    {"question": "Favourite colour?", "options": ["Red", "Blue"]},
    {"question": "Would you buy it?", "options": ["Yes", "No", "Maybe"]},
]


@pytest.fixture(autouse=True)
def test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_profile(db):
    def _make(name: str) -> Profile:
        profile = Profile(id=uuid.uuid4(), email=f"{name.lower()}@usbest.app", display_name=name)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def alice(make_profile):
    return make_profile("Alice")


@pytest.fixture
def bob(make_profile):
    return make_profile("Bob")


@pytest.fixture
def auth_headers():
    def _headers(profile: Profile, **claims) -> dict:
        token = create_access_token({"sub": profile.id, **claims})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def make_post(db):
    """Stores an ad, remix or survey; minutes orders posts (higher is newer)."""
    models = {"ad": Ad, "remix": Remix, "survey": Survey}

    def _make(content_type: str, owner: Profile, minutes: int = 0, **fields):
        data = {"title": f"{content_type} title", "description": f"{content_type} description"}
        if content_type == "survey":
            data["questions"] = SURVEY_QUESTIONS
        data.update(fields)
        item = models[content_type](
            user_id=owner.id,
            created_at=BASE_TIME + timedelta(minutes=minutes),
            **data,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make
