"""
Test configuration and fixtures for Hack-or-Snooze tests.
"""
import os
import re

# Must be set before the application modules read their configuration
os.environ.setdefault("HACKORSNOOZE_DB_URL", "sqlite://")
os.environ.setdefault("HACKORSNOOZE_BCRYPT_ROUNDS", "4")
os.environ.setdefault("HACKORSNOOZE_LOG_TO_FILE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hackorsnooze.core.accounts import Accounts
from hackorsnooze.core.db.engine import enable_sqlite_foreign_keys
from hackorsnooze.core.db.tables.base import Base
from hackorsnooze.core.db.tables.favorite import Favorite
from hackorsnooze.core.rate_limit import limiter
from hackorsnooze.core.stories import add_story

BOB_PASSWORD = "123456"
BOB_PHONE = "+14151231234"
JAS_PASSWORD = "abcdef"


class FakeSmsSender:
    """Records outgoing messages instead of sending them."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def send(self, to: str, body: str) -> None:
        self.messages.append((to, body))

    @property
    def last_code(self) -> str:
        _, body = self.messages[-1]
        return re.search(r"\b(\d{6})\b", body).group(1)


@pytest.fixture(scope="function")
def db_session():
    """Create an isolated test database session for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def no_rate_limits():
    """Rate limits are switched off unless a test turns them back on."""
    limiter.enabled = False
    limiter.reset()
    yield
    limiter.enabled = True
    limiter.reset()


@pytest.fixture
def sms_sender():
    return FakeSmsSender()


@pytest.fixture
def accounts(db_session, sms_sender):
    return Accounts(db_session, sms_sender=sms_sender)


@pytest.fixture
def client_factory(sms_sender):
    """Factory to create test clients bound to a specific db session."""

    def create_client(session, auth=None, sms=sms_sender):
        from hackorsnooze.app import app
        from hackorsnooze.core.db.session import get_db
        from hackorsnooze.core.sms import get_sms_sender

        def override_get_db():
            yield session

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_sms_sender] = lambda: sms

        client = TestClient(app)
        if auth:
            client.auth = auth
        return client

    yield create_client

    from hackorsnooze.app import app

    app.dependency_overrides.clear()


@pytest.fixture
def bob(accounts):
    """User 'bob' (name 'Bobby') with a phone number and one story."""
    accounts.create_account("bob", "Bobby", BOB_PASSWORD, phone=BOB_PHONE)
    story = add_story(accounts.session, "bob", "How to eat cookies.", "http://www.goodcookies.com")
    return {
        "username": "bob",
        "password": BOB_PASSWORD,
        "auth": ("bob", BOB_PASSWORD),
        "story_id": story.story_id,
    }


@pytest.fixture
def jas(accounts, bob):
    """User 'jas' (name 'Jason') without a phone, with two stories and
    bob's story as a favorite."""
    accounts.create_account("jas", "Jason", JAS_PASSWORD)
    session = accounts.session
    first = add_story(session, "jas", "Badminton? What is that?", "http://www.goodsports.com")
    second = add_story(session, "jas", "How to eat fruit.", "http://www.goodfruit.com")
    session.add(Favorite(username="jas", story_id=bob["story_id"]))
    session.commit()
    return {
        "username": "jas",
        "password": JAS_PASSWORD,
        "auth": ("jas", JAS_PASSWORD),
        "story_ids": [first.story_id, second.story_id],
    }
