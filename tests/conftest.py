import os

# Must be set before noticias.core.config builds its settings
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from noticias import crud
from noticias.api import deps
from noticias.core.exceptions import MailDeliveryError
from noticias.db.base import Base
from noticias.main import app
from noticias.services.bulletin import BulletinService
from noticias.services.category_cache import CategoryCache
from noticias.services.contact import ContactService
from noticias.services.mail import MailSender
from noticias.services.public_content import PublicContentService
from noticias.services.subscription import SubscriptionService
from noticias.utils.dates import utcnow


class FakeMailSender(MailSender):
    """Renders every message like the real sender and records it instead of calling Brevo."""

    def __init__(self):
        super().__init__(api_key="test-key", sender_email="boletin@example.com", sender_name="Noticias Pachuca")
        self.sent = []
        self.fail_for = set()
        self.fail_all = False

    def deliver(self, message):
        body = message.render()
        if self.fail_all or message.to in self.fail_for:
            raise MailDeliveryError(f"Could not deliver email to {message.to}")
        self.sent.append((message, body))

    def sent_to(self, email):
        return [body for message, body in self.sent if message.to == email]


class FakeClock:

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def mailer():
    return FakeMailSender()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    cache = CategoryCache(ttl_seconds=300, clock=clock)
    yield cache
    cache.unlisten()


@pytest.fixture
def content_service(cache):
    return PublicContentService(cache)


@pytest.fixture
def subscription_service(mailer):
    return SubscriptionService(mailer, frontend_url="https://noticiaspachuca.com/", token_ttl_hours=24)


@pytest.fixture
def bulletin_service(mailer):
    return BulletinService(mailer, frontend_url="https://noticiaspachuca.com", timezone_name="America/Mexico_City")


@pytest.fixture
def contact_service(mailer):
    return ContactService(mailer, admin_email="redaccion@example.com")


@pytest.fixture
def client(db, mailer, content_service):
    app.dependency_overrides[deps.get_db] = lambda: db
    app.dependency_overrides[deps.get_mail_sender] = lambda: mailer
    app.dependency_overrides[deps.get_public_content_service] = lambda: content_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_article(db):
    counter = {"n": 0}

    def _make(tags=(), keywords=(), **fields):
        counter["n"] += 1
        n = counter["n"]
        values = {
            "slug": f"nota-{n}",
            "title": f"Nota {n}",
            "summary": f"Resumen de la nota {n}",
            "content": f"<p>Contenido de la nota {n}</p>",
            "author": "Redacción",
            "status": "published",
            "published_at": utcnow() - timedelta(hours=1),
            "views": 0,
        }
        values.update(fields)
        return crud.create_article(db, tags=tags, keywords=keywords, **values)

    return _make


@pytest.fixture
def make_category(db):
    def _make(slug, name, **fields):
        values = {"slug": slug, "name": name, "order": 0, "is_active": True}
        values.update(fields)
        return crud.create_category(db, **values)

    return _make
