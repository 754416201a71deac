import pytest
from sqlalchemy.orm import sessionmaker

from noticias import crud, models
from noticias.jobs.send_bulletin import main
from noticias.utils.tokens import generate_token


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def reader(db):
    return crud.create_subscriber(
        db,
        email="lector@example.com",
        is_active=True,
        is_confirmed=True,
        morning=True,
        unsubscribe_token=generate_token(),
    )


def test_job_creates_and_sends(db, mailer, reader, make_article, bulletin_service, session_factory):
    make_article(title="Hoy")

    assert main(["manana"], service=bulletin_service, session_factory=session_factory) == 0

    bulletin = db.query(models.Bulletin).one()
    assert bulletin.type == "morning"
    assert bulletin.status == "sent"
    assert [message.to for message, _ in mailer.sent] == ["lector@example.com"]

    # Second run the same day finds the sent bulletin and leaves it alone
    assert main(["morning"], service=bulletin_service, session_factory=session_factory) == 0
    assert len(mailer.sent) == 1


def test_job_dry_run_keeps_draft(db, mailer, reader, make_article, bulletin_service, session_factory):
    make_article(title="Hoy")

    assert main(["morning", "--dry-run"], service=bulletin_service, session_factory=session_factory) == 0

    assert db.query(models.Bulletin).one().status == "draft"
    assert mailer.sent == []


def test_job_without_sports_content(db, make_article, bulletin_service, session_factory):
    make_article(title="Cabildo", tags=["politica"])

    assert main(["deportes"], service=bulletin_service, session_factory=session_factory) == 0
    assert db.query(models.Bulletin).count() == 0


def test_job_reports_failed_delivery(db, mailer, reader, make_article, bulletin_service, session_factory):
    make_article(title="Hoy")
    mailer.fail_all = True

    assert main(["morning"], service=bulletin_service, session_factory=session_factory) == 1
