# noticias/services/bulletin.py

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from noticias import crud, models
from noticias.core.exceptions import InvalidBulletinTypeError, NotFoundError
from noticias.schemas import BULLETIN_TYPE_ALIASES, ArticleSnapshot, BulletinContent, BulletinType
from noticias.services.mail import EmailPriority, MailMessage, MailSender
from noticias.utils.dates import hours_ago, start_of_day, utcnow
from noticias.utils.templating import render_email

logger = logging.getLogger(__name__)

UNSUBSCRIBE_PLACEHOLDER = "{{UNSUBSCRIBE_TOKEN}}"

# Case-sensitive membership against tags or keywords
SPORTS_KEYWORDS = ("deportes", "deporte", "fútbol", "futbol", "tuzos", "pachuca")

TITLES = {
    BulletinType.MORNING: "☀️ Buenos días Pachuca",
    BulletinType.EVENING: "🌆 Resumen Vespertino",
    BulletinType.WEEKLY: "📅 Lo Mejor de la Semana",
    BulletinType.SPORTS: "⚽ Deportes en Pachuca",
}


def parse_bulletin_type(value: Union[str, BulletinType]) -> BulletinType:
    """Accept the English type names and the Spanish path names."""
    if isinstance(value, BulletinType):
        return value
    key = value.strip().lower()
    if key in BULLETIN_TYPE_ALIASES:
        return BULLETIN_TYPE_ALIASES[key]
    try:
        return BulletinType(key)
    except ValueError:
        raise InvalidBulletinTypeError(f"Tipo de boletín no válido: {value}") from None


def personalize(body: Optional[str], unsubscribe_token: str) -> Optional[str]:
    if body is None:
        return None
    return body.replace(UNSUBSCRIBE_PLACEHOLDER, unsubscribe_token)


def snapshot(article: models.Article, category_label: str) -> ArticleSnapshot:
    return ArticleSnapshot(
        id=str(article.id),
        title=article.title,
        slug=article.slug,
        category=category_label,
        featured_image=article.image("original"),
    )


class BulletinService:
    """Builds the four bulletin digests and delivers stored bulletins to subscribers."""

    def __init__(self, mail_sender: MailSender, frontend_url: str, timezone_name: str,
                 project_name: str = "Noticias Pachuca"):
        self.mail_sender = mail_sender
        self.frontend_url = frontend_url.rstrip("/")
        self.timezone_name = timezone_name
        self.project_name = project_name

    def _local_date_label(self, now: datetime) -> str:
        local = now.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(self.timezone_name))
        return f"{local.day}/{local.month}/{local.year}"

    def _local_date(self, now: datetime):
        return now.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(self.timezone_name)).date()

    def render_html(self, bulletin_type: BulletinType, articles: List[ArticleSnapshot],
                    unsubscribe_token: str = UNSUBSCRIBE_PLACEHOLDER, now: datetime = None) -> str:
        now = now or utcnow()
        return render_email(
            "bulletin",
            title=TITLES[bulletin_type],
            articles=articles,
            frontend_url=self.frontend_url,
            unsubscribe_token=unsubscribe_token,
            project_name=self.project_name,
            year=self._local_date(now).year,
        )

    def render_text(self, bulletin_type: BulletinType, articles: List[ArticleSnapshot]) -> str:
        lines = [TITLES[bulletin_type], ""]
        for article in articles:
            lines.append(f"- {article.title} ({article.category})")
            lines.append(f"  {self.frontend_url}/noticia/{article.slug}")
        lines.append("")
        lines.append(f"Desuscribirse: {self.frontend_url}/desuscribir?token={UNSUBSCRIBE_PLACEHOLDER}")
        return "\n".join(lines)

    def _content(self, bulletin_type: BulletinType, subject: str, articles: List[ArticleSnapshot],
                 now: datetime) -> BulletinContent:
        return BulletinContent(
            type=bulletin_type,
            subject=subject,
            html=self.render_html(bulletin_type, articles, now=now),
            text=self.render_text(bulletin_type, articles),
            articles=articles,
        )

    def generate_morning(self, db: Session, now: datetime = None) -> BulletinContent:
        """Five most recent articles of the last 24 hours."""
        now = now or utcnow()
        articles = crud.get_published_since(
            db, hours_ago(24, now), models.Article.published_at.desc(), limit=5)
        snapshots = [snapshot(article, "General") for article in articles]
        subject = f"☀️ Buenos días Pachuca - {self._local_date_label(now)}"
        logger.info(f"Morning bulletin generated with {len(snapshots)} articles")
        return self._content(BulletinType.MORNING, subject, snapshots, now)

    def generate_evening(self, db: Session, now: datetime = None) -> BulletinContent:
        """Three most viewed articles published since local midnight."""
        now = now or utcnow()
        articles = crud.get_published_since(
            db, start_of_day(self.timezone_name, now), models.Article.views.desc(), limit=3)
        snapshots = [snapshot(article, "General") for article in articles]
        subject = f"🌆 Resumen vespertino - {self._local_date_label(now)}"
        logger.info(f"Evening bulletin generated with {len(snapshots)} articles")
        return self._content(BulletinType.EVENING, subject, snapshots, now)

    def generate_weekly(self, db: Session, now: datetime = None) -> BulletinContent:
        """Ten most viewed articles of the last 7 days."""
        now = now or utcnow()
        articles = crud.get_published_since(
            db, hours_ago(7 * 24, now), models.Article.views.desc(), limit=10)
        snapshots = [snapshot(article, "General") for article in articles]
        subject = f"📅 Lo mejor de la semana - {self.project_name}"
        logger.info(f"Weekly bulletin generated with {len(snapshots)} articles")
        return self._content(BulletinType.WEEKLY, subject, snapshots, now)

    def generate_sports(self, db: Session, now: datetime = None) -> Optional[BulletinContent]:
        """
        Five most recent sports articles of the last 24 hours.

        Returns None when there is no sports content, which is not an error.
        """
        now = now or utcnow()
        is_sports = (
            models.Article.tags.any(models.ArticleTag.name.in_(SPORTS_KEYWORDS))
            | models.Article.keywords.any(models.ArticleKeyword.name.in_(SPORTS_KEYWORDS))
        )
        articles = crud.get_published_since(
            db, hours_ago(24, now), models.Article.published_at.desc(), limit=5, criteria=(is_sports,))
        if not articles:
            logger.info("No sports articles in the last 24 hours")
            return None
        snapshots = [snapshot(article, "Deportes") for article in articles]
        subject = f"⚽ Deportes en Pachuca - {self._local_date_label(now)}"
        logger.info(f"Sports bulletin generated with {len(snapshots)} articles")
        return self._content(BulletinType.SPORTS, subject, snapshots, now)

    def generate(self, db: Session, bulletin_type: Union[str, BulletinType],
                 now: datetime = None) -> Optional[BulletinContent]:
        bulletin_type = parse_bulletin_type(bulletin_type)
        generators = {
            BulletinType.MORNING: self.generate_morning,
            BulletinType.EVENING: self.generate_evening,
            BulletinType.WEEKLY: self.generate_weekly,
            BulletinType.SPORTS: self.generate_sports,
        }
        return generators[bulletin_type](db, now=now)

    def create_bulletin(self, db: Session, bulletin_type: Union[str, BulletinType],
                        now: datetime = None) -> Optional[models.Bulletin]:
        """
        Store today's bulletin of the given type as a draft.

        Returns the stored bulletin when one already exists for the day, and
        None when the type has no content (sports only).
        """
        now = now or utcnow()
        bulletin_type = parse_bulletin_type(bulletin_type)
        publish_date = self._local_date(now)

        existing = crud.get_bulletin_by_type_and_date(db, bulletin_type.value, publish_date)
        if existing is not None:
            logger.info(f"Bulletin {bulletin_type.value} for {publish_date} already exists (ID: {existing.id})")
            return existing

        content = self.generate(db, bulletin_type, now=now)
        if content is None:
            return None

        db_bulletin = crud.create_bulletin(
            db,
            type=bulletin_type.value,
            publish_date=publish_date,
            subject=content.subject,
            html=content.html,
            text=content.text,
            article_ids=[int(article.id) for article in content.articles],
            article_snapshot=[article.model_dump() for article in content.articles],
            status="draft",
        )
        logger.info(f"Bulletin {bulletin_type.value} stored with ID: {db_bulletin.id}")
        return db_bulletin

    def send_bulletin(self, db: Session, bulletin_id: int) -> models.Bulletin:
        """
        Deliver a draft bulletin to every subscriber that opted into its type.

        A bulletin that is not a draft is returned unchanged, so a bulletin is
        never delivered twice.
        """
        db_bulletin = crud.get_bulletin(db, bulletin_id)
        if db_bulletin is None:
            raise NotFoundError(f"Boletín {bulletin_id} no encontrado")

        if db_bulletin.status != "draft":
            logger.warning(f"Bulletin {bulletin_id} is {db_bulletin.status}, only drafts are sent")
            return db_bulletin

        recipients = crud.get_bulletin_recipients(db, db_bulletin.type)
        logger.info(f"Sending bulletin {bulletin_id} to {len(recipients)} subscribers")
        crud.update_bulletin(db, db_bulletin, status="sending")

        messages = [
            MailMessage(
                to=subscriber.email,
                subject=db_bulletin.subject,
                html=personalize(db_bulletin.html, subscriber.unsubscribe_token),
                text=personalize(db_bulletin.text, subscriber.unsubscribe_token),
                priority=EmailPriority.NORMAL,
            )
            for subscriber in recipients
        ]
        results = self.mail_sender.send_bulk(messages)

        sent = sum(1 for result in results if result.ok)
        failed = len(results) - sent
        status = "failed" if results and sent == 0 else "sent"
        crud.update_bulletin(
            db,
            db_bulletin,
            status=status,
            sent=db_bulletin.sent + sent,
            bounced=db_bulletin.bounced + failed,
            sent_at=utcnow(),
        )
        logger.info(f"Bulletin {bulletin_id} {status}: {sent} sent, {failed} failed")
        return db_bulletin
