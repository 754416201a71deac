# noticias/models/bulletin.py

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, UniqueConstraint
from noticias.db.base_class import Base
from noticias.utils.dates import utcnow


class Bulletin(Base):
    __tablename__ = "bulletins"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(16), nullable=False, index=True)
    publish_date = Column(Date, nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    html = Column(Text, nullable=False)
    text = Column(Text)

    # Plain id list; entries may point at deleted articles
    article_ids = Column(JSON, default=list)
    # Point-in-time copy of id/title/slug/category/image, never re-synced
    article_snapshot = Column(JSON, default=list)

    status = Column(String(16), default="draft", nullable=False)
    sent = Column(Integer, default=0, nullable=False)
    delivered = Column(Integer, default=0, nullable=False)
    opened = Column(Integer, default=0, nullable=False)
    clicked = Column(Integer, default=0, nullable=False)
    bounced = Column(Integer, default=0, nullable=False)
    unsubscribed = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    sent_at = Column(DateTime)

    __table_args__ = (
        UniqueConstraint("type", "publish_date", name="uq_bulletin_type_date"),
    )

    @property
    def stats(self):
        return {
            "sent": self.sent,
            "delivered": self.delivered,
            "opened": self.opened,
            "clicked": self.clicked,
            "bounced": self.bounced,
            "unsubscribed": self.unsubscribed,
        }
