# noticias/models/subscriber.py

from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint
from noticias.db.base_class import Base
from noticias.utils.dates import utcnow

PREFERENCE_FIELDS = ("morning", "evening", "weekly", "sports")


class Subscriber(Base):
    __tablename__ = "newsletter_subscribers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255))

    # One flag per bulletin type
    morning = Column(Boolean, default=False, nullable=False)
    evening = Column(Boolean, default=False, nullable=False)
    weekly = Column(Boolean, default=False, nullable=False)
    sports = Column(Boolean, default=False, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    confirmed_at = Column(DateTime)
    subscribed_at = Column(DateTime, default=utcnow)
    unsubscribed_at = Column(DateTime)
    unsubscribe_reason = Column(String(500))

    unsubscribe_token = Column(String(64), unique=True, index=True, nullable=False)
    confirmation_token = Column(String(64), unique=True, index=True, nullable=True)
    confirmation_token_expires = Column(DateTime, nullable=True)

    source = Column(String(50), default="api")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "(confirmation_token IS NULL) = (confirmation_token_expires IS NULL)",
            name="ck_subscriber_confirmation_pair",
        ),
    )

    @property
    def preferences(self):
        return {field: getattr(self, field) for field in PREFERENCE_FIELDS}

    def __repr__(self):
        return f"<Subscriber {self.email}>"
