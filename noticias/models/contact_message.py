# noticias/models/contact_message.py

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, JSON
from noticias.db.base_class import Base
from noticias.utils.dates import utcnow


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    status = Column(String(16), default="pending", nullable=False, index=True)
    spam_score = Column(Float, default=0.0, nullable=False)
    spam_reasons = Column(JSON, default=list)

    user_agent = Column(String(500), default="")
    ip_address = Column(String(64), default="")
    site_domain = Column(String(255))

    created_at = Column(DateTime, default=utcnow)
