# noticias/crud/crud_contact_message.py

import logging
from sqlalchemy.orm import Session
from noticias import models

logger = logging.getLogger(__name__)


def create_contact_message(db: Session, **fields) -> models.ContactMessage:
    logger.info(f"Saving contact message from: {fields.get('email')}")
    db_message = models.ContactMessage(**fields)
    db.add(db_message)
    db.commit()
    db.refresh(db_message)
    logger.info(f"Contact message saved. ID: {db_message.id}")
    return db_message


def get_contact_message(db: Session, message_id: int):
    return db.query(models.ContactMessage).filter(models.ContactMessage.id == message_id).first()
