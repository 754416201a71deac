# noticias/crud/crud_subscriber.py

import logging
from datetime import datetime
from sqlalchemy.orm import Session
from noticias import models

logger = logging.getLogger(__name__)


def create_subscriber(db: Session, **fields) -> models.Subscriber:
    logger.info(f"Creating new subscriber for email: {fields.get('email')}")
    try:
        db_subscriber = models.Subscriber(**fields)
        db.add(db_subscriber)
        db.commit()
        db.refresh(db_subscriber)
        logger.info(f"Subscriber created successfully. ID: {db_subscriber.id}")
        return db_subscriber
    except Exception as e:
        db.rollback()
        logger.error(f"Error occurred while saving subscriber: {str(e)}", exc_info=True)
        raise


def save_subscriber(db: Session, db_subscriber: models.Subscriber) -> models.Subscriber:
    try:
        db.commit()
        db.refresh(db_subscriber)
        return db_subscriber
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating subscriber {db_subscriber.email}: {str(e)}", exc_info=True)
        raise


def get_subscriber_by_email(db: Session, email: str):
    logger.info(f"Attempting to retrieve subscriber for email: {email}")
    subscriber = db.query(models.Subscriber).filter(models.Subscriber.email == email).first()
    if subscriber:
        logger.info(f"Subscriber found for email: {email}")
    else:
        logger.info(f"No subscriber found for email: {email}")
    return subscriber


def get_subscriber_by_confirmation_token(db: Session, token: str, now: datetime):
    """Pending subscriber whose confirmation token matches and has not expired."""
    return db.query(models.Subscriber)\
             .filter(models.Subscriber.confirmation_token == token,
                     models.Subscriber.confirmation_token_expires > now)\
             .first()


def get_subscriber_by_unsubscribe_token(db: Session, token: str):
    return db.query(models.Subscriber).filter(models.Subscriber.unsubscribe_token == token).first()


def get_bulletin_recipients(db: Session, preference: str):
    """Active, confirmed subscribers that opted into the given bulletin type."""
    flag = getattr(models.Subscriber, preference)
    return db.query(models.Subscriber)\
             .filter(models.Subscriber.is_active.is_(True),
                     models.Subscriber.is_confirmed.is_(True),
                     flag.is_(True))\
             .order_by(models.Subscriber.id.asc())\
             .all()
