# noticias/crud/crud_bulletin.py
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
from noticias import models


def create_bulletin(db: Session, **fields) -> models.Bulletin:
    db_bulletin = models.Bulletin(**fields)
    db.add(db_bulletin)
    db.commit()
    db.refresh(db_bulletin)
    return db_bulletin


def get_bulletin(db: Session, bulletin_id: int) -> Optional[models.Bulletin]:
    return db.query(models.Bulletin).filter(models.Bulletin.id == bulletin_id).first()


def get_bulletin_by_type_and_date(db: Session, bulletin_type: str, publish_date: date) -> Optional[models.Bulletin]:
    return db.query(models.Bulletin)\
             .filter(models.Bulletin.type == bulletin_type,
                     models.Bulletin.publish_date == publish_date)\
             .first()


def update_bulletin(db: Session, db_bulletin: models.Bulletin, **fields) -> models.Bulletin:
    for key, value in fields.items():
        setattr(db_bulletin, key, value)
    db.commit()
    db.refresh(db_bulletin)
    return db_bulletin
