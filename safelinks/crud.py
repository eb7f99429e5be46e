import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from safelinks import models
from safelinks.errors import StoreError

logger = logging.getLogger("safelinks.store")


class CodeCollision(Exception):
    """The unique index on ``urls.code`` rejected an insert."""


def find_by_url(db: Session, original_url: str) -> models.ShortUrl | None:
    return (
        db.query(models.ShortUrl)
        .filter_by(original_url=original_url)
        .order_by(models.ShortUrl.id)
        .first()
    )


def find_by_code(db: Session, code: str) -> models.ShortUrl | None:
    return db.query(models.ShortUrl).filter_by(code=code).first()


def code_exists(db: Session, code: str) -> bool:
    return db.query(models.ShortUrl.id).filter_by(code=code).first() is not None


def insert_url(db: Session, code: str, original_url: str) -> models.ShortUrl:
    link = models.ShortUrl(code=code, original_url=original_url)
    db.add(link)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Insert rejected by unique index for code %s", code)
        raise CodeCollision(code) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to insert link %s", code)
        raise StoreError() from exc
    db.refresh(link)
    return link


def add_report(db: Session, code: str, reason: str) -> models.Report:
    report = models.Report(url_code=code, reason=reason)
    db.add(report)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store report for %s", code)
        raise StoreError() from exc
    db.refresh(report)
    return report


def has_reports(db: Session, code: str) -> bool:
    return db.query(models.Report.id).filter_by(url_code=code).first() is not None


def count_reports(db: Session, code: str) -> int:
    return db.query(models.Report).filter_by(url_code=code).count()


def count_urls(db: Session) -> int:
    return db.query(models.ShortUrl).count()
