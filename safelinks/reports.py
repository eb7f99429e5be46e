import logging

from markupsafe import escape
from sqlalchemy.orm import Session

from safelinks import config, crud, models
from safelinks.errors import NotFoundError, ValidationError
from safelinks.validator import is_valid_code

MAX_REASON_LENGTH = 1000

logger = logging.getLogger("safelinks.reports")


def file_report(db: Session, code: str, reason: str) -> models.Report:
    """Record an abuse report against an existing code.

    The reason is stored HTML-escaped so it can be rendered later without
    further care. Checks run format, existence, then reason. Existence is
    checked before the insert, not inside one transaction with it.
    """
    code = (code or "").strip()
    reason = (reason or "").strip()
    if not is_valid_code(code, config.CODE_LENGTH):
        raise ValidationError("InvalidFormat", "Invalid short code format")
    if crud.find_by_code(db, code) is None:
        raise NotFoundError()
    if not reason:
        raise ValidationError("MissingReason", "Please provide a reason for the report")
    if len(reason) > MAX_REASON_LENGTH:
        raise ValidationError("ReasonTooLong", f"Reason is too long (max {MAX_REASON_LENGTH} characters)")

    report = crud.add_report(db, code, str(escape(reason)))
    logger.info("Report filed against %s", code)
    return report
