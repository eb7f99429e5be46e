import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from safelinks import codes, config, crud, models
from safelinks.errors import ValidationError
from safelinks.validator import validate

logger = logging.getLogger("safelinks.shortener")

# Six-letter paths already taken by routes; a code equal to one could never be visited
RESERVED_CODES = {"health", "config", "static"}


@dataclass
class ShortenResult:
    link: models.ShortUrl
    existing: bool


def shorten(
    db: Session,
    original_url: str,
    *,
    own_domain: str | None = None,
    blocked_domains=None,
    length: int | None = None,
    max_attempts: int | None = None,
) -> ShortenResult:
    """Validate ``original_url`` and return its short link, creating one if needed.

    Lookup and insert are separate round-trips, so two concurrent requests for
    the same URL can both create a record. Each gets its own code; the unique
    index on ``urls.code`` is what rules out two records sharing one.

    Codes already in the store and inserts lost to that index share one
    budget of ``max_attempts`` draws.
    """
    if blocked_domains is None:
        blocked_domains = config.BLOCKED_SHORTENER_DOMAINS
    length = length or config.CODE_LENGTH
    max_attempts = max_attempts or config.MAX_CODE_ATTEMPTS

    url = (original_url or "").strip()
    verdict = validate(url, own_domain=own_domain, blocked_domains=blocked_domains)
    if not verdict.ok:
        logger.info("Rejected URL (%s): %.200s", verdict.reason.value, url)
        raise ValidationError(verdict.reason.value, verdict.message)

    link = crud.find_by_url(db, url)
    if link:
        logger.info("Reusing code %s for %.200s", link.code, url)
        return ShortenResult(link, existing=True)

    created = []

    def taken(candidate):
        if candidate in RESERVED_CODES or crud.code_exists(db, candidate):
            return True
        try:
            created.append(crud.insert_url(db, candidate, url))
        except crud.CodeCollision:
            # Lost a race for this code after the existence check
            return True
        return False

    codes.generate_unique_code(taken, length=length, max_attempts=max_attempts)
    link = created[0]
    logger.info("Created code %s for %.200s", link.code, url)
    return ShortenResult(link, existing=False)
