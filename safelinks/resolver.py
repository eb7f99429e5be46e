"""Decides what a visit to ``/{code}`` turns into.

A code with no record is ``UNKNOWN``. A record with no reports redirects
straight away (``TRUSTED``) unless strict mode is on and its host is not
trusted (``EXTERNAL_UNCONFIRMED``). Once a report exists the code is
``REPORTED`` for good. Both warning states are cleared per visit by the
``confirmed`` query flag, which the server does not sign or remember: it is a
click-through, not an access control.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from sqlalchemy.orm import Session

from safelinks import crud, models
from safelinks.validator import matches_domain


class State(str, Enum):
    UNKNOWN = "unknown"
    TRUSTED = "trusted"
    REPORTED = "reported"
    EXTERNAL_UNCONFIRMED = "external_unconfirmed"
    CONFIRMED = "confirmed"


@dataclass
class Resolution:
    state: State
    link: models.ShortUrl | None = None

    @property
    def redirects(self) -> bool:
        return self.state in (State.TRUSTED, State.CONFIRMED)

    @property
    def needs_confirmation(self) -> bool:
        return self.state in (State.REPORTED, State.EXTERNAL_UNCONFIRMED)


def is_trusted_host(url: str, trusted_hosts) -> bool:
    host = (urlsplit(url).hostname or "").rstrip(".")
    return any(matches_domain(host, trusted) for trusted in trusted_hosts)


def resolve(
    db: Session,
    code: str,
    *,
    confirmed: bool = False,
    strict_external: bool = False,
    trusted_hosts=(),
) -> Resolution:
    link = crud.find_by_code(db, code)
    if link is None:
        return Resolution(State.UNKNOWN)
    if crud.has_reports(db, code):
        state = State.REPORTED
    elif strict_external and not is_trusted_host(link.original_url, trusted_hosts):
        state = State.EXTERNAL_UNCONFIRMED
    else:
        return Resolution(State.TRUSTED, link)
    if confirmed:
        return Resolution(State.CONFIRMED, link)
    return Resolution(state, link)
