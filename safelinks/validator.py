"""Admission checks for URLs submitted to the shortener.

Everything here is string matching on the submitted URL. Hostnames are never
resolved, so a public name pointing at a private address passes. Treat this as
a best-effort filter in front of the redirect, not a complete SSRF defense.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_CODE_LENGTH = 6
_CODE_CHARS = re.compile(r"[A-Za-z0-9]+")
# RFC 3986 authority characters plus non-ASCII (IDN hosts). Anything else,
# a backslash above all, is read differently by browsers than by urlsplit

_AUTHORITY = re.compile(r"[\u0080-\U0010ffffA-Za-z0-9\-._~%!$&'()*+,;=:@\[\]]+")

_IPV4_LITERAL = re.compile(r"(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})")
_LOOPBACK_NAMES = {"localhost", "127.0.0.1", "::1"}


class Reason(str, Enum):
    EMPTY = "Empty"
    TOO_LONG = "TooLong"
    MALFORMED_URL = "MalformedUrl"
    DISALLOWED_PROTOCOL = "DisallowedProtocol"
    PRIVATE_ADDRESS = "PrivateAddress"
    CHAINED_SHORTENER = "ChainedShortener"
    SELF_REFERENTIAL = "SelfReferential"


MESSAGES = {
    Reason.EMPTY: "originalUrl is required",
    Reason.TOO_LONG: f"URL is too long (max {MAX_URL_LENGTH} characters)",
    Reason.MALFORMED_URL: "Invalid URL format",
    Reason.DISALLOWED_PROTOCOL: "Only http and https URLs can be shortened",
    Reason.PRIVATE_ADDRESS: "URLs pointing to local or private network addresses are not allowed",
    Reason.CHAINED_SHORTENER: "URLs from other link shorteners are not allowed",
    Reason.SELF_REFERENTIAL: "URLs pointing back to this service are not allowed",
}


@dataclass(frozen=True)
class Verdict:
    reason: Reason | None = None
    host: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str:
        return MESSAGES[self.reason] if self.reason else ""


def is_private_ipv4(host: str) -> bool:
    match = _IPV4_LITERAL.fullmatch(host)
    if not match:
        return False
    first, second = int(match.group(1)), int(match.group(2))
    return (
        first in (127, 10)
        or (first, second) == (192, 168)
        or (first == 172 and 16 <= second <= 31)
    )


def matches_domain(host: str, domain: str) -> bool:
    """True when ``host`` is ``domain`` or one of its subdomains."""
    domain = domain.lower().strip(".")
    return bool(domain) and (host == domain or host.endswith("." + domain))


def _hostname(url: str) -> tuple[str, str | None] | None:
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return None
    if not parts.scheme:
        return None
    if parts.netloc and not _AUTHORITY.fullmatch(parts.netloc):
        return None
    return parts.scheme.lower(), host.rstrip(".") if host else None


def validate(url: str, *, own_domain: str | None = None, blocked_domains=()) -> Verdict:
    if not url:
        return Verdict(Reason.EMPTY)
    if len(url) > MAX_URL_LENGTH:
        return Verdict(Reason.TOO_LONG)

    parsed = _hostname(url)
    if parsed is None:
        return Verdict(Reason.MALFORMED_URL)
    scheme, host = parsed
    if scheme not in ALLOWED_SCHEMES:
        return Verdict(Reason.DISALLOWED_PROTOCOL)
    if not host:
        return Verdict(Reason.MALFORMED_URL)

    if host in _LOOPBACK_NAMES or is_private_ipv4(host):
        return Verdict(Reason.PRIVATE_ADDRESS, host)
    if any(matches_domain(host, domain) for domain in blocked_domains):
        return Verdict(Reason.CHAINED_SHORTENER, host)
    if own_domain and matches_domain(host, own_domain):
        return Verdict(Reason.SELF_REFERENTIAL, host)
    return Verdict(host=host)


def is_valid_code(code: str | None, length: int = DEFAULT_CODE_LENGTH) -> bool:
    return bool(code) and len(code) == length and _CODE_CHARS.fullmatch(code) is not None
