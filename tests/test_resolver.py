from safelinks import crud
from safelinks.resolver import State, is_trusted_host, resolve


def add(db, code="abc123", url="https://example.com/"):
    return crud.insert_url(db, code, url)


def test_unknown_code(db):
    resolution = resolve(db, "ZZZZZZ")
    assert resolution.state is State.UNKNOWN
    assert resolution.link is None
    assert not resolution.redirects


def test_unreported_code_is_trusted(db):
    add(db)
    resolution = resolve(db, "abc123")
    assert resolution.state is State.TRUSTED
    assert resolution.redirects
    assert resolution.link.original_url == "https://example.com/"


def test_report_moves_code_to_reported_for_good(db):
    add(db)
    crud.add_report(db, "abc123", "phishing")
    for _ in range(3):
        resolution = resolve(db, "abc123")
        assert resolution.state is State.REPORTED
        assert resolution.needs_confirmation
        assert not resolution.redirects


def test_confirmation_flag_lets_reported_code_through(db):
    add(db)
    crud.add_report(db, "abc123", "phishing")
    resolution = resolve(db, "abc123", confirmed=True)
    assert resolution.state is State.CONFIRMED
    assert resolution.redirects
    # The flag is per visit; without it the warning comes back
    assert resolve(db, "abc123").state is State.REPORTED


def test_confirmed_flag_on_trusted_code_is_plain_redirect(db):
    add(db)
    assert resolve(db, "abc123", confirmed=True).state is State.TRUSTED


def test_strict_mode_asks_before_untrusted_hosts(db):
    add(db, "abc123", "https://unknown.example.net/x")
    add(db, "def456", "https://docs.python.org/3/")
    strict = {"strict_external": True, "trusted_hosts": ("python.org",)}

    assert resolve(db, "abc123", **strict).state is State.EXTERNAL_UNCONFIRMED
    assert resolve(db, "def456", **strict).state is State.TRUSTED
    assert resolve(db, "abc123", confirmed=True, **strict).state is State.CONFIRMED


def test_reported_wins_over_trusted_host(db):
    add(db, "def456", "https://docs.python.org/3/")
    crud.add_report(db, "def456", "spam")
    state = resolve(db, "def456", strict_external=True, trusted_hosts=("python.org",)).state
    assert state is State.REPORTED


def test_is_trusted_host():
    assert is_trusted_host("https://www.Example.com/x", ("example.com",))
    assert not is_trusted_host("https://example.com.evil.net/", ("example.com",))
    assert not is_trusted_host("https://example.com/", ())
