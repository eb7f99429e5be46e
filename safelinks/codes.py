import logging
import secrets
import string
from typing import Callable

from safelinks.errors import UniquenessExhausted

ALPHABET = string.ascii_letters + string.digits

logger = logging.getLogger("safelinks.codes")


def generate_code(length: int = 6) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_unique_code(taken: Callable[[str], bool], length: int = 6, max_attempts: int = 5) -> str:
    """Draw codes until ``taken`` says one is free.

    ``taken`` may also claim the code it is asked about, reporting an insert
    lost to another writer as taken, so every kind of collision counts
    against the same ``max_attempts``.

    62**6 codes make a collision per draw very unlikely; the cap only keeps a
    broken or saturated store from looping forever.
    """
    for attempt in range(1, max_attempts + 1):
        code = generate_code(length)
        if not taken(code):
            return code
        logger.warning("Code collision on attempt %d/%d", attempt, max_attempts)
    raise UniquenessExhausted()
