"""Id factories injected into the generator and the session store."""

from __future__ import annotations
import itertools
import uuid
from typing import Callable

IdFactory = Callable[[], str]


def uuid_ids(prefix: str = "") -> IdFactory:
    return lambda: f"{prefix}{uuid.uuid4().hex}"


def counter_ids(prefix: str = "id-", start: int = 1) -> IdFactory:
    """Deterministic ids for tests and replays: id-1, id-2, ..."""
    counter = itertools.count(start)
    return lambda: f"{prefix}{next(counter)}"
