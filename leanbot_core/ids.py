"""Session and message identifier helpers."""

from __future__ import annotations

import random
import uuid


def generate_uuid() -> str:
    """Return a canonical version-4 UUID string (8-4-4-4-12 lowercase hex).

    Falls back to the non-secure PRNG when the OS random source is missing;
    ``uuid.UUID(version=4)`` still pins the version and variant bits.
    """

    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return str(uuid.UUID(int=random.getrandbits(128), version=4))


def new_session_id(prefix: str = "LSC-") -> str:
    return f"{prefix}{generate_uuid()}"


def new_message_id() -> str:
    return generate_uuid()
