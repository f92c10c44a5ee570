"""Deterministic seed derivation for generation streams."""
from __future__ import annotations

import hashlib
import random


def hash_seed(*parts: object) -> int:
    payload = "|".join(str(part) for part in parts)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return int(digest[:16], 16)


def derive_rng(*parts: object) -> random.Random:
    """Return an independent random stream keyed by ``parts``."""

    return random.Random(hash_seed(*parts))


__all__ = ["hash_seed", "derive_rng"]
