"""Generation and bookkeeping of short codes."""

from __future__ import annotations

import hashlib
import random
import string

CHARACTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits
DEFAULT_LENGTH = 6
MAX_CUSTOM_LENGTH = 20


def _url_hash(url: str) -> int:
    """A stable 64-bit hash of ``url``."""
    digest = hashlib.blake2b(url.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "little")


class HashGenerator:
    """Produces short codes and remembers which ones are taken."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._used: set[str] = set()

    def generate_short_code(self, length: int = DEFAULT_LENGTH) -> str:
        """A random code not yet in use; it is marked as used."""
        while True:
            code = "".join(self._rng.choice(CHARACTERS) for _ in range(length))
            if not self.is_code_used(code):
                break
        self.add_used_code(code)
        return code

    def generate_from_url(self, url: str, length: int = DEFAULT_LENGTH) -> str:
        """A code derived from ``url``; falls back to a random one if taken."""
        digest = _url_hash(url)
        code = "".join(
            CHARACTERS[(digest >> (i * 8)) % len(CHARACTERS)] for i in range(length)
        )
        if self.is_code_used(code):
            return self.generate_short_code(length)
        self.add_used_code(code)
        return code

    def is_code_used(self, code: str) -> bool:
        return code in self._used

    def add_used_code(self, code: str) -> None:
        self._used.add(code)

    def remove_used_code(self, code: str) -> None:
        self._used.discard(code)

    def clear_used_codes(self) -> None:
        self._used.clear()

    def used_codes_count(self) -> int:
        return len(self._used)

    def generate_custom_code(self, custom_code: str) -> bool:
        """Claim ``custom_code`` if it is well formed and free."""
        if not custom_code or len(custom_code) > MAX_CUSTOM_LENGTH:
            return False
        if any(c not in CHARACTERS for c in custom_code):
            return False
        if self.is_code_used(custom_code):
            return False
        self.add_used_code(custom_code)
        return True