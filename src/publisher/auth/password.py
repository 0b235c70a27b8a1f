"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor comes from Settings.bcrypt_rounds (10 by default);
each extra round doubles the cost.

Hashing is CPU-bound, so the async helpers push it onto a worker
thread instead of blocking the event loop.
"""

import asyncio

import bcrypt

# bcrypt only looks at the first 72 bytes of a password.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """bcrypt hasher bound to a fixed work factor.

    Learn: a dummy hash is computed once at construction so that a login
    for an unknown email still pays for a full bcrypt comparison. The
    response time then doesn't reveal whether the account exists.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash = self.hash("publisher-timing-dummy")

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def burn(self, password: str) -> None:
        """Spend the same time as a real check, against the dummy hash."""
        self.verify(password, self._dummy_hash)

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    async def burn_async(self, password: str) -> None:
        await asyncio.to_thread(self.burn, password)
