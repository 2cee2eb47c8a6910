"""Identity domain model and verifier contract."""
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    name: str | None = None


class IdentityVerifierProtocol(Protocol):
    async def verify(self, credential: str) -> Identity | None:
        """Exchange a bearer credential for a verified identity.

        Returns None for an invalid credential AND for any transport failure;
        callers must not be able to tell the two apart.
        """
        ...
