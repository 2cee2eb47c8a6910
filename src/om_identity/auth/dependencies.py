"""FastAPI dependencies: get_current_identity.

Usage in any protected router:
    from src.om_identity.auth.dependencies import get_current_identity

    @router.get("/protected")
    async def protected(identity: Identity = Depends(get_current_identity)):
        ...
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.om_common.errors import UnauthorizedError
from src.om_identity.domain.models import Identity, IdentityVerifierProtocol

# auto_error=False: a missing header must produce the same 401 as a bad token
_bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> IdentityVerifierProtocol:
    """Verifier built in the app lifespan and stored on app.state."""
    verifier: IdentityVerifierProtocol = request.app.state.identity_verifier
    return verifier


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    verifier: IdentityVerifierProtocol = Depends(get_identity_verifier),
) -> Identity:
    """Verify the Bearer credential once; raise UnauthorizedError (401) on any failure."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    identity = await verifier.verify(credentials.credentials)
    if identity is None or not identity.user_id:
        raise UnauthorizedError()
    return identity
