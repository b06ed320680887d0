"""FastAPI dependency injection for Bearer token verification."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jwtkit.core.errors import JWTVerificationError, TokenExpiredError
from jwtkit.tokens.types import DecodedToken
from jwtkit.tokens.verifier import Verifier

logger = logging.getLogger(__name__)

_security = HTTPBearer()


class BearerTokenVerifier:
    """Dependency that verifies the request's Bearer token.

    Usage::

        require_token = BearerTokenVerifier(verifier)

        @app.get("/me")
        async def me(token: Annotated[DecodedToken, Depends(require_token)]): ...
    """

    def __init__(self, verifier: Verifier) -> None:
        self._verifier = verifier

    async def __call__(
        self,
        credentials: Annotated[HTTPAuthorizationCredentials, Depends(_security)],
    ) -> DecodedToken:
        try:
            return self._verifier.verify(credentials.credentials)
        except TokenExpiredError as exc:
            logger.info("Bearer token expired on %s", exc.expired_on.isoformat())
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
        except JWTVerificationError as exc:
            logger.info("Bearer token rejected: %s", type(exc).__name__)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
