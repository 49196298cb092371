from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from backend.auth.jwt_handler import TokenClaims, TokenService, get_token_service

# The scheme word in front of the token is not checked, so HTTPBearer is too strict here.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def extract_token(authorization: str | None) -> str | None:
    parts = (authorization or "").split()
    if len(parts) < 2:
        return None
    return parts[1]


def get_current_user(
    request: Request,
    authorization: str | None = Depends(authorization_header),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    token = extract_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )

    claims = token_service.verify(token)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    request.state.user = claims
    return claims
