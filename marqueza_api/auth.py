from typing import Optional

from fastapi import Cookie, Header, HTTPException

from .database import TOKENS


def _extract_token(authorization: Optional[str], auth_token: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return auth_token


async def bearer_token(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None, alias="authToken"),
) -> str:
    token = _extract_token(authorization, auth_token)
    if not token:
        raise HTTPException(status_code=401, detail="Access denied, no token provided")
    return token


async def verify_token(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None, alias="authToken"),
) -> str:
    """Resolves the authenticated client id or rejects the request with 401."""
    token = await bearer_token(authorization, auth_token)
    client_id = TOKENS.get(token)
    if client_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return client_id
