# docanalytics/auth/dependencies.py
from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from docanalytics.auth.security import decode_token

_bearer = HTTPBearer(auto_error=False)


class AuthedUser(BaseModel):
    sub: str
    email: str | None = None


def require_user(auth_headers: HTTPAuthorizationCredentials = Depends(_bearer)) -> AuthedUser:
    if not auth_headers or auth_headers.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = decode_token(auth_headers.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    sub = str(payload.get("sub") or "").strip()
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return AuthedUser(sub=sub, email=payload.get("email"))
