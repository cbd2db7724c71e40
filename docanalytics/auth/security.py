# docanalytics/auth/security.py
import time
import bcrypt
import jwt
from typing import Dict, Any

from docanalytics.config import ACCESS_TTL, BCRYPT_ROUNDS, JWT_ISSUER, JWT_SECRET

ALGORITHM = "HS256"

def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in the users table
        return False

def _jwt(payload: Dict[str, Any], ttl: int) -> str:
    now = int(time.time())
    body = {
        "iss": JWT_ISSUER,
        "iat": now,
        "exp": now + ttl,
        **payload,
    }
    return jwt.encode(body, JWT_SECRET, algorithm=ALGORITHM)

def issue_access_token(*, user_id: str, email: str) -> str:
    """
    User-scoped access token. 'sub' is the stable user id every document query is scoped by.
    """
    return _jwt({"sub": user_id, "email": email, "scope": "user"}, ACCESS_TTL)

def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[ALGORITHM],
        options={"require": ["exp", "sub"], "verify_iss": False, "verify_aud": False},
    )
