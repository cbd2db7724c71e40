# docanalytics/auth/auth_router.py
from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Body
from sqlalchemy.orm import Session

from docanalytics.auth.db import get_db
from docanalytics.auth.dependencies import AuthedUser, require_user
from docanalytics.auth.models import User
from docanalytics.auth.security import hash_password, verify_password, issue_access_token
from docanalytics.log import log_step

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _read_credentials(payload: Dict[str, Any]) -> tuple[str, str]:
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password required")
    return email, password


@router.post("/auth/signup")
def signup(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """
    payload: email, password
    Returns: { token, user_id, email }
    """
    email, password = _read_credentials(payload)

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)

    log_step(logger, "user_registered", user_id=user.id)
    token = issue_access_token(user_id=user.id, email=user.email)
    return {"token": token, "user_id": user.id, "email": user.email}


@router.post("/auth/login")
def login(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """
    payload: email, password
    Returns: { token, user_id, email }
    """
    email, password = _read_credentials(payload)

    user = db.query(User).filter(User.email == email, User.is_active == True).first()  # noqa: E712
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = issue_access_token(user_id=user.id, email=user.email)
    return {"token": token, "user_id": user.id, "email": user.email}


@router.get("/auth/me")
def me(user: AuthedUser = Depends(require_user)):
    return {"user_id": user.sub, "email": user.email}
