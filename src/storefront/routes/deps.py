"""
Request dependencies: who is calling, and which Supabase client they get.
"""
import logging
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client
from ..auth import AuthFailed, Caller, caller_from_token
from ..config import ADMIN_ROLE
from ..db import get_client, get_user_client

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Caller:
    # --- No token -> 401; bad/expired token -> 401 ---
    if credentials is None or not credentials.credentials:
        raise HTTPException(401, "Missing bearer token", headers={"WWW-Authenticate": "Bearer"})
    try:
        return caller_from_token(get_client(), credentials.credentials)
    except AuthFailed as exc:
        raise HTTPException(401, str(exc), headers={"WWW-Authenticate": "Bearer"})


def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if caller.role != ADMIN_ROLE:
        logger.warning("Non-admin %s tried a back-office route", caller.id)
        raise HTTPException(403, "Admin only")
    return caller


def require_owner(caller: Caller, user_id: str) -> None:
    """Customers only ever touch their own rows."""
    if caller.id != user_id:
        logger.warning("Caller %s asked for data of %s", caller.id, user_id)
        raise HTTPException(403, "Not your data")


def user_client(caller: Caller) -> Client:
    # Row-level security applies to everything done through this client
    return get_user_client(caller.access_token)
