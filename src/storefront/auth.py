"""
Password and one-time-code sign-in, delegated to Supabase Auth.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional
from supabase import Client
from .models import AuthSession, AuthUser

logger = logging.getLogger(__name__)


class AuthFailed(RuntimeError):
    """Supabase Auth refused the request (bad credentials, expired code, ...)."""


@dataclass
class Caller:
    """Who is behind a bearer token."""
    id: str
    email: str
    role: Optional[str]
    access_token: str


def _to_user(user: Any, fallback_email: str, name: Optional[str] = None) -> AuthUser:
    meta = getattr(user, "user_metadata", None) or {}
    email = getattr(user, "email", None) or fallback_email
    created = getattr(user, "created_at", None)
    joined = str(created)[:10] if created else date.today().isoformat()
    return AuthUser(
        id=str(user.id),
        email=email,
        name=name or meta.get("name") or email.split("@")[0],
        joined_date=joined,
    )


def _to_session(res: Any, fallback_email: str, name: Optional[str] = None) -> AuthSession:
    session = getattr(res, "session", None)
    return AuthSession(
        user=_to_user(res.user, fallback_email, name),
        access_token=getattr(session, "access_token", None),
        refresh_token=getattr(session, "refresh_token", None),
        expires_at=getattr(session, "expires_at", None),
    )


def _call(what: str, fn, *args):
    try:
        return fn(*args)
    except Exception as exc:
        logger.warning("Auth %s failed: %s", what, exc)
        raise AuthFailed(str(exc)) from exc


def sign_up(sb: Client, name: str, email: str, password: str) -> AuthSession:
    res = _call("sign_up", sb.auth.sign_up, {
        "email": email,
        "password": password,
        "options": {"data": {"name": name}},
    })
    if not getattr(res, "user", None):
        raise AuthFailed("Sign-up returned no user")
    # session stays empty until the email is confirmed
    return _to_session(res, email, name)


def sign_in(sb: Client, email: str, password: str) -> AuthSession:
    res = _call("sign_in", sb.auth.sign_in_with_password, {"email": email, "password": password})
    if not getattr(res, "user", None) or not getattr(res, "session", None):
        raise AuthFailed("Invalid email or password")
    return _to_session(res, email)


def send_login_otp(sb: Client, email: str) -> None:
    # Never creates an account from the login screen
    _call("send_login_otp", sb.auth.sign_in_with_otp, {
        "email": email,
        "options": {"should_create_user": False},
    })


def send_signup_otp(sb: Client, email: str) -> None:
    _call("send_signup_otp", sb.auth.sign_in_with_otp, {
        "email": email,
        "options": {"should_create_user": True},
    })


def resend_signup_otp(sb: Client, email: str) -> None:
    _call("resend_signup_otp", sb.auth.resend, {"type": "signup", "email": email})


def verify_otp(sb: Client, email: str, token: str) -> AuthSession:
    res = _call("verify_otp", sb.auth.verify_otp, {"email": email, "token": token, "type": "email"})
    if not getattr(res, "user", None) or not getattr(res, "session", None):
        raise AuthFailed("Code could not be verified")
    return _to_session(res, email)


def caller_from_token(sb: Client, access_token: str) -> Caller:
    """Resolve a bearer token to its user; anything Supabase rejects is AuthFailed."""
    res = _call("get_user", sb.auth.get_user, access_token)
    user = getattr(res, "user", None)
    if not user:
        raise AuthFailed("Invalid or expired token")
    app_meta = getattr(user, "app_metadata", None) or {}
    return Caller(
        id=str(user.id),
        email=getattr(user, "email", None) or "",
        role=app_meta.get("role"),
        access_token=access_token,
    )


def sign_out(sb: Client, access_token: str) -> None:
    """Revoke the caller's session server-side (needs the service-role client)."""
    _call("sign_out", sb.auth.admin.sign_out, access_token)
