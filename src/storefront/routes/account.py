from fastapi import APIRouter, Depends, HTTPException
from ..auth import (
    AuthFailed,
    Caller,
    resend_signup_otp,
    send_login_otp,
    send_signup_otp,
    sign_in,
    sign_out,
    sign_up,
    verify_otp,
)
from ..db import get_auth_client, get_client
from ..models import AuthSession, LoginRequest, OtpRequest, SignUpRequest, VerifyOtpRequest
from .deps import current_caller

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthSession)
def signup(req: SignUpRequest):
    try:
        return sign_up(get_auth_client(), req.name, req.email, req.password)
    except AuthFailed as exc:
        raise HTTPException(400, str(exc))


@router.post("/login", response_model=AuthSession)
def login(req: LoginRequest):
    try:
        return sign_in(get_auth_client(), req.email, req.password)
    except AuthFailed as exc:
        raise HTTPException(401, str(exc))


"""
Send a one-time code by email.
"login" never creates an account; "signup" does; "resend" re-sends the
sign-up confirmation.
"""
@router.post("/otp")
def request_otp(req: OtpRequest):
    sb = get_auth_client()
    senders = {
        "login": send_login_otp,
        "signup": send_signup_otp,
        "resend": resend_signup_otp,
    }
    try:
        senders[req.purpose](sb, req.email)
    except AuthFailed as exc:
        raise HTTPException(400, str(exc))
    return {"ok": True}


@router.post("/verify", response_model=AuthSession)
def verify(req: VerifyOtpRequest):
    try:
        return verify_otp(get_auth_client(), req.email, req.token)
    except AuthFailed as exc:
        raise HTTPException(401, str(exc))


# Revokes the bearer token's session; the client drops its copy too
@router.post("/logout")
def logout(caller: Caller = Depends(current_caller)):
    try:
        sign_out(get_client(), caller.access_token)
    except AuthFailed as exc:
        raise HTTPException(400, str(exc))
    return {"ok": True}
