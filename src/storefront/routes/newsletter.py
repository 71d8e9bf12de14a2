import logging
from fastapi import APIRouter, HTTPException
from ..db import get_auth_client
from ..models import NewsletterRequest
from ..store import BackendError, DuplicateRow, subscribe_newsletter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["newsletter"])


# Anonymous sign-up from the footer form
@router.post("/newsletter")
def subscribe(req: NewsletterRequest):
    email = req.email.strip().lower()
    if "@" not in email:
        raise HTTPException(400, "Invalid email address")
    try:
        subscribe_newsletter(get_auth_client(), email)
    except DuplicateRow:
        raise HTTPException(409, "Already subscribed")
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    logger.info("Newsletter subscription added")
    return {"ok": True}
