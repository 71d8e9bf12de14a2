from fastapi import APIRouter, Depends, HTTPException
from ..auth import Caller
from ..models import UserProfile, UserProfileUpdate
from ..store import BackendError, get_user_profile, update_user_profile
from .deps import current_caller, require_owner, user_client

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserProfile)
def read_user(user_id: str, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        profile = get_user_profile(user_client(caller), user_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if profile is None:
        raise HTTPException(404, "User not found")
    return profile


@router.patch("/{user_id}", response_model=UserProfile)
def edit_user(user_id: str, update: UserProfileUpdate, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    # Unset fields are left alone
    changes = update.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(400, "Nothing to update")
    try:
        profile = update_user_profile(user_client(caller), user_id, changes)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if profile is None:
        raise HTTPException(404, "User not found")
    return profile
