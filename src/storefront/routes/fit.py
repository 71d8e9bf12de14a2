import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from ..auth import Caller
from ..config import MAX_PHOTO_BYTES
from ..models import FitProfile, Measurements, PhotoCheckResponse, PhotoSummary, SizeRecommendation
from ..sizing import recommend
from ..store import BackendError, get_fit_profile, save_fit_profile
from ..utils.photo_utils import MAX_PHOTOS, InvalidPhoto, inspect_photo
from .deps import current_caller, require_owner, user_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fit"])

"""
Size recommendation for a finished fit-wizard run.

Called once, when the wizard moves into its results step. Quick mode
uses height (+ optional chest) and the fit preference; detailed mode
uses chest/waist. Never fails on odd numbers: they just fall into the
nearest size band.
"""
@router.post("/fit/recommend", response_model=SizeRecommendation)
def recommend_fit(measurements: Measurements):
    rec = recommend(measurements)
    logger.info("Recommended %s (%d%%) in %s mode", rec.size, rec.confidence, measurements.mode)
    return rec


"""
Optional photo step: check the uploads are real images and echo back
their dimensions. Up to four photos (front, side, back, neutral), each
no larger than MAX_PHOTO_BYTES.
"""
@router.post("/fit/photos", response_model=PhotoCheckResponse)
async def check_photos(photos: List[UploadFile] = File(...)):
    if len(photos) > MAX_PHOTOS:
        raise HTTPException(400, f"At most {MAX_PHOTOS} photos")

    summaries: List[PhotoSummary] = []
    for photo in photos:
        # read one byte past the cap so oversize uploads are caught without buffering them whole
        data = await photo.read(MAX_PHOTO_BYTES + 1)
        if len(data) > MAX_PHOTO_BYTES:
            raise HTTPException(413, f"{photo.filename}: larger than {MAX_PHOTO_BYTES} bytes")
        try:
            width, height = inspect_photo(photo.content_type, data)
        except InvalidPhoto as exc:
            raise HTTPException(400, f"{photo.filename}: {exc}")
        summaries.append(PhotoSummary(filename=photo.filename or "", width=width, height=height))

    return PhotoCheckResponse(photos_uploaded=len(summaries), photos=summaries)


@router.get("/fit/profile/{user_id}", response_model=FitProfile)
def read_profile(user_id: str, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        profile = get_fit_profile(user_client(caller), user_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if profile is None:
        raise HTTPException(404, "No fit profile saved")
    return profile


@router.put("/fit/profile/{user_id}", response_model=FitProfile)
def write_profile(user_id: str, profile: FitProfile, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        return save_fit_profile(user_client(caller), user_id, profile)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
