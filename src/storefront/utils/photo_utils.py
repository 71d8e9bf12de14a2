import io
from typing import Tuple
from PIL import Image, UnidentifiedImageError

ALLOWED_TYPES = {"image/jpeg", "image/png", "image/webp"}

# Front, side, back, neutral pose
MAX_PHOTOS = 4


class InvalidPhoto(ValueError):
    """Upload is not an image we can open."""


"""
Checks one fit-wizard photo and reports its size.

Purpose:
    The wizard's optional photo step only needs to know that each upload
    is a real image; photos never feed the size recommendation.

Parameters:
    content_type (str | None):
        MIME type reported by the client.
    data (bytes):
        Raw upload bytes.

Process:
    1. Reject anything that isn't JPEG/PNG/WebP.
    2. Let Pillow open + verify the bytes. Pixel counts past Pillow's
       decompression-bomb limit are rejected too.
    3. Re-open (verify() leaves the image unusable) and read dimensions.

Returns:
    Tuple[int, int]:
        (width, height) in pixels.
"""
def inspect_photo(content_type: str, data: bytes) -> Tuple[int, int]:
    # Only the three formats the upload widget advertises
    if content_type not in ALLOWED_TYPES:
        raise InvalidPhoto(f"Unsupported image type: {content_type}")
    try:
        Image.open(io.BytesIO(data)).verify()
        img = Image.open(io.BytesIO(data))
    except Image.DecompressionBombError as exc:
        raise InvalidPhoto("Image dimensions too large") from exc
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InvalidPhoto("Invalid image file") from exc
    return img.size
