"""Image upload handling for catalog content.

Admins upload photos for destinations, hotels, rooms and so on. Files are
validated with Pillow, downscaled, re-encoded and written to the default
storage together with a thumbnail; the public URLs are stored on the
catalog rows.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from dataclasses import dataclass
from io import BytesIO

from django.conf import settings  # type: ignore
from django.core.files.base import ContentFile  # type: ignore
from django.core.files.storage import default_storage  # type: ignore
from django.utils import timezone  # type: ignore
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ("JPEG", "PNG", "WEBP", "GIF")
THUMBNAIL_SIZE = (400, 300)


class InvalidImageError(ValueError):
    """Raised when an upload is not an acceptable image."""


@dataclass(frozen=True)
class StoredImage:
    url: str
    thumbnail_url: str
    width: int
    height: int


def _validate_image(file_obj) -> Image.Image:
    max_bytes = settings.UPLOAD_MAX_IMAGE_MB * 1024 * 1024
    size = getattr(file_obj, "size", None)
    if size is not None and size > max_bytes:
        raise InvalidImageError(f"File too large. Maximum is {settings.UPLOAD_MAX_IMAGE_MB} MB.")

    try:
        img = Image.open(file_obj)
        img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as exc:
        raise InvalidImageError(f"Invalid image: {exc}")

    if img.format not in ALLOWED_FORMATS:
        raise InvalidImageError(f"Unsupported format: {img.format}")

    # verify() leaves the image unusable, reopen for processing
    file_obj.seek(0)
    try:
        return Image.open(file_obj)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidImageError(f"Invalid image: {exc}")


def _optimize_image(img: Image.Image) -> tuple[BytesIO, str, int, int]:
    """Downscale and re-encode. Returns (bytes_io, extension, width, height)."""
    max_dimension = settings.UPLOAD_MAX_IMAGE_DIMENSION
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")

    if img.width > max_dimension or img.height > max_dimension:
        img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

    out = BytesIO()
    if img.mode == "RGBA":
        img.save(out, format="WEBP", quality=85, method=6)
        ext = "webp"
    else:
        img.save(out, format="JPEG", quality=85, optimize=True)
        ext = "jpg"
    out.seek(0)
    return out, ext, img.width, img.height


def _create_thumbnail(img: Image.Image) -> BytesIO:
    thumb = img.copy()
    if thumb.mode == "RGBA":
        background = Image.new("RGB", thumb.size, (255, 255, 255))
        background.paste(thumb, mask=thumb.split()[3])
        thumb = background
    elif thumb.mode not in ("RGB", "L"):
        thumb = thumb.convert("RGB")

    thumb.thumbnail(THUMBNAIL_SIZE, Image.Resampling.LANCZOS)
    out = BytesIO()
    thumb.save(out, format="JPEG", quality=80, optimize=True)
    out.seek(0)
    return out


def store_uploaded_image(file_obj, *, folder: str = "uploads") -> StoredImage:
    """Validate, optimize and save an uploaded image plus its thumbnail."""
    file_obj.seek(0)
    img = _validate_image(file_obj)
    optimized, ext, width, height = _optimize_image(img)

    data = optimized.getvalue()
    digest = hashlib.md5(data).hexdigest()[:8]
    base = f"{folder}/{timezone.now():%Y/%m}/{digest}_{uuid.uuid4().hex[:8]}"

    main_name = default_storage.save(f"{base}.{ext}", ContentFile(data))
    thumb_name = default_storage.save(f"{base}_thumb.jpg", ContentFile(_create_thumbnail(img).read()))

    logger.info(f"Image uploaded: {main_name} ({width}x{height})")
    return StoredImage(
        url=default_storage.url(main_name),
        thumbnail_url=default_storage.url(thumb_name),
        width=width,
        height=height,
    )
