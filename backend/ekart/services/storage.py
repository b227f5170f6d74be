"""
ekart/services/storage.py - Image upload to Firebase Storage.

Product images live under `products/{product_id}/`, profile pictures under
`profiles/{uid}/`. Blobs are made public; when the bucket forbids public ACLs a
long-lived signed URL is returned instead.
"""
import logging
import os
from datetime import timedelta
from uuid import uuid4

from fastapi import HTTPException, UploadFile, status

from ekart.config import settings

logger = logging.getLogger("ekart.storage")

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/svg+xml"}


def _size_of(upload: UploadFile) -> int:
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def validate_image(upload: UploadFile) -> None:
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File type not supported")
    if _size_of(upload) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Image must be at most {limit_mb} MB")


def upload_image(bucket, upload: UploadFile, folder: str) -> str:
    """Validate, upload and return a URL for the image."""
    validate_image(upload)
    ext = os.path.splitext(upload.filename or "")[1].lower() or ".jpg"
    blob = bucket.blob(f"{folder}/{uuid4().hex}{ext}")
    try:
        blob.upload_from_file(upload.file, content_type=upload.content_type)
    except Exception:
        logger.exception("Image upload to %s failed", folder)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Image upload failed")
    try:
        blob.make_public()
        return blob.public_url
    except Exception:
        # uniform bucket-level access: fall back to a signed URL
        return blob.generate_signed_url(expiration=timedelta(days=3650))
