import logging
import uuid

import boto3
from botocore.config import Config
from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..auth import get_current_user
from ..config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_SECRET_ACCESS_KEY
from ..models import User
from ..shared.errors import DependencyError, NotFoundError, ValidationError
from ..shared.policy import Action, Role, authorize, role_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

MAX_EVIDENCE_SIZE = 10 * 1024 * 1024  # 10MB

# content type -> stored extension
EVIDENCE_TYPES = {
    "application/pdf": "pdf",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/heic": "heic",
}

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for reading a private object in R2."""
    params = {"Bucket": R2_BUCKET_NAME, "Key": key, "ResponseContentDisposition": "inline"}
    try:
        url = get_r2_client().generate_presigned_url(
            "get_object",
            Params=params,
            ExpiresIn=expiration,
        )
    except Exception as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise DependencyError("File storage is unavailable. Please try again.") from e

    logger.info(f"✅ Generated presigned URL for key: {key}")
    return url


def _validate_filename(filename: str) -> None:
    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise ValidationError(f"Invalid filename - contains dangerous character '{char}'")
    if len(filename) > 255:
        raise ValidationError("Filename too long - maximum 255 characters")


@router.post("/evidence")
async def upload_evidence(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    """Upload a certificate or supporting document for verification (private)."""
    authorize(current_user, Action.UPLOAD_EVIDENCE)
    logger.info(f"📤 Uploading evidence for user {current_user.id}")

    ext = EVIDENCE_TYPES.get(file.content_type)
    if not ext:
        raise ValidationError("Invalid file type. Only PDF, PNG, JPEG, WebP and HEIC files are allowed.")

    if file.filename:
        _validate_filename(file.filename)

    contents = await file.read()
    if not contents:
        raise ValidationError("The uploaded file is empty")
    if len(contents) > MAX_EVIDENCE_SIZE:
        raise ValidationError(
            f"File size exceeds 10MB limit. Your file is {len(contents) / (1024 * 1024):.2f}MB."
        )

    key = f"evidence/{current_user.id}/{uuid.uuid4()}.{ext}"

    try:
        get_r2_client().put_object(
            Bucket=R2_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType=file.content_type,
        )
    except Exception as e:
        logger.error(f"❌ Evidence upload failed for user {current_user.id}: {e}")
        raise DependencyError("File storage is unavailable. Please try again.") from e

    logger.info(f"✅ Stored evidence {key}")
    return {"key": key, "url": generate_presigned_url(key)}


@router.get("/evidence/url")
async def get_evidence_url(
    key: str = Query(..., max_length=255),
    current_user: User = Depends(get_current_user),
):
    """Fresh presigned URL for a stored evidence file (its uploader or an admin)."""
    if not key.startswith("evidence/") or ".." in key:
        raise ValidationError("Invalid storage key")

    owner_prefix = f"evidence/{current_user.id}/"
    if role_of(current_user) != Role.ADMIN and not key.startswith(owner_prefix):
        raise NotFoundError("File not found")

    return {"key": key, "url": generate_presigned_url(key)}
