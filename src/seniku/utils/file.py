# File: application/src/seniku/utils/file.py
import logging
import asyncio
import functools
from io import BytesIO
from typing import Dict, Optional

from fastapi import UploadFile
from botocore.exceptions import ClientError, NoCredentialsError

from src.seniku.config import s3_config
from src.seniku.config.settings import ALLOWED_IMAGE_TYPES, MAX_FILE_SIZE, S3_BUCKET_SUBMISSIONS
from src.seniku.utils.errors import BadRequestError, InternalError
from src.seniku.utils.image import ProcessedImage, process_image

# Configure logging
logger = logging.getLogger(__name__)


async def read_image_upload(file: Optional[UploadFile]) -> bytes:
    """Read an uploaded artwork after checking its content type and size."""
    if file is None or not file.filename:
        raise BadRequestError("Image file is required")

    if (file.content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise BadRequestError("Invalid file type. Only JPEG, PNG and WEBP images are allowed")

    content = await file.read()
    if not content:
        raise BadRequestError("Image file is required")
    if len(content) > MAX_FILE_SIZE:
        raise BadRequestError(f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB")
    return content


async def upload_bytes(bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
    """
    Upload raw bytes to the object store.

    Returns:
        str: Public URL of the stored object
    """
    client = s3_config.s3_client
    if client is None:
        logger.error("Object storage client is not initialized. Check your storage configuration.")
        raise InternalError("File storage is not configured properly")

    extra_args = {}
    if content_type:
        extra_args['ContentType'] = content_type

    try:
        loop = asyncio.get_running_loop()
        upload_func = functools.partial(
            client.upload_fileobj,
            BytesIO(data),
            bucket,
            key,
            ExtraArgs=extra_args,
        )
        await loop.run_in_executor(None, upload_func)
    except NoCredentialsError:
        logger.error("Object storage credentials not found")
        raise InternalError("File storage credentials not configured")
    except ClientError as e:
        error_code = e.response['Error']['Code']
        if error_code == 'NoSuchBucket':
            logger.error(f"Bucket '{bucket}' does not exist")
        elif error_code == 'AccessDenied':
            logger.error(f"Access denied to bucket '{bucket}'")
        else:
            logger.error(f"Upload failed: {str(e)}")
        raise InternalError("Failed to upload file")

    url = s3_config.public_url(bucket, key)
    logger.debug(f"Successfully uploaded object: {url}")
    return url


def _object_name(prefix: str, digest: str, extension: str) -> str:
    # Keys derive from the upload bytes, so re-uploading identical artwork yields identical URLs
    return f"{prefix}-{digest[:32]}.{extension}"


async def store_submission_images(image: ProcessedImage) -> Dict[str, str]:
    """Upload the three renditions of an artwork and return their URLs."""
    full_url = await upload_bytes(
        S3_BUCKET_SUBMISSIONS, _object_name("submission", image.digest, image.extension), image.full, image.content_type
    )
    medium_url = await upload_bytes(
        S3_BUCKET_SUBMISSIONS, _object_name("medium", image.digest, image.extension), image.medium, image.content_type
    )
    thumb_url = await upload_bytes(
        S3_BUCKET_SUBMISSIONS, _object_name("thumb", image.digest, image.extension), image.thumbnail, image.content_type
    )
    return {"image_url": full_url, "image_medium": medium_url, "image_thumbnail": thumb_url}


async def save_submission_upload(file: Optional[UploadFile]) -> Dict[str, str]:
    """Full upload pipeline: read, validate, render and store an artwork."""
    content = await read_image_upload(file)
    loop = asyncio.get_running_loop()
    processed = await loop.run_in_executor(None, process_image, content)
    logger.info(f"Validated artwork '{file.filename}' ({processed.width}x{processed.height})")
    return await store_submission_images(processed)
