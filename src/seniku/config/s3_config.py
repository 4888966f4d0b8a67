import json
import boto3
import logging
from botocore.exceptions import BotoCoreError, NoCredentialsError, ClientError
from botocore.client import Config

from src.seniku.config.settings import (
    S3_ENDPOINT_URL,
    S3_ACCESS_KEY_ID,
    S3_SECRET_ACCESS_KEY,
    S3_REGION,
    S3_PUBLIC_URL,
    S3_BUCKET_SUBMISSIONS,
    S3_BUCKET_AVATARS,
)

# Configure logging
logger = logging.getLogger(__name__)

BUCKETS = [S3_BUCKET_SUBMISSIONS, S3_BUCKET_AVATARS]


def build_s3_client():
    """Create the S3 client for the configured endpoint, or None when unconfigured."""
    missing_vars = []
    if not S3_ENDPOINT_URL:
        missing_vars.append('S3_ENDPOINT_URL')
    if not S3_ACCESS_KEY_ID:
        missing_vars.append('S3_ACCESS_KEY_ID')
    if not S3_SECRET_ACCESS_KEY:
        missing_vars.append('S3_SECRET_ACCESS_KEY')

    if missing_vars:
        logger.warning(f"Missing object storage configuration: {', '.join(missing_vars)}")
        logger.warning("Image uploads are disabled until these variables are set")
        return None

    try:
        client = boto3.client(
            's3',
            endpoint_url=S3_ENDPOINT_URL,
            aws_access_key_id=S3_ACCESS_KEY_ID,
            aws_secret_access_key=S3_SECRET_ACCESS_KEY,
            region_name=S3_REGION,
            # MinIO only understands path-style addressing
            config=Config(signature_version='s3v4', s3={'addressing_style': 'path'}),
        )
        logger.info(f"Object storage client initialized for endpoint: {S3_ENDPOINT_URL}")
        return client
    except NoCredentialsError:
        logger.error("Object storage credentials not found. Please check your environment variables.")
    except Exception as e:
        logger.error(f"Failed to initialize object storage client: {str(e)}")
    return None


def public_read_policy(bucket: str) -> str:
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"AWS": ["*"]},
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket}/*"],
            }
        ],
    })


def ensure_buckets(client) -> None:
    """Create any missing bucket and open it for anonymous reads. Called once at startup."""
    if client is None:
        return
    for bucket in BUCKETS:
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code not in ('404', 'NoSuchBucket'):
                logger.error(f"Cannot access bucket '{bucket}': {str(e)}")
                continue
            try:
                client.create_bucket(Bucket=bucket)
            except ClientError as e:
                logger.error(f"Failed to create bucket '{bucket}': {str(e)}")
                continue
            logger.info(f"Created bucket '{bucket}'")
        except BotoCoreError as e:
            logger.error(f"Object storage unreachable, skipping bucket setup: {str(e)}")
            return

        # Public object URLs are handed to clients, so every bucket is read-only public
        try:
            client.put_bucket_policy(Bucket=bucket, Policy=public_read_policy(bucket))
            logger.info(f"Bucket '{bucket}' policy set to public read")
        except ClientError as e:
            logger.error(f"Failed to set policy on bucket '{bucket}': {str(e)}")


def public_url(bucket: str, key: str) -> str:
    base = (S3_PUBLIC_URL or "").rstrip("/")
    return f"{base}/{bucket}/{key}"


s3_client = build_s3_client()
