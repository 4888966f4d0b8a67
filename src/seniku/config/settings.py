# File: application/src/seniku/config/settings.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ─── Application ───────────────────────────────────────────────
APP_NAME = os.getenv("APP_NAME", "Seniku API")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
API_PREFIX = os.getenv("API_PREFIX", "/seniku/api/v1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Jakarta")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# ─── Database ──────────────────────────────────────────────────
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./seniku.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# ─── Tokens ────────────────────────────────────────────────────
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
REFRESH_SECRET_KEY = os.getenv("REFRESH_SECRET_KEY", SECRET_KEY)
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# ─── Uploads ───────────────────────────────────────────────────
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]
IMAGE_MIN_WIDTH = int(os.getenv("IMAGE_MIN_WIDTH", "800"))
IMAGE_MIN_HEIGHT = int(os.getenv("IMAGE_MIN_HEIGHT", "600"))
IMAGE_MAX_WIDTH = int(os.getenv("IMAGE_MAX_WIDTH", "5000"))
IMAGE_MAX_HEIGHT = int(os.getenv("IMAGE_MAX_HEIGHT", "5000"))
IMAGE_MEDIUM_SIZE = (800, 600)
IMAGE_THUMBNAIL_SIZE = (300, 300)

# ─── Object storage (S3 / MinIO) ───────────────────────────────
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL")
S3_ACCESS_KEY_ID = os.getenv("S3_ACCESS_KEY_ID")
S3_SECRET_ACCESS_KEY = os.getenv("S3_SECRET_ACCESS_KEY")
S3_REGION = os.getenv("S3_REGION", "us-east-1")
S3_PUBLIC_URL = os.getenv("S3_PUBLIC_URL", S3_ENDPOINT_URL or "")
S3_BUCKET_SUBMISSIONS = os.getenv("S3_BUCKET_SUBMISSIONS", "submissions")
S3_BUCKET_AVATARS = os.getenv("S3_BUCKET_AVATARS", "avatars")
