# docanalytics/config.py
import os

# =======================
# Database
# =======================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./docanalytics.db")

# =======================
# Auth
# =======================
JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_FOR_PROD")
JWT_ISSUER = os.getenv("JWT_ISSUER", "docanalytics")
ACCESS_TTL = int(os.getenv("ACCESS_TTL_SECONDS", "3600"))   # 1 hour default
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# =======================
# Blob storage
# =======================
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
LOCAL_STORAGE_PATH = os.getenv("LOCAL_STORAGE_PATH", "./data/blobs")
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "")
S3_REGION = os.getenv("S3_REGION", "us-east-1")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None
# SigV4 presigned URLs cannot outlive 7 days
SIGNED_URL_TTL = int(os.getenv("SIGNED_URL_TTL_SECONDS", str(7 * 24 * 3600)))

# =======================
# Uploads
# =======================
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "100"))
ALLOWED_EXTENSIONS = (".pdf", ".docx")

# =======================
# App
# =======================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")


def cors_origins_list() -> list[str]:
    if CORS_ORIGINS.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
