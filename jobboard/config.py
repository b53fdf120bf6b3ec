import os
import re

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RESUME_BUCKET = "jobboard-resumes"


def _validate_s3_bucket_name(bucket_name: str) -> bool:
    """Validate S3 bucket name according to AWS naming rules"""
    if not bucket_name:
        return False
    if '<' in bucket_name or '>' in bucket_name:
        return False
    return re.match(r'^[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]$', bucket_name) is not None


def _flag(name: str, default: str = '0') -> bool:
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///jobboard.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    AUTO_CREATE_TABLES = _flag('AUTO_CREATE_TABLES', '1')

    # Empty means a random key per process; issued tokens die with the process
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', '')
    JWT_EXPIRATION_HOURS = int(os.environ.get('JWT_EXPIRATION_HOURS', 10))
    BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', 12))

    # Resume blob storage
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
    AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
    S3_ENDPOINT_URL = os.environ.get('S3_ENDPOINT_URL') or None
    RESUME_BUCKET = os.environ.get('RESUME_BUCKET', DEFAULT_RESUME_BUCKET)
    RESUME_PREFIX = os.environ.get('RESUME_PREFIX', 'resumes/')
    RESUME_URL_EXPIRY_SECONDS = int(os.environ.get('RESUME_URL_EXPIRY_SECONDS', 3600))
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_UPLOAD_BYTES', 10 * 1024 * 1024))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')
        if origin.strip()
    ]

    DEBUG = _flag('FLASK_DEBUG')
    TESTING = _flag('FLASK_TESTING')


def resolve_bucket_name(bucket_name, logger=None) -> str:
    """Return bucket_name if it is a valid S3 bucket name, else the default bucket"""
    if _validate_s3_bucket_name(bucket_name):
        return bucket_name
    if logger is not None:
        logger.warning(f"Invalid RESUME_BUCKET name '{bucket_name}', using default '{DEFAULT_RESUME_BUCKET}'")
    return DEFAULT_RESUME_BUCKET
