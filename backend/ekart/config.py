"""
ekart/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and initializes the Firebase Admin SDK (Firestore DB, Storage) on first use.
Routers receive the Firestore client and the storage bucket through the
`get_db` / `get_bucket` dependencies.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, storage
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    firebase_cred_file: str = Field('firebase_service_account.json', env='FIREBASE_CRED_FILE')
    firebase_project_id: str = Field(..., env='FIREBASE_PROJECT_ID')
    firebase_storage_bucket: str = Field(..., env='FIREBASE_STORAGE_BUCKET')

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = Field(None, env='FIREBASE_PRIVATE_KEY_ID')
    firebase_private_key: Optional[str] = Field(None, env='FIREBASE_PRIVATE_KEY')
    firebase_client_email: Optional[str] = Field(None, env='FIREBASE_CLIENT_EMAIL')
    firebase_client_id: Optional[str] = Field(None, env='FIREBASE_CLIENT_ID')
    firebase_auth_uri: Optional[str] = Field(None, env='FIREBASE_AUTH_URI')
    firebase_token_uri: Optional[str] = Field(None, env='FIREBASE_TOKEN_URI')
    firebase_auth_provider_x509_cert_url: Optional[str] = Field(None, env='FIREBASE_AUTH_PROVIDER_X509_CERT_URL')
    firebase_client_x509_cert_url: Optional[str] = Field(None, env='FIREBASE_CLIENT_X509_CERT_URL')
    firebase_web_api_key: str = Field(..., env="FIREBASE_WEB_API_KEY")

    collection_prefix: str = Field('', validation_alias='FIREBASE_COLLECTION_PREFIX')
    debug: bool = Field(False, env='DEBUG')
    log_level: str = Field('INFO', env='LOG_LEVEL')
    allowed_origins: str = Field('*', env='ALLOWED_ORIGINS')  # Comma-separated list or '*' for all

    # account verification
    verify_code_secret: Optional[str] = None
    verify_code_length: int = 6
    verify_code_ttl_seconds: int = 30 * 60
    verify_max_attempts: int = 5
    unverified_account_ttl_hours: int = 24
    cleanup_interval_minutes: int = 30

    smtp_host: str = "localhost"
    smtp_port: int = 465
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_use_starttls: bool = False  # true for 587

    max_upload_bytes: int = 5 * 1024 * 1024
    default_page_size: int = 12

    def model_post_init(self, __context):
        """Validate Firebase Web API Key format"""
        if not self.firebase_web_api_key or not self.firebase_web_api_key.startswith('AIza'):
            raise ValueError("FIREBASE_WEB_API_KEY must be a valid Firebase Web API Key starting with 'AIza'")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Load settings from environment (.env file, etc.)
settings = Settings()


def collection(name: str) -> str:
    """Prefix-aware collection name (FIREBASE_COLLECTION_PREFIX)."""
    prefix = settings.collection_prefix.strip()
    return f"{prefix}{name}" if prefix else name


def _credentials():
    # Cloud Run: service account fields come from the environment
    if all([
        settings.firebase_private_key_id,
        settings.firebase_private_key,
        settings.firebase_client_email,
        settings.firebase_client_id,
        settings.firebase_auth_uri,
        settings.firebase_token_uri,
        settings.firebase_auth_provider_x509_cert_url,
        settings.firebase_client_x509_cert_url
    ]):
        return credentials.Certificate({
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            "private_key": settings.firebase_private_key,
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "auth_uri": settings.firebase_auth_uri,
            "token_uri": settings.firebase_token_uri,
            "auth_provider_x509_cert_url": settings.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": settings.firebase_client_x509_cert_url
        })
    # Local development: service account file
    return credentials.Certificate(settings.firebase_cred_file)


@lru_cache
def get_firebase_app() -> firebase_admin.App:
    try:
        return firebase_admin.initialize_app(_credentials(), {
            'projectId': settings.firebase_project_id,
            'storageBucket': settings.firebase_storage_bucket
        })
    except ValueError as e:
        if "already exists" in str(e):
            return firebase_admin.get_app()
        raise


def get_db():
    """Firestore database client."""
    return firestore.client(get_firebase_app())


def get_bucket():
    """Default storage bucket (product and profile images)."""
    return storage.bucket(app=get_firebase_app())
