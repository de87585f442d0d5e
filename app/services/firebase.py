"""Firebase Admin SDK bootstrap."""

import logging

import firebase_admin
from firebase_admin import credentials

from app.config.settings import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "employee-center"


def build_credentials(config: Settings) -> credentials.Certificate:
    """Build service-account credentials from a key file or inline settings."""
    if config.firebase_credentials_file:
        return credentials.Certificate(config.firebase_credentials_file)

    return credentials.Certificate({
        "type": "service_account",
        "project_id": config.firebase_project_id,
        "private_key_id": config.firebase_private_key_id,
        "private_key": config.firebase_private_key,
        "client_email": config.firebase_client_email,
        "client_id": config.firebase_client_id,
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
        "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        "client_x509_cert_url": config.firebase_client_cert_url,
        "universe_domain": "googleapis.com",
    })


def init_firebase_app(config: Settings) -> firebase_admin.App:
    """Return the process-wide Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    app = firebase_admin.initialize_app(
        build_credentials(config),
        {"databaseURL": config.firebase_database_url},
        name=FIREBASE_APP_NAME,
    )
    logger.info("Firebase initialized for project %s", config.firebase_project_id)
    return app


def close_firebase_app(app: firebase_admin.App) -> None:
    firebase_admin.delete_app(app)
