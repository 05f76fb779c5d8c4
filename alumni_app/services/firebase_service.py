import asyncio
import logging
import os

import firebase_admin
from firebase_admin import auth, credentials, firestore_async

from alumni_app.config import settings
from alumni_app.services.errors import InternalError, Unauthorized

logger = logging.getLogger(__name__)

FIREBASE_CREDENTIALS_FILE = settings.FIREBASE_CREDENTIALS_FILE

firebase_app = None
if FIREBASE_CREDENTIALS_FILE and os.path.exists(FIREBASE_CREDENTIALS_FILE):
    cred = credentials.Certificate(FIREBASE_CREDENTIALS_FILE)
    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    firebase_app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized using %s", FIREBASE_CREDENTIALS_FILE)
else:
    logger.warning("Firebase credentials not configured. Auth and Firestore disabled.")


def _require_app():
    if not firebase_app:
        raise InternalError("Firebase app is not configured. Set FIREBASE_CREDENTIALS_FILE env.")
    return firebase_app


def get_firestore_client():
    return firestore_async.client(_require_app())


async def verify_id_token(token: str) -> str:
    """Verify a Firebase ID token and return the caller's uid."""
    app = _require_app()
    try:
        decoded = await asyncio.to_thread(auth.verify_id_token, token, app)
    except auth.CertificateFetchError as exc:
        logger.error("Could not fetch token signing certificates: %s", exc)
        raise InternalError("Identity provider unavailable") from exc
    except (ValueError, auth.InvalidIdTokenError, auth.RevokedIdTokenError, auth.UserDisabledError) as exc:
        logger.info("Token verification failed: %s", exc)
        raise Unauthorized("Unauthorized: Invalid token") from exc

    uid = decoded.get("uid")
    if not uid:
        raise Unauthorized("Unauthorized: Invalid token")
    return uid


def get_token_verifier():
    return verify_id_token
