"""
Firebase Authentication utilities.

The API treats Firebase as the "current user" provider: clients send a
Firebase ID token as a bearer token and every trip or saved-place record is
owned by the token's ``uid``.
"""

import logging
import os
from typing import Dict, Any, Optional
import firebase_admin
from firebase_admin import credentials, auth
from fastapi.concurrency import run_in_threadpool
from wanderwise.utils.config import get_settings

logger = logging.getLogger(__name__)

# Global Firebase app instance
_firebase_app = None


def initialize_firebase_admin() -> None:
    """
    Initialize Firebase Admin SDK for authentication.

    Uses the service account JSON file from FIREBASE_SERVICE_ACCOUNT_PATH when
    it exists, otherwise Application Default Credentials. If already
    initialized, does nothing.
    """
    global _firebase_app

    if _firebase_app is not None:
        logger.debug("[firebase-auth] Firebase Admin already initialized")
        return

    settings = get_settings()
    service_account_path = settings.FIREBASE_SERVICE_ACCOUNT_PATH
    project_id = settings.FIREBASE_PROJECT_ID or settings.GOOGLE_CLOUD_PROJECT

    cred = None
    if service_account_path:
        service_account_path = os.path.abspath(os.path.expanduser(service_account_path))
        if os.path.exists(service_account_path):
            cred = credentials.Certificate(service_account_path)
            logger.info(f"[firebase-auth] Using explicit service account: {service_account_path}")
        else:
            logger.warning(f"[firebase-auth] Service account file not found: {service_account_path}; falling back to ADC")
    else:
        logger.info("[firebase-auth] No service account path provided; using ADC (Application Default Credentials)")

    try:
        if cred:
            _firebase_app = firebase_admin.initialize_app(cred, {'projectId': project_id})
        else:
            _firebase_app = firebase_admin.initialize_app(options={'projectId': project_id})
        logger.info("[firebase-auth] Firebase Admin SDK initialized successfully")
    except Exception as e:
        logger.error(f"[firebase-auth] Failed to initialize Firebase Admin SDK: {str(e)}")
        raise


async def verify_firebase_token(token: str) -> Dict[str, Any]:
    """
    Verify a Firebase ID token and return the decoded claims.

    Args:
        token: Firebase ID token string (from client)

    Returns:
        Dict containing decoded token claims, including ``uid`` and ``email``

    Raises:
        ValueError: If token is invalid, expired, revoked or malformed
    """
    if not token or not token.strip():
        raise ValueError("Token is empty or missing")

    try:
        # May fetch Google's signing certificates; keep it off the event loop
        decoded_token = await run_in_threadpool(auth.verify_id_token, token)
    except auth.ExpiredIdTokenError as e:
        logger.warning(f"[firebase-auth] Expired ID token: {str(e)}")
        raise ValueError("Firebase ID token has expired. Please sign in again.")
    except auth.RevokedIdTokenError as e:
        logger.warning(f"[firebase-auth] Revoked ID token: {str(e)}")
        raise ValueError("Firebase ID token has been revoked. Please sign in again.")
    except auth.InvalidIdTokenError as e:
        logger.warning(f"[firebase-auth] Invalid ID token: {str(e)}")
        raise ValueError(f"Invalid Firebase ID token: {str(e)}")
    except auth.CertificateFetchError as e:
        logger.error(f"[firebase-auth] Certificate fetch error: {str(e)}")
        raise ValueError("Unable to verify token: certificate error")

    user_id = decoded_token.get('uid', 'unknown')
    logger.info(f"[firebase-auth] Token verified successfully for user: {user_id[:12]}...")
    return decoded_token


def is_firebase_initialized() -> bool:
    """Check if Firebase Admin SDK is initialized."""
    return _firebase_app is not None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an ``Authorization: Bearer <token>`` header"""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None
