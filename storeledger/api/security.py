"""
Bearer token signing and verification.

Tokens are issued by the account service that shares AUTH_SECRET_KEY:

    base64url(json payload) "." hex(HMAC-SHA256(payload, secret))

The payload carries user_id, role, verified, disabled and exp (unix time).
"""

import base64
import hashlib
import hmac
import json
import secrets
import time
from datetime import timedelta
from typing import Any

from storeledger.config import get_logger, get_settings
from storeledger.core.entities.actor import Actor, Role
from storeledger.core.exceptions import AuthenticationError, PermissionDeniedError

logger = get_logger(__name__)


def _sign(payload: bytes, secret_key: str) -> str:
    return hmac.new(secret_key.encode(), payload, hashlib.sha256).hexdigest()


def create_access_token(
    user_id: str,
    role: Role | str,
    verified: bool = True,
    disabled: bool = False,
    expires_delta: timedelta | None = None,
    secret_key: str | None = None,
) -> str:
    """Create a signed access token."""
    settings = get_settings()
    expires_delta = expires_delta or timedelta(minutes=settings.auth.token_ttl_minutes)

    data = {
        "user_id": user_id,
        "role": Role(role).value,
        "verified": verified,
        "disabled": disabled,
        "exp": int(time.time() + expires_delta.total_seconds()),
    }
    payload = json.dumps(data, separators=(",", ":"), sort_keys=True).encode()
    encoded = base64.urlsafe_b64encode(payload).decode().rstrip("=")

    return f"{encoded}.{_sign(payload, secret_key or settings.auth.secret_key)}"


def verify_token(token: str, secret_key: str | None = None) -> dict[str, Any] | None:
    """
    Verify an access token.

    Returns the payload, or None when the token is malformed, forged or expired.
    """
    if not token or token.count(".") != 1:
        return None

    encoded, signature = token.split(".")
    try:
        payload = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    except ValueError:
        return None

    expected = _sign(payload, secret_key or get_settings().auth.secret_key)
    if not hmac.compare_digest(expected, signature):
        return None

    try:
        data = json.loads(payload)
    except ValueError:
        return None

    if not isinstance(data, dict) or data.get("exp", 0) < time.time():
        return None
    return data


def actor_from_token(token: str | None) -> Actor:
    """
    Resolve the calling actor.

    Raises:
        AuthenticationError: missing, invalid or expired token
        PermissionDeniedError: disabled account or unverified storekeeper
    """
    if not token:
        raise AuthenticationError("missing bearer token")

    data = verify_token(token)
    if data is None:
        raise AuthenticationError("invalid or expired token")

    try:
        actor = Actor(
            user_id=str(data["user_id"]),
            role=Role(data["role"]),
            verified=bool(data.get("verified", False)),
            disabled=bool(data.get("disabled", False)),
        )
    except (KeyError, ValueError) as e:
        raise AuthenticationError("malformed token payload") from e

    if actor.disabled:
        logger.warning("disabled_account_rejected", user_id=actor.user_id)
        raise PermissionDeniedError("access the ledger", actor.role.value, "Account is disabled")

    if not actor.is_admin and not actor.verified:
        logger.warning("unverified_account_rejected", user_id=actor.user_id)
        raise PermissionDeniedError(
            "access the ledger", actor.role.value, "Account is not verified by an admin"
        )

    return actor


def generate_secret_key() -> str:
    """Generate a secret suitable for AUTH_SECRET_KEY."""
    return secrets.token_urlsafe(32)
