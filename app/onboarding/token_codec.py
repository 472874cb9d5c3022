"""
app/onboarding/token_codec.py

Purpose: Onboarding token encoding and decoding

- Issues signed, self-contained onboarding tokens (HS256 JWT)
- Re-signs sessions with an envelope window that never outlives expires_at
- Verifies signature, structure and the envelope's own expiry
"""

import binascii
from typing import Optional

import jwt
from jwt.utils import base64url_decode, base64url_encode
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import MalformedTokenError, SignatureInvalidError, TokenExpiredError
from app.core.logging import get_logger
from app.onboarding.steps import OnboardingStep
from app.schemas.session import OnboardingSession
from utils.time_utils import now_ms, ms_to_seconds_ceil

logger = get_logger(__name__)

ALGORITHM = "HS256"

# Fixed session lifetime: 15 minutes from issuance
TOKEN_LIFETIME_MS = 15 * 60 * 1000

# Envelope expiry is checked here against an injectable clock, not by PyJWT
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "require": ["exp", "iat"],
}


def _secret() -> str:
    return settings.onboarding_secret


def issue(channel_identity: str, now: Optional[int] = None) -> str:
    """
    Issues a fresh onboarding token for a messaging principal.

    Args:
        channel_identity: Originating WhatsApp phone number
        now: Current epoch milliseconds (defaults to the wall clock)

    Returns:
        Signed token with step=started and a 15 minute lifetime

    Raises:
        ValueError: If channel_identity is empty
    """
    if not channel_identity or not channel_identity.strip():
        raise ValueError("channel_identity is required to issue an onboarding token")

    now = now_ms() if now is None else now
    session = OnboardingSession(
        channel_identity=channel_identity.strip(),
        step=OnboardingStep.STARTED,
        issued_at=now,
        expires_at=now + TOKEN_LIFETIME_MS,
    )

    logger.info(f"Issuing onboarding token for {session.channel_identity}")
    return encode(session, now=now)


def encode(session: OnboardingSession, now: Optional[int] = None) -> str:
    """
    Signs a session.

    The envelope's `exp` is min(lifetime, expires_at - now) from now, rounded
    up to a whole second, so it can never end before nor long after the
    embedded deadline.

    Raises:
        TokenExpiredError: If the session's deadline has already passed
    """
    now = now_ms() if now is None else now
    remaining = session.expires_at - now
    if remaining < 0:
        raise TokenExpiredError("Refusing to sign an expired onboarding session")

    window = min(TOKEN_LIFETIME_MS, remaining)
    claims = session.to_claims()
    claims["iat"] = now // 1000
    claims["exp"] = ms_to_seconds_ceil(now + window)

    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def _check_signature_segment(token: str) -> None:
    """
    Rejects tokens whose signature segment is not canonical base64url.

    base64 decoding ignores the unused low bits of the last character, so a
    changed final character can decode to the same bytes. Re-encoding and
    comparing closes that gap.
    """
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise MalformedTokenError("Onboarding token must have three segments")

    signature = parts[2]
    try:
        raw = base64url_decode(signature)
    except (binascii.Error, ValueError) as e:
        raise SignatureInvalidError() from e

    if base64url_encode(raw).decode("ascii") != signature:
        raise SignatureInvalidError()


def decode(token: str, now: Optional[int] = None) -> OnboardingSession:
    """
    Verifies and decodes an onboarding token.

    Checks, in order: structure, signature, required claims, envelope expiry,
    session payload shape. The embedded expires_at is checked by the validator.

    Raises:
        MalformedTokenError: Not a token, or payload is not a session
        SignatureInvalidError: Tampered token or wrong key
        TokenExpiredError: Envelope validity window has passed
    """
    if not isinstance(token, str) or not token.strip():
        raise MalformedTokenError("Empty onboarding token")

    token = token.strip()
    _check_signature_segment(token)

    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
    except jwt.InvalidSignatureError as e:
        raise SignatureInvalidError() from e
    except jwt.InvalidTokenError as e:
        raise MalformedTokenError(f"Undecodable onboarding token: {e}") from e

    now = now_ms() if now is None else now
    try:
        envelope_exp_ms = int(claims["exp"]) * 1000
    except (TypeError, ValueError) as e:
        raise MalformedTokenError("Onboarding token has a non-numeric exp") from e

    if now > envelope_exp_ms:
        raise TokenExpiredError("Onboarding token envelope expired")

    try:
        return OnboardingSession.model_validate(claims)
    except PydanticValidationError as e:
        raise MalformedTokenError("Onboarding token payload is not a session") from e
